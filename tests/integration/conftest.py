#!/usr/bin/python3

import pytest
from brownie import Contract, web3
from brownie_tokens import ERC20
from eth_account import Account

from safegift import (
    GiftLedger,
    aggregate_signatures,
    encode_setup_calldata,
    gift_digest,
    parse_proxy_creation,
    settings,
)
from safegift.network import fork_specific_state, latest_timestamp
from testUtils import ExecuteEnableModule

gift_amount = 10 * 10**18
gift_supply = 100_000 * 10**18


@pytest.fixture(scope="module", autouse=True)
def forkSpecificState():
    """
    Pin the fork to the block the scenarios were written against
    """
    if settings.fork_url() is None:
        pytest.skip("ETH_URL is not set")
    fork_specific_state(web3)


@pytest.fixture(scope="function", autouse=True)
def isolate(fn_isolation):
    pass


@pytest.fixture(scope="module")
def deployer(accounts):
    return accounts[0]


@pytest.fixture(scope="module")
def owner1(accounts):
    """
    First Safe owner, with its key for signing
    """
    return accounts.from_mnemonic(settings.mnemonic(), count=1, offset=1)


@pytest.fixture(scope="module")
def owner2(accounts):
    """
    Second Safe owner, with its key for signing
    """
    return accounts.from_mnemonic(settings.mnemonic(), count=1, offset=2)


@pytest.fixture(scope="module")
def taker(accounts):
    return accounts[3]


@pytest.fixture(scope="module")
def otherTaker(accounts):
    return accounts[4]


@pytest.fixture(scope="module")
def notOwner(accounts):
    return accounts[5]


@pytest.fixture(scope="module")
def giftToken():
    """
    Test Token
    """
    return ERC20("Gift", "gft", 18)


@pytest.fixture(scope="module")
def gnosisSafeProxyFactory(GnosisSafeProxyFactory, deployer):
    return GnosisSafeProxyFactory.deploy({"from": deployer})


@pytest.fixture(scope="module")
def gnosisSafe(GnosisSafe, deployer):
    """
    Deploy the GnosisSafe singleton
    """
    return GnosisSafe.deploy({"from": deployer})


@pytest.fixture(scope="module")
def gnosisSafeProxy(gnosisSafeProxyFactory, gnosisSafe, owner1, owner2, deployer):
    """
    2-of-2 Safe proxy created through the factory
    """
    setupCalldata = encode_setup_calldata(
        [owner1.address, owner2.address], settings.SAFE_THRESHOLD
    )
    tx = gnosisSafeProxyFactory.createProxy(
        gnosisSafe, setupCalldata, {"from": deployer}
    )
    # returning a proxy instance with the singleton abi
    return Contract.from_abi(
        "GnosisSafe", parse_proxy_creation(tx.logs), gnosisSafe.abi
    )


@pytest.fixture(scope="module")
def safeGiftModule(SafeGiftModule, giftToken, gnosisSafeProxy, deployer):
    """
    Deploy SafeGiftModule and hand the whole token supply to the Safe
    """
    module = SafeGiftModule.deploy(
        giftToken, gnosisSafeProxy, {"from": deployer}
    )
    giftToken._mint_for_testing(gnosisSafeProxy, gift_supply)
    return module


@pytest.fixture(scope="module")
def enabledModule(safeGiftModule, gnosisSafeProxy, owner1, owner2, deployer):
    """
    SafeGiftModule enabled on the Safe by both owners
    """
    ExecuteEnableModule(
        safeGiftModule, gnosisSafeProxy, [owner1, owner2], deployer
    )
    assert gnosisSafeProxy.isModuleEnabled(safeGiftModule)
    return safeGiftModule


@pytest.fixture(scope="module")
def giftSignatures(safeGiftModule, owner1, owner2):
    """
    Owners' blob opening the gift for gift_amount tokens
    """
    return aggregate_signatures(
        gift_digest(safeGiftModule.address, gift_amount),
        [Account.from_key(o.private_key) for o in (owner1, owner2)],
        settings.SAFE_THRESHOLD,
    )


@pytest.fixture
def giftLedger(owner1, owner2, enabledModule):
    return GiftLedger([owner1.address, owner2.address], enabledModule.expiry())


@pytest.fixture
def blockTime():
    return lambda: latest_timestamp(web3)


@pytest.fixture(scope="module")
def giftAmount():
    return gift_amount
