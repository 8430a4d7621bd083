import logging

from brownie import (
    Contract,
    GnosisSafe,
    GnosisSafeProxyFactory,
    SafeGiftModule,
    accounts,
    network,
    web3,
)
from brownie_tokens import ERC20
from eth_account import Account

from safegift import (
    SafeTx,
    aggregate_signatures,
    encode_enable_module_calldata,
    encode_setup_calldata,
    parse_proxy_creation,
    settings,
)
from safegift.network import fork_specific_state

logger = logging.getLogger("deploy")

GIFT_SUPPLY = 100_000 * 10**18


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if network.show_active().startswith("hardhat"):
        fork_specific_state(web3)

    deployer = accounts[0]
    owners = [
        accounts.from_mnemonic(settings.mnemonic(), count=1, offset=i)
        for i in (1, 2)
    ]

    giftToken = ERC20("Gift", "gft", 18)
    factory = GnosisSafeProxyFactory.deploy({"from": deployer})
    singleton = GnosisSafe.deploy({"from": deployer})

    setupCalldata = encode_setup_calldata(
        [o.address for o in owners], settings.SAFE_THRESHOLD
    )
    tx = factory.createProxy(singleton, setupCalldata, {"from": deployer})
    safe = Contract.from_abi(
        "GnosisSafe", parse_proxy_creation(tx.logs), singleton.abi
    )
    logger.info("safe proxy %s", safe.address)

    module = SafeGiftModule.deploy(giftToken, safe, {"from": deployer})
    giftToken._mint_for_testing(safe, GIFT_SUPPLY)
    logger.info("gift module %s", module.address)

    safeTx = SafeTx(
        safe.address,
        data=encode_enable_module_calldata(module.address),
        nonce=safe.nonce(),
    )
    txHash = safe.getTransactionHash(*safeTx.as_call_args())
    signatures = aggregate_signatures(
        txHash,
        [Account.from_key(o.private_key) for o in owners],
        settings.SAFE_THRESHOLD,
    )
    safe.execTransaction(*safeTx.as_exec_args(signatures), {"from": deployer})

    assert safe.isModuleEnabled(module)
    logger.info("module enabled on %s", safe.address)
