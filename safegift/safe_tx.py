"""
Safe transaction descriptor and its EIP-712 hashing (Safe v1.3.0 layout).

The hash computed here matches what `getTransactionHash` returns on-chain, so
signatures can be produced without a round trip to the proxy.
"""

import logging
from dataclasses import astuple, dataclass, replace

from eth_abi import decode, encode
from eth_utils import (
    function_signature_to_4byte_selector,
    keccak,
    to_bytes,
    to_checksum_address,
)
from hexbytes import HexBytes

from safegift.exceptions import SafeGiftError
from safegift.settings import CALL, DELEGATE_CALL, ZERO_ADDRESS

logger = logging.getLogger(__name__)

DOMAIN_SEPARATOR_TYPEHASH = keccak(
    text="EIP712Domain(uint256 chainId,address verifyingContract)"
)
SAFE_TX_TYPEHASH = keccak(
    text="SafeTx(address to,uint256 value,bytes data,uint8 operation,"
    "uint256 safeTxGas,uint256 baseGas,uint256 gasPrice,address gasToken,"
    "address refundReceiver,uint256 nonce)"
)
PROXY_CREATION_TOPIC = keccak(text="ProxyCreation(address,address)")

SETUP_SIGNATURE = (
    "setup(address[],uint256,address,bytes,address,address,uint256,address)"
)
SETUP_TYPES = (
    "address[]",
    "uint256",
    "address",
    "bytes",
    "address",
    "address",
    "uint256",
    "address",
)
ENABLE_MODULE_SIGNATURE = "enableModule(address)"


def _as_bytes(data):
    if data is None:
        return b""
    if isinstance(data, str):
        return to_bytes(hexstr=data)
    return bytes(data)


@dataclass(frozen=True)
class SafeTx:
    to: str
    value: int = 0
    data: bytes = b""
    operation: int = CALL
    safe_tx_gas: int = 0
    base_gas: int = 0
    gas_price: int = 0
    gas_token: str = ZERO_ADDRESS
    refund_receiver: str = ZERO_ADDRESS
    nonce: int = 0

    def __post_init__(self):
        # frozen dataclass, normalise through object.__setattr__
        object.__setattr__(self, "to", to_checksum_address(self.to))
        object.__setattr__(self, "data", _as_bytes(self.data))
        object.__setattr__(
            self, "gas_token", to_checksum_address(self.gas_token)
        )
        object.__setattr__(
            self, "refund_receiver", to_checksum_address(self.refund_receiver)
        )
        if self.operation not in (CALL, DELEGATE_CALL):
            raise SafeGiftError(f"unknown operation {self.operation}")
        for name in ("value", "safe_tx_gas", "base_gas", "gas_price", "nonce"):
            if getattr(self, name) < 0:
                raise SafeGiftError(f"{name} must not be negative")

    def with_nonce(self, nonce):
        """
        Same descriptor bound to another execution slot
        """
        return replace(self, nonce=nonce)

    def struct_hash(self):
        return keccak(
            encode(
                [
                    "bytes32",
                    "address",
                    "uint256",
                    "bytes32",
                    "uint8",
                    "uint256",
                    "uint256",
                    "uint256",
                    "address",
                    "address",
                    "uint256",
                ],
                [
                    SAFE_TX_TYPEHASH,
                    self.to,
                    self.value,
                    keccak(self.data),
                    self.operation,
                    self.safe_tx_gas,
                    self.base_gas,
                    self.gas_price,
                    self.gas_token,
                    self.refund_receiver,
                    self.nonce,
                ],
            )
        )

    def encode_transaction_data(self, safe_address, chain_id):
        return HexBytes(
            b"\x19\x01"
            + domain_separator(safe_address, chain_id)
            + self.struct_hash()
        )

    def transaction_hash(self, safe_address, chain_id):
        tx_hash = HexBytes(
            keccak(self.encode_transaction_data(safe_address, chain_id))
        )
        logger.debug(
            "safe tx hash for %s nonce %d on chain %d: %s",
            safe_address,
            self.nonce,
            chain_id,
            tx_hash,
        )
        return tx_hash

    def as_call_args(self):
        """
        Positional arguments of getTransactionHash / encodeTransactionData
        """
        return astuple(self)

    def as_exec_args(self, signatures):
        """
        Positional arguments of execTransaction, the nonce is implied on-chain
        """
        return astuple(self)[:-1] + (_as_bytes(signatures),)


def domain_separator(safe_address, chain_id):
    return keccak(
        encode(
            ["bytes32", "uint256", "address"],
            [
                DOMAIN_SEPARATOR_TYPEHASH,
                chain_id,
                to_checksum_address(safe_address),
            ],
        )
    )


def encode_setup_calldata(
    owners,
    threshold,
    to=ZERO_ADDRESS,
    data=b"",
    fallback_handler=ZERO_ADDRESS,
    payment_token=ZERO_ADDRESS,
    payment=0,
    payment_receiver=ZERO_ADDRESS,
):
    if not 0 < threshold <= len(owners):
        raise SafeGiftError(
            f"threshold {threshold} invalid for {len(owners)} owners"
        )
    args = encode(
        SETUP_TYPES,
        [
            [to_checksum_address(o) for o in owners],
            threshold,
            to_checksum_address(to),
            _as_bytes(data),
            to_checksum_address(fallback_handler),
            to_checksum_address(payment_token),
            payment,
            to_checksum_address(payment_receiver),
        ],
    )
    return HexBytes(function_signature_to_4byte_selector(SETUP_SIGNATURE) + args)


def encode_enable_module_calldata(module):
    return HexBytes(
        function_signature_to_4byte_selector(ENABLE_MODULE_SIGNATURE)
        + encode(["address"], [to_checksum_address(module)])
    )


def parse_proxy_creation(logs):
    """
    Proxy address from the factory's ProxyCreation(address proxy, address
    singleton) event; both fields are unindexed in Safe v1.3.0.
    """
    for log in logs:
        topics = [HexBytes(t) for t in log["topics"]]
        if topics and topics[0] == PROXY_CREATION_TOPIC:
            proxy, _ = decode(["address", "address"], _as_bytes(log["data"]))
            return to_checksum_address(proxy)
    raise SafeGiftError("no ProxyCreation event in receipt logs")
