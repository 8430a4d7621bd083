"""
Owner signatures for Safe transactions.

A Safe verifies a blob of fixed-width `r || s || v` signatures and requires the
recovered owners to be strictly increasing, so the blob is always assembled in
ascending signer address order.
"""

import logging
from dataclasses import dataclass

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

from safegift.exceptions import SignatureError

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65
ETH_SIGN_PREFIX = b"\x19Ethereum Signed Message:\n32"


def _address_value(address):
    return int(address, 16)


def _as_digest(digest):
    digest = bytes(HexBytes(digest))
    if len(digest) != 32:
        raise SignatureError(
            "bytes32", f"digest must be 32 bytes, got {len(digest)}"
        )
    return digest


@dataclass(frozen=True)
class OwnerSignature:
    signer: str
    r: int
    s: int
    v: int

    def encode(self):
        return (
            self.r.to_bytes(32, byteorder="big")
            + self.s.to_bytes(32, byteorder="big")
            + self.v.to_bytes(1, byteorder="big")
        )

    @classmethod
    def decode(cls, raw, signer=None):
        if len(raw) != SIGNATURE_LENGTH:
            raise SignatureError(
                "GS020", f"signature must be {SIGNATURE_LENGTH} bytes"
            )
        return cls(
            signer,
            int.from_bytes(raw[:32], "big"),
            int.from_bytes(raw[32:64], "big"),
            raw[64],
        )


def sign_hash(account, digest):
    """
    Sign a 32 byte digest as is, without the eth_sign prefix.

    `account` is an eth_account LocalAccount; RFC 6979 nonces make the result
    deterministic.
    """
    digest = _as_digest(digest)
    signature = keys.PrivateKey(bytes(account.key)).sign_msg_hash(digest)
    logger.debug("%s signed %s", account.address, HexBytes(digest))
    return OwnerSignature(
        to_checksum_address(account.address),
        signature.r,
        signature.s,
        signature.v + 27,
    )


def pack_signatures(signatures):
    """
    Concatenate signatures in ascending signer address order
    """
    ordered = sorted(signatures, key=lambda sig: _address_value(sig.signer))
    for previous, current in zip(ordered, ordered[1:]):
        if _address_value(previous.signer) == _address_value(current.signer):
            raise SignatureError(
                "GS026", f"duplicate signer {current.signer}"
            )
    return HexBytes(b"".join(sig.encode() for sig in ordered))


def aggregate_signatures(digest, accounts, threshold=None):
    if threshold is not None and len(accounts) < threshold:
        raise SignatureError(
            "GS020",
            f"{len(accounts)} signers for a threshold of {threshold}",
        )
    blob = pack_signatures([sign_hash(account, digest) for account in accounts])
    logger.debug(
        "aggregated %d signatures for %s", len(accounts), HexBytes(digest)
    )
    return blob


def split_signatures(blob):
    blob = bytes(HexBytes(blob))
    if len(blob) % SIGNATURE_LENGTH:
        raise SignatureError(
            "GS020",
            f"blob length {len(blob)} is not a multiple of {SIGNATURE_LENGTH}",
        )
    return [
        OwnerSignature.decode(blob[i : i + SIGNATURE_LENGTH])
        for i in range(0, len(blob), SIGNATURE_LENGTH)
    ]


def recover_signer(digest, signature):
    """
    ecrecover for plain ECDSA (v 27/28) and eth_sign (v 31/32) signatures.

    Contract signatures (v 0) and approved hashes (v 1) need on-chain state
    and are rejected.
    """
    digest = _as_digest(digest)
    v = signature.v
    if v > 30:
        digest = keccak(ETH_SIGN_PREFIX + digest)
        v -= 4
    if v not in (27, 28):
        raise SignatureError(
            "GS021", f"unsupported signature type v={signature.v}"
        )
    try:
        public_key = keys.Signature(
            vrs=(v - 27, signature.r, signature.s)
        ).recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError):
        raise SignatureError("GS026", "signature does not recover")
    return public_key.to_checksum_address()


def check_signatures(digest, blob, owners, threshold):
    """
    Local mirror of the Safe's checkNSignatures for EOA signatures.

    Only the first `threshold` signatures are inspected. Every recovered
    signer must be an owner and strictly greater than the previous one.
    """
    blob = bytes(HexBytes(blob))
    if len(blob) < threshold * SIGNATURE_LENGTH:
        raise SignatureError("GS020", "signatures data too short")
    owner_values = {_address_value(owner) for owner in owners}
    last_owner = 0
    recovered = []
    for sig in split_signatures(blob[: threshold * SIGNATURE_LENGTH]):
        current = recover_signer(digest, sig)
        current_value = _address_value(current)
        if current_value <= last_owner or current_value not in owner_values:
            raise SignatureError(
                "GS026", f"invalid owner or ordering at {current}"
            )
        last_owner = current_value
        recovered.append(current)
    return recovered
