"""Client-side helpers for driving a Safe multisig and its SafeGift module."""

from safegift import settings
from safegift.exceptions import (
    ForkError,
    GiftReverted,
    SafeGiftError,
    SignatureError,
)
from safegift.gift import GiftLedger, gift_digest
from safegift.safe_tx import (
    SafeTx,
    domain_separator,
    encode_enable_module_calldata,
    encode_setup_calldata,
    parse_proxy_creation,
)
from safegift.signatures import (
    OwnerSignature,
    aggregate_signatures,
    check_signatures,
    pack_signatures,
    recover_signer,
    sign_hash,
    split_signatures,
)

__version__ = "0.1.0"
