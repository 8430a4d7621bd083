"""
Expectation model of the SafeGift module.

The module contract keeps a per-claimant "has received" flag and an expiry set
by the Safe owners. `GiftLedger` tracks the same state client-side so scenario
tests can state what the chain must do before asking it.
"""

import logging

from eth_abi.packed import encode_packed
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

from safegift.exceptions import GiftReverted

logger = logging.getLogger(__name__)

ONLY_OWNER = "onlyOwner"
ALREADY_RECEIVED = "already received the gift"
DEAL_EXPIRED = "deal is expired"


def gift_digest(module, amount):
    """
    Digest the owners sign to open the gift for `amount` tokens.

    It does not cover the recipient, so one blob serves any number of
    distinct claimants.
    """
    return HexBytes(
        keccak(
            encode_packed(
                ["address", "uint256"], [to_checksum_address(module), amount]
            )
        )
    )


class GiftLedger:
    def __init__(self, owners, expiry=0):
        self.owners = {to_checksum_address(o) for o in owners}
        self.expiry = expiry
        self.recipients = set()
        self.total_distributed = 0

    def set_expiry(self, caller, timestamp):
        if to_checksum_address(caller) not in self.owners:
            raise GiftReverted(ONLY_OWNER)
        logger.debug("expiry %d -> %d", self.expiry, timestamp)
        self.expiry = timestamp

    def is_expired(self, now):
        return self.expiry <= now

    def has_received(self, address):
        return to_checksum_address(address) in self.recipients

    def take_the_gift(self, recipient, amount, now):
        recipient = to_checksum_address(recipient)
        if self.is_expired(now):
            raise GiftReverted(DEAL_EXPIRED)
        if recipient in self.recipients:
            raise GiftReverted(ALREADY_RECEIVED)
        self.recipients.add(recipient)
        self.total_distributed += amount
        logger.debug("%s claimed %d", recipient, amount)
        return amount
