class SafeGiftError(Exception):
    """Base class for harness errors."""


class SignatureError(SafeGiftError):
    """
    A signature blob that the Safe verifier would reject.

    `reason` carries the Safe's own revert code where one exists (GS020, GS026).
    """

    def __init__(self, reason, message=None):
        self.reason = reason
        super().__init__(f"{reason}: {message}" if message else reason)


class ForkError(SafeGiftError):
    """The node refused to (re)fork or no fork source is configured."""


class GiftReverted(SafeGiftError):
    """Expected revert of the gift module, carrying its reason string."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)
