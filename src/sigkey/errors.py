"""
Error Taxonomy for Signing Keys

Two failure kinds reach callers:
- UnsupportedKeyFormat: no enabled key constructor accepted the input
- SigningFailure: a signing primitive failed at signing time

Both carry a fixed message. The cause of a failure is never attached,
so the shape of an error cannot be used as an oracle.
"""


class SigningKeyError(Exception):
    """Base class for all signing key errors."""


class UnsupportedKeyFormat(SigningKeyError):
    """No enabled key constructor accepted the private key bytes."""

    MESSAGE = "not supported"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class SigningFailure(SigningKeyError):
    """The signing primitive failed. Randomness failures land here too."""

    MESSAGE = "signing failed"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)
