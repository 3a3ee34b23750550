"""
Generic Signer Adapters

One adapter per signing calling convention, not per algorithm:
- DeterministicSigner: the primitive always yields the same signature
  for the same key and message (Ed25519, RSA PKCS#1 v1.5)
- RandomizedSigner: the primitive consumes fresh randomness on every
  call (ECDSA, RSA-PSS)

Any failure inside a primitive surfaces as a bare SigningFailure.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import structlog

from .errors import SigningFailure
from .schemes import SignatureScheme

logger = structlog.get_logger()

P = TypeVar("P")


class Signer(ABC):
    """Signs handshake messages under one fixed signature scheme."""

    @property
    @abstractmethod
    def scheme(self) -> SignatureScheme:
        """The scheme every signature from this signer is made under."""
        pass

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Sign a message. Raises SigningFailure."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.scheme.display_name})"


class _PrimitiveSigner(Signer, Generic[P]):
    def __init__(self, primitive: P, scheme: SignatureScheme):
        self._primitive = primitive
        self._scheme = SignatureScheme(scheme)

    def __setattr__(self, name, value):
        if hasattr(self, "_scheme"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    @property
    def scheme(self) -> SignatureScheme:
        return self._scheme

    @property
    def primitive(self) -> P:
        return self._primitive

    def sign(self, message: bytes) -> bytes:
        if not isinstance(message, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected message bytes, got {type(message).__name__}")
        message = bytes(message)
        try:
            signature = self._invoke(message)
        except Exception:
            logger.warning("signing_failed", scheme=self._scheme.display_name)
            raise SigningFailure() from None
        return bytes(signature)

    @abstractmethod
    def _invoke(self, message: bytes) -> bytes:
        pass


class DeterministicSigner(_PrimitiveSigner[P]):
    """
    Adapter for deterministic primitives.

    The primitive must expose ``sign(message) -> bytes``; it is called
    exactly once per ``sign``.
    """

    def _invoke(self, message: bytes) -> bytes:
        return self._primitive.sign(message)


class RandomizedSigner(_PrimitiveSigner[P]):
    """
    Adapter for randomized primitives.

    The primitive must expose ``sign_randomized(message) -> bytes`` and draw
    a fresh random value from the process-wide CSPRNG on every call. Two
    signatures over the same message differ and both verify.
    """

    def _invoke(self, message: bytes) -> bytes:
        return self._primitive.sign_randomized(message)
