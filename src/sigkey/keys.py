"""
Typed Signing Keys

Each key family wraps a `cryptography` private key and knows:
- which containers it may be decoded from
- which signature schemes it services, in its own preference order
- which signer adapter (deterministic or randomized) serves each scheme

SigningKey is the algorithm-agnostic handle. It is immutable once built and
may be shared by any number of concurrent handshakes.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Type, Union

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

from .der import KeyFormat, PrivateKeyDer
from .errors import UnsupportedKeyFormat
from .schemes import KeyFamily, SignatureAlgorithm, SignatureScheme
from .signer import DeterministicSigner, RandomizedSigner, Signer

logger = structlog.get_logger()

SchemeLike = Union[SignatureScheme, int]


# ---------------------------------------------------------------------------
# Primitives: one signing call each, bound to a key and its parameters
# ---------------------------------------------------------------------------

class Pkcs1v15Primitive:
    """RSASSA-PKCS1-v1_5. Deterministic."""

    def __init__(self, key: rsa.RSAPrivateKey, hash_cls: Type[hashes.HashAlgorithm]):
        self._key = key
        self._hash_cls = hash_cls

    def sign(self, message: bytes) -> bytes:
        return self._key.sign(message, padding.PKCS1v15(), self._hash_cls())


class PssPrimitive:
    """RSASSA-PSS with MGF1 and a salt as long as the digest (RFC 8446)."""

    def __init__(self, key: rsa.RSAPrivateKey, hash_cls: Type[hashes.HashAlgorithm]):
        self._key = key
        self._hash_cls = hash_cls

    def sign_randomized(self, message: bytes) -> bytes:
        # OpenSSL draws a fresh salt for every call
        pss = padding.PSS(
            mgf=padding.MGF1(self._hash_cls()),
            salt_length=padding.PSS.DIGEST_LENGTH,
        )
        return self._key.sign(message, pss, self._hash_cls())


class EcdsaPrimitive:
    """ECDSA with a DER-encoded (r, s) signature."""

    def __init__(self, key: ec.EllipticCurvePrivateKey, hash_cls: Type[hashes.HashAlgorithm]):
        self._key = key
        self._hash_cls = hash_cls

    def sign_randomized(self, message: bytes) -> bytes:
        # OpenSSL draws a fresh nonce for every call
        return self._key.sign(message, ec.ECDSA(self._hash_cls()))


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------

class SigningKey(ABC):
    """
    Algorithm-agnostic signing key handle.

    Reports the schemes the key supports and hands out signers bound to
    one of them. Subclasses set ``family`` and ``accepted_formats`` and
    bind each of the family's schemes to an adapter.
    """

    family: KeyFamily
    accepted_formats: Tuple[KeyFormat, ...] = ()

    def __init__(self, private_key: Any):
        bindings = self._bind_schemes(private_key)
        schemes = tuple(s for s in self.family.schemes if s in bindings)
        if not schemes:
            raise UnsupportedKeyFormat()

        self._private_key = private_key
        self._schemes = schemes
        self._scheme_set = frozenset(schemes)
        self._bindings = MappingProxyType(bindings)

    def __setattr__(self, name, value):
        if hasattr(self, "_bindings"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    @classmethod
    def from_der(cls, der: Union[PrivateKeyDer, bytes]) -> "SigningKey":
        """
        Decode a private key of this family.

        Raises UnsupportedKeyFormat when the container tag, the encoding,
        or the key algorithm does not match.
        """
        der = PrivateKeyDer.coerce(der)
        if not der.data or not der.accepts(*cls.accepted_formats):
            raise UnsupportedKeyFormat()

        try:
            private_key = serialization.load_der_private_key(der.data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm):
            raise UnsupportedKeyFormat() from None

        if not cls._matches(private_key):
            raise UnsupportedKeyFormat()
        return cls(private_key)

    @classmethod
    @abstractmethod
    def _matches(cls, private_key: Any) -> bool:
        """Whether a decoded key belongs to this family."""
        pass

    @abstractmethod
    def _bind_schemes(self, private_key: Any) -> Dict[SignatureScheme, Tuple[type, Any]]:
        """Map each scheme to ``(adapter class, primitive)``."""
        pass

    @property
    def algorithm(self) -> SignatureAlgorithm:
        return self.family.algorithm

    @property
    def schemes(self) -> Tuple[SignatureScheme, ...]:
        """Supported schemes in the key's own preference order."""
        return self._schemes

    def supported_schemes(self) -> FrozenSet[SignatureScheme]:
        return self._scheme_set

    def public_key(self) -> bytes:
        """DER SubjectPublicKeyInfo of the matching public key."""
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def signer_for(self, scheme: SchemeLike) -> Signer:
        """Build a signer for a scheme this key supports."""
        scheme = SignatureScheme.from_wire(int(scheme))
        binding = self._bindings.get(scheme)
        if binding is None:
            raise ValueError(
                f"{self.family.value} key does not support {scheme.display_name}"
            )
        adapter_cls, primitive = binding
        return adapter_cls(primitive, scheme)

    def choose_signer(self, offered: Iterable[SchemeLike]) -> Optional[Signer]:
        """
        Pick the first scheme in ``offered`` this key supports.

        The caller's order wins over the key's own preference order.
        Unknown wire codes are skipped. Returns None when nothing matches.
        """
        for candidate in offered:
            try:
                scheme = SignatureScheme.from_wire(int(candidate))
            except ValueError:
                continue
            if scheme in self._scheme_set:
                logger.debug("signature_scheme_chosen",
                             family=self.family.value,
                             scheme=scheme.display_name)
                return self.signer_for(scheme)

        logger.debug("no_mutual_signature_scheme", family=self.family.value)
        return None

    def __repr__(self) -> str:
        names = ", ".join(s.display_name for s in self._schemes)
        return f"{type(self).__name__}([{names}])"


def choose_scheme(key: SigningKey, offered: Iterable[SchemeLike]) -> Optional[Signer]:
    """Return a signer for the first offered scheme ``key`` supports, or None."""
    return key.choose_signer(offered)


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

_HASHES = {
    SignatureScheme.RSA_PKCS1_SHA256: hashes.SHA256,
    SignatureScheme.RSA_PKCS1_SHA384: hashes.SHA384,
    SignatureScheme.RSA_PKCS1_SHA512: hashes.SHA512,
    SignatureScheme.RSA_PSS_SHA256: hashes.SHA256,
    SignatureScheme.RSA_PSS_SHA384: hashes.SHA384,
    SignatureScheme.RSA_PSS_SHA512: hashes.SHA512,
    SignatureScheme.ECDSA_NISTP256_SHA256: hashes.SHA256,
    SignatureScheme.ECDSA_NISTP384_SHA384: hashes.SHA384,
}

_PSS_SCHEMES = frozenset({
    SignatureScheme.RSA_PSS_SHA256,
    SignatureScheme.RSA_PSS_SHA384,
    SignatureScheme.RSA_PSS_SHA512,
})


class RsaSigningKey(SigningKey):
    """RSA key from a PKCS#1 or PKCS#8 container."""

    family = KeyFamily.RSA
    accepted_formats = (KeyFormat.PKCS1, KeyFormat.PKCS8)

    @classmethod
    def _matches(cls, private_key: Any) -> bool:
        return isinstance(private_key, rsa.RSAPrivateKey)

    def _bind_schemes(self, private_key: rsa.RSAPrivateKey):
        bindings = {}
        for scheme in self.family.schemes:
            hash_cls = _HASHES[scheme]
            if scheme in _PSS_SCHEMES:
                bindings[scheme] = (RandomizedSigner, PssPrimitive(private_key, hash_cls))
            else:
                bindings[scheme] = (DeterministicSigner, Pkcs1v15Primitive(private_key, hash_cls))
        return bindings


class EcdsaSigningKey(SigningKey):
    """ECDSA key from a SEC1 or PKCS#8 container, on one fixed curve."""

    accepted_formats = (KeyFormat.SEC1, KeyFormat.PKCS8)
    curve: Type[ec.EllipticCurve]

    @classmethod
    def _matches(cls, private_key: Any) -> bool:
        return (
            isinstance(private_key, ec.EllipticCurvePrivateKey)
            and isinstance(private_key.curve, cls.curve)
        )

    def _bind_schemes(self, private_key: ec.EllipticCurvePrivateKey):
        return {
            scheme: (RandomizedSigner, EcdsaPrimitive(private_key, _HASHES[scheme]))
            for scheme in self.family.schemes
        }


class EcdsaSigningKeyP256(EcdsaSigningKey):
    family = KeyFamily.ECDSA_P256
    curve = ec.SECP256R1


class EcdsaSigningKeyP384(EcdsaSigningKey):
    family = KeyFamily.ECDSA_P384
    curve = ec.SECP384R1


class Ed25519SigningKey(SigningKey):
    """Ed25519 key from a PKCS#8 container. Signatures are 64 bytes."""

    family = KeyFamily.ED25519
    accepted_formats = (KeyFormat.PKCS8,)

    @classmethod
    def _matches(cls, private_key: Any) -> bool:
        return isinstance(private_key, ed25519.Ed25519PrivateKey)

    def _bind_schemes(self, private_key: ed25519.Ed25519PrivateKey):
        # The key object itself is the deterministic primitive
        return {SignatureScheme.ED25519: (DeterministicSigner, private_key)}


KEY_TYPES: Dict[KeyFamily, Type[SigningKey]] = {
    KeyFamily.RSA: RsaSigningKey,
    KeyFamily.ECDSA_P256: EcdsaSigningKeyP256,
    KeyFamily.ECDSA_P384: EcdsaSigningKeyP384,
    KeyFamily.ED25519: Ed25519SigningKey,
}
