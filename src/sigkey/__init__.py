"""
sigkey - Algorithm-Agnostic Signing Keys

Resolves opaque private key bytes to a signing key handle, reports the
TLS signature schemes it can service, and produces signers for them.

Supports:
- RSA (PKCS#1 v1.5 and PSS, SHA-256/384/512)
- ECDSA P-256 and P-384
- Ed25519
"""

from .der import KeyFormat, PrivateKeyDer
from .dispatch import resolve_any, resolve_ecdsa_only, resolve_eddsa_only
from .errors import SigningFailure, SigningKeyError, UnsupportedKeyFormat
from .keys import (
    SigningKey,
    RsaSigningKey,
    EcdsaSigningKeyP256,
    EcdsaSigningKeyP384,
    Ed25519SigningKey,
    choose_scheme,
)
from .registry import KeyTypeRegistry, RegistryEntry
from .schemes import KeyFamily, SignatureAlgorithm, SignatureScheme
from .signer import DeterministicSigner, RandomizedSigner, Signer

__all__ = [
    "KeyFormat",
    "PrivateKeyDer",
    "resolve_any",
    "resolve_ecdsa_only",
    "resolve_eddsa_only",
    "SigningFailure",
    "SigningKeyError",
    "UnsupportedKeyFormat",
    "SigningKey",
    "RsaSigningKey",
    "EcdsaSigningKeyP256",
    "EcdsaSigningKeyP384",
    "Ed25519SigningKey",
    "choose_scheme",
    "KeyTypeRegistry",
    "RegistryEntry",
    "KeyFamily",
    "SignatureAlgorithm",
    "SignatureScheme",
    "DeterministicSigner",
    "RandomizedSigner",
    "Signer",
]
