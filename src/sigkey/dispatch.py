"""
Key Type Dispatcher

Turns untrusted private key bytes into a SigningKey by trying each enabled
key family in priority order. The first constructor that accepts the bytes
wins. Bytes that would parse under more than one family therefore always
resolve to the earliest family, RSA > ECDSA-P256 > ECDSA-P384 > Ed25519.

Why a candidate was rejected is never reported; the dispatcher only moves
on to the next one.
"""

from typing import Iterable, Optional, Union

import structlog

from .der import PrivateKeyDer
from .errors import UnsupportedKeyFormat
from .keys import SigningKey
from .registry import KeyTypeRegistry, RegistryEntry
from .schemes import ECDSA_FAMILIES, EDDSA_FAMILIES

logger = structlog.get_logger()

KeyInput = Union[PrivateKeyDer, bytes, bytearray, memoryview]


def _first_success(der: KeyInput, entries: Iterable[RegistryEntry]) -> SigningKey:
    der = PrivateKeyDer.coerce(der)

    for entry in entries:
        try:
            key = entry.probe(der)
        except UnsupportedKeyFormat:
            logger.debug("key_probe_rejected", family=entry.family.value)
            continue

        logger.info("signing_key_resolved",
                    family=entry.family.value,
                    schemes=[s.display_name for s in key.schemes])
        return key

    logger.info("signing_key_unsupported", key_format=repr(der))
    raise UnsupportedKeyFormat()


def resolve_any(der: KeyInput, registry: Optional[KeyTypeRegistry] = None) -> SigningKey:
    """
    Extract any supported key from the given DER input.

    Raises UnsupportedKeyFormat if no enabled family accepts it.
    """
    if registry is None:
        registry = KeyTypeRegistry.get_instance()
    return _first_success(der, registry)


def resolve_ecdsa_only(der: KeyInput, registry: Optional[KeyTypeRegistry] = None) -> SigningKey:
    """Extract a supported ECDSA key (P-256, then P-384)."""
    if registry is None:
        registry = KeyTypeRegistry.get_instance()
    return _first_success(der, registry.restricted_to(ECDSA_FAMILIES))


def resolve_eddsa_only(der: KeyInput, registry: Optional[KeyTypeRegistry] = None) -> SigningKey:
    """Extract a supported EdDSA key (Ed25519)."""
    if registry is None:
        registry = KeyTypeRegistry.get_instance()
    return _first_success(der, registry.restricted_to(EDDSA_FAMILIES))
