"""
Key Type Registry

The set of enabled key families is chosen once at startup. The registry
holds one (family, probe) entry per enabled family, always in the fixed
priority order RSA > ECDSA-P256 > ECDSA-P384 > Ed25519. Disabled families
are simply absent.

Configuration:
    SIGKEY_FAMILIES  comma-separated families to enable
                     (rsa, p256, p384, ed25519; default: all)
"""

import os
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import structlog

from .der import PrivateKeyDer
from .keys import KEY_TYPES, SigningKey
from .schemes import FAMILY_PRIORITY, KeyFamily

logger = structlog.get_logger()

FAMILIES_ENV = "SIGKEY_FAMILIES"

Probe = Callable[[PrivateKeyDer], SigningKey]


@dataclass(frozen=True)
class RegistryEntry:
    """One enabled key family and the constructor that probes for it."""
    family: KeyFamily
    probe: Probe


class KeyTypeRegistry:
    """
    Ordered, immutable list of key constructors to try.

    ``families`` selects which families are enabled; order of the argument
    is ignored, the fixed priority order always applies. ``probes`` may
    override the constructor for a family.
    """

    _instance: Optional["KeyTypeRegistry"] = None
    _lock = Lock()

    def __init__(
        self,
        families: Optional[Iterable[Union[KeyFamily, str]]] = None,
        probes: Optional[Dict[KeyFamily, Probe]] = None,
    ):
        if families is None:
            enabled = set(FAMILY_PRIORITY)
        else:
            enabled = {KeyFamily.parse(f) for f in families}

        probes = probes or {}
        self._entries: Tuple[RegistryEntry, ...] = tuple(
            RegistryEntry(family, probes.get(family, KEY_TYPES[family].from_der))
            for family in FAMILY_PRIORITY
            if family in enabled
        )

    @classmethod
    def from_env(cls) -> "KeyTypeRegistry":
        """Build a registry from SIGKEY_FAMILIES."""
        raw = os.environ.get(FAMILIES_ENV)
        if raw is None:
            return cls()

        names = [name for name in raw.split(",") if name.strip()]
        registry = cls(names)
        logger.info("key_families_configured",
                    families=[f.value for f in registry.families])
        return registry

    @classmethod
    def get_instance(cls) -> "KeyTypeRegistry":
        """Get the process-wide registry, configured on first use."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls.from_env()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide registry so the next use re-reads config."""
        with cls._lock:
            cls._instance = None

    @property
    def entries(self) -> Tuple[RegistryEntry, ...]:
        return self._entries

    @property
    def families(self) -> List[KeyFamily]:
        return [entry.family for entry in self._entries]

    def is_enabled(self, family: KeyFamily) -> bool:
        return any(entry.family is family for entry in self._entries)

    def restricted_to(self, families: Iterable[KeyFamily]) -> "KeyTypeRegistry":
        """A registry with only the given families, if enabled here."""
        wanted = set(families)
        kept = [entry for entry in self._entries if entry.family in wanted]
        return KeyTypeRegistry(
            families=[entry.family for entry in kept],
            probes={entry.family: entry.probe for entry in kept},
        )

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KeyTypeRegistry({[f.value for f in self.families]})"
