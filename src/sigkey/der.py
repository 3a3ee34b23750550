"""
Private Key Encodings

A PrivateKeyDer is the opaque DER blob handed to the dispatcher, optionally
tagged with the container it claims to be. The container is read from the
outer DER structure; a tag that disagrees with it is rejected, and the
container then decides which key families may parse the bytes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from .errors import UnsupportedKeyFormat


class KeyFormat(Enum):
    """Private key container formats."""
    PKCS1 = "pkcs1"  # RSAPrivateKey (RFC 8017)
    SEC1 = "sec1"    # ECPrivateKey (RFC 5915)
    PKCS8 = "pkcs8"  # OneAsymmetricKey (RFC 5958), any algorithm


_DER_SEQUENCE = 0x30
_DER_INTEGER = 0x02
_DER_OCTET_STRING = 0x04

# All three containers open with SEQUENCE { INTEGER version, ... }.
# The element after the version tells them apart.
_CONTAINER_BY_SECOND_TAG = {
    _DER_SEQUENCE: KeyFormat.PKCS8,      # AlgorithmIdentifier
    _DER_INTEGER: KeyFormat.PKCS1,       # modulus
    _DER_OCTET_STRING: KeyFormat.SEC1,   # privateKey
}


def _read_tlv(data: bytes, offset: int) -> Tuple[int, int, int]:
    """Read one DER header. Returns (tag, value_start, value_end)."""
    if offset + 2 > len(data):
        raise ValueError("truncated DER header")

    tag = data[offset]
    first = data[offset + 1]
    pos = offset + 2
    if first < 0x80:
        length = first
    else:
        count = first & 0x7F
        if count == 0 or count > 4 or pos + count > len(data):
            raise ValueError("bad DER length")
        length = int.from_bytes(data[pos:pos + count], "big")
        pos += count

    end = pos + length
    if end > len(data):
        raise ValueError("truncated DER value")
    return tag, pos, end


def detect_container(data: bytes) -> Optional[KeyFormat]:
    """Identify the private key container from its outer DER structure."""
    try:
        tag, start, end = _read_tlv(data, 0)
        if tag != _DER_SEQUENCE or end != len(data):
            return None

        tag, _, version_end = _read_tlv(data, start)
        if tag != _DER_INTEGER or version_end >= end:
            return None

        tag, _, _ = _read_tlv(data, version_end)
    except ValueError:
        return None
    return _CONTAINER_BY_SECOND_TAG.get(tag)


@dataclass(frozen=True)
class PrivateKeyDer:
    """DER private key bytes plus the container tag, if known.

    ``format=None`` means untagged: the container is taken from the bytes.
    """
    data: bytes
    format: Optional[KeyFormat] = None

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        # Key material stays out of reprs and logs
        tag = self.format.value if self.format else "untagged"
        return f"PrivateKeyDer({tag}, {len(self.data)} bytes)"

    @property
    def container(self) -> Optional[KeyFormat]:
        """The container the bytes actually are, or None if unrecognized."""
        return detect_container(self.data)

    def accepts(self, *formats: KeyFormat) -> bool:
        """
        Whether a constructor handling ``formats`` may parse these bytes.

        False when the bytes are no known container, when a tag disagrees
        with the bytes, or when the container is not one of ``formats``.
        """
        container = self.container
        if container is None:
            return False
        if self.format is not None and self.format is not container:
            return False
        return container in formats

    @classmethod
    def pkcs1(cls, data: bytes) -> "PrivateKeyDer":
        return cls(data, KeyFormat.PKCS1)

    @classmethod
    def sec1(cls, data: bytes) -> "PrivateKeyDer":
        return cls(data, KeyFormat.SEC1)

    @classmethod
    def pkcs8(cls, data: bytes) -> "PrivateKeyDer":
        return cls(data, KeyFormat.PKCS8)

    @classmethod
    def coerce(cls, value: Union["PrivateKeyDer", bytes, bytearray, memoryview]) -> "PrivateKeyDer":
        """Wrap raw bytes as an untagged encoding; pass PrivateKeyDer through."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(bytes(value))
        raise TypeError(f"Expected private key bytes, got {type(value).__name__}")

    @classmethod
    def from_pem(cls, pem: Union[str, bytes]) -> "PrivateKeyDer":
        """
        Decode an unencrypted PEM private key.

        The result is re-encoded in the key's native container: PKCS#1 for
        RSA, SEC1 for EC, PKCS#8 for everything else. Encrypted or
        malformed PEM raises UnsupportedKeyFormat.
        """
        if isinstance(pem, str):
            pem = pem.encode("ascii", errors="replace")

        try:
            private_key = serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm):
            raise UnsupportedKeyFormat() from None

        if isinstance(private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
            key_format = KeyFormat.PKCS1 if isinstance(private_key, rsa.RSAPrivateKey) else KeyFormat.SEC1
            private_format = serialization.PrivateFormat.TraditionalOpenSSL
        else:
            key_format = KeyFormat.PKCS8
            private_format = serialization.PrivateFormat.PKCS8

        data = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=private_format,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls(data, key_format)
