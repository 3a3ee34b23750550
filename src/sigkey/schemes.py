"""
Signature Schemes and Key Families

SignatureScheme values are the TLS wire code points (RFC 8446, section 4.2.3).
They are an external contract shared with the handshake layer and must never
be renumbered.
"""

from enum import Enum, IntEnum
from typing import Tuple, Union


class SignatureScheme(IntEnum):
    """TLS signature schemes, keyed by their 16-bit wire code."""
    # RSASSA-PKCS1-v1_5
    RSA_PKCS1_SHA1 = 0x0201
    RSA_PKCS1_SHA256 = 0x0401
    RSA_PKCS1_SHA384 = 0x0501
    RSA_PKCS1_SHA512 = 0x0601

    # ECDSA
    ECDSA_SHA1_LEGACY = 0x0203
    ECDSA_NISTP256_SHA256 = 0x0403
    ECDSA_NISTP384_SHA384 = 0x0503
    ECDSA_NISTP521_SHA512 = 0x0603

    # RSASSA-PSS with rsaEncryption public keys
    RSA_PSS_SHA256 = 0x0804
    RSA_PSS_SHA384 = 0x0805
    RSA_PSS_SHA512 = 0x0806

    # EdDSA
    ED25519 = 0x0807
    ED448 = 0x0808

    # Aliases
    ECDSA_P256_SHA256 = 0x0403
    ECDSA_P384_SHA384 = 0x0503

    @classmethod
    def from_wire(cls, code: int) -> "SignatureScheme":
        """Look up a scheme by wire code. Raises ValueError for unknown codes."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown signature scheme: 0x{code:04x}") from None

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES.get(self, f"Unknown (0x{int(self):04x})")


_DISPLAY_NAMES = {
    SignatureScheme.RSA_PKCS1_SHA1: "RSA-PKCS1-SHA1",
    SignatureScheme.RSA_PKCS1_SHA256: "RSA-PKCS1-SHA256",
    SignatureScheme.RSA_PKCS1_SHA384: "RSA-PKCS1-SHA384",
    SignatureScheme.RSA_PKCS1_SHA512: "RSA-PKCS1-SHA512",
    SignatureScheme.ECDSA_SHA1_LEGACY: "ECDSA-SHA1",
    SignatureScheme.ECDSA_NISTP256_SHA256: "ECDSA-P256-SHA256",
    SignatureScheme.ECDSA_NISTP384_SHA384: "ECDSA-P384-SHA384",
    SignatureScheme.ECDSA_NISTP521_SHA512: "ECDSA-P521-SHA512",
    SignatureScheme.RSA_PSS_SHA256: "RSA-PSS-SHA256",
    SignatureScheme.RSA_PSS_SHA384: "RSA-PSS-SHA384",
    SignatureScheme.RSA_PSS_SHA512: "RSA-PSS-SHA512",
    SignatureScheme.ED25519: "ED25519",
    SignatureScheme.ED448: "ED448",
}


class SignatureAlgorithm(Enum):
    """Coarse key algorithm reported to the handshake layer."""
    RSA = "RSA"
    ECDSA = "ECDSA"
    ED25519 = "Ed25519"


class KeyFamily(Enum):
    """Supported private key families, in resolution priority order."""
    RSA = "rsa"
    ECDSA_P256 = "p256"
    ECDSA_P384 = "p384"
    ED25519 = "ed25519"

    @property
    def algorithm(self) -> SignatureAlgorithm:
        if self is KeyFamily.RSA:
            return SignatureAlgorithm.RSA
        if self is KeyFamily.ED25519:
            return SignatureAlgorithm.ED25519
        return SignatureAlgorithm.ECDSA

    @property
    def schemes(self) -> Tuple[SignatureScheme, ...]:
        """Schemes a key of this family can service, most preferred first."""
        return FAMILY_SCHEMES[self]

    @classmethod
    def parse(cls, name: Union[str, "KeyFamily"]) -> "KeyFamily":
        """Parse a family from its config name (``rsa``, ``p256``, ...)."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown key family: {name!r}. Use: {[f.value for f in cls]}"
            ) from None


# Fixed resolution order. Disabling a family drops it from this sequence,
# it never reorders the rest.
FAMILY_PRIORITY: Tuple[KeyFamily, ...] = (
    KeyFamily.RSA,
    KeyFamily.ECDSA_P256,
    KeyFamily.ECDSA_P384,
    KeyFamily.ED25519,
)

ECDSA_FAMILIES: Tuple[KeyFamily, ...] = (KeyFamily.ECDSA_P256, KeyFamily.ECDSA_P384)
EDDSA_FAMILIES: Tuple[KeyFamily, ...] = (KeyFamily.ED25519,)

FAMILY_SCHEMES = {
    KeyFamily.RSA: (
        SignatureScheme.RSA_PSS_SHA512,
        SignatureScheme.RSA_PSS_SHA384,
        SignatureScheme.RSA_PSS_SHA256,
        SignatureScheme.RSA_PKCS1_SHA512,
        SignatureScheme.RSA_PKCS1_SHA384,
        SignatureScheme.RSA_PKCS1_SHA256,
    ),
    KeyFamily.ECDSA_P256: (SignatureScheme.ECDSA_NISTP256_SHA256,),
    KeyFamily.ECDSA_P384: (SignatureScheme.ECDSA_NISTP384_SHA384,),
    KeyFamily.ED25519: (SignatureScheme.ED25519,),
}
