"""
Pytest Configuration and Fixtures
"""

import os
import sys
import pytest

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from sigkey.registry import FAMILIES_ENV, KeyTypeRegistry
from sigkey.schemes import SignatureScheme


def _der(key, fmt):
    return key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=fmt,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(autouse=True)
def clean_registry(monkeypatch):
    """Every test starts with all families enabled and no cached registry."""
    monkeypatch.delenv(FAMILIES_ENV, raising=False)
    KeyTypeRegistry.reset_instance()
    yield
    KeyTypeRegistry.reset_instance()


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def p256_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def p384_private_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ed25519_private_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def rsa_pkcs1_der(rsa_private_key):
    return _der(rsa_private_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def rsa_pkcs8_der(rsa_private_key):
    return _der(rsa_private_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def p256_sec1_der(p256_private_key):
    return _der(p256_private_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def p256_pkcs8_der(p256_private_key):
    return _der(p256_private_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def p384_sec1_der(p384_private_key):
    return _der(p384_private_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def p384_pkcs8_der(p384_private_key):
    return _der(p384_private_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def ed25519_pkcs8_der(ed25519_private_key):
    return _der(ed25519_private_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def p521_pkcs8_der():
    """A well-formed key of a curve no family handles."""
    key = ec.generate_private_key(ec.SECP521R1())
    return _der(key, serialization.PrivateFormat.PKCS8)


_VERIFY_HASHES = {
    SignatureScheme.RSA_PKCS1_SHA256: hashes.SHA256,
    SignatureScheme.RSA_PKCS1_SHA384: hashes.SHA384,
    SignatureScheme.RSA_PKCS1_SHA512: hashes.SHA512,
    SignatureScheme.RSA_PSS_SHA256: hashes.SHA256,
    SignatureScheme.RSA_PSS_SHA384: hashes.SHA384,
    SignatureScheme.RSA_PSS_SHA512: hashes.SHA512,
    SignatureScheme.ECDSA_NISTP256_SHA256: hashes.SHA256,
    SignatureScheme.ECDSA_NISTP384_SHA384: hashes.SHA384,
}


@pytest.fixture
def verify_signature():
    """
    Verify a signature against DER SubjectPublicKeyInfo bytes.

    Raises cryptography.exceptions.InvalidSignature on mismatch.
    """
    def _verify(public_der, scheme, message, signature):
        public_key = serialization.load_der_public_key(public_der)

        if scheme == SignatureScheme.ED25519:
            public_key.verify(signature, message)
            return True

        hash_cls = _VERIFY_HASHES[scheme]
        if scheme in (SignatureScheme.ECDSA_NISTP256_SHA256, SignatureScheme.ECDSA_NISTP384_SHA384):
            public_key.verify(signature, message, ec.ECDSA(hash_cls()))
        elif scheme in (SignatureScheme.RSA_PSS_SHA256, SignatureScheme.RSA_PSS_SHA384, SignatureScheme.RSA_PSS_SHA512):
            pss = padding.PSS(mgf=padding.MGF1(hash_cls()), salt_length=padding.PSS.DIGEST_LENGTH)
            public_key.verify(signature, message, pss, hash_cls())
        else:
            public_key.verify(signature, message, padding.PKCS1v15(), hash_cls())
        return True

    return _verify
