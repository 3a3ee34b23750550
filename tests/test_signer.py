"""
Tests for the Generic Signer Adapters

Both calling conventions must call the primitive once per signature and
collapse every primitive failure into a bare SigningFailure.
"""

import pytest
from sigkey.errors import SigningFailure
from sigkey.schemes import SignatureScheme
from sigkey.signer import DeterministicSigner, RandomizedSigner


class CountingPrimitive:
    """Records calls for both conventions."""

    def __init__(self):
        self.calls = []

    def sign(self, message):
        self.calls.append(("sign", message))
        return b"det:" + message

    def sign_randomized(self, message):
        self.calls.append(("sign_randomized", message))
        return bytearray(b"rnd:" + message + bytes([len(self.calls)]))


class FailingPrimitive:
    def sign(self, message):
        raise ValueError("internal key state detail")

    def sign_randomized(self, message):
        raise OSError("entropy source unavailable")


class TestDeterministicSigner:
    """Test the deterministic adapter."""

    def test_calls_primitive_once(self):
        primitive = CountingPrimitive()
        signer = DeterministicSigner(primitive, SignatureScheme.ED25519)

        signature = signer.sign(b"hello")

        assert signature == b"det:hello"
        assert primitive.calls == [("sign", b"hello")]

    def test_scheme(self):
        signer = DeterministicSigner(CountingPrimitive(), SignatureScheme.RSA_PKCS1_SHA256)

        assert signer.scheme is SignatureScheme.RSA_PKCS1_SHA256
        assert "RSA-PKCS1-SHA256" in repr(signer)

    def test_scheme_from_wire_code(self):
        signer = DeterministicSigner(CountingPrimitive(), 0x0807)
        assert signer.scheme is SignatureScheme.ED25519

    def test_failure_is_opaque(self):
        """Primitive errors must not leak through the exception."""
        signer = DeterministicSigner(FailingPrimitive(), SignatureScheme.ED25519)

        with pytest.raises(SigningFailure) as exc_info:
            signer.sign(b"hello")

        assert str(exc_info.value) == "signing failed"
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True

    @pytest.mark.parametrize("message", [5, "text", None, [1, 2]])
    def test_rejects_non_bytes_message(self, message):
        """Only bytes-like messages are signed; ints are not turned into zero bytes."""
        primitive = CountingPrimitive()
        signer = DeterministicSigner(primitive, SignatureScheme.ED25519)

        with pytest.raises(TypeError):
            signer.sign(message)

        assert primitive.calls == []

    def test_accepts_bytes_like(self):
        primitive = CountingPrimitive()
        signer = DeterministicSigner(primitive, SignatureScheme.ED25519)

        assert signer.sign(bytearray(b"ab")) == b"det:ab"
        assert signer.sign(memoryview(b"cd")) == b"det:cd"

    def test_scheme_is_property(self):
        signer = DeterministicSigner(CountingPrimitive(), SignatureScheme.ED25519)

        assert isinstance(type(signer).scheme, property)
        with pytest.raises(AttributeError):
            signer.scheme = SignatureScheme.ED448

    def test_immutable(self):
        signer = DeterministicSigner(CountingPrimitive(), SignatureScheme.ED25519)

        with pytest.raises(AttributeError):
            signer._scheme = SignatureScheme.ED448


class TestRandomizedSigner:
    """Test the randomized adapter."""

    def test_calls_randomized_primitive_once_per_sign(self):
        primitive = CountingPrimitive()
        signer = RandomizedSigner(primitive, SignatureScheme.ECDSA_P256_SHA256)

        first = signer.sign(b"msg")
        second = signer.sign(b"msg")

        assert primitive.calls == [("sign_randomized", b"msg"), ("sign_randomized", b"msg")]
        assert first != second
        assert isinstance(first, bytes)

    def test_randomness_failure_collapses(self):
        """A randomness failure looks like any other signing failure."""
        signer = RandomizedSigner(FailingPrimitive(), SignatureScheme.RSA_PSS_SHA256)

        with pytest.raises(SigningFailure) as exc_info:
            signer.sign(b"msg")

        assert str(exc_info.value) == "signing failed"
        assert exc_info.value.__cause__ is None

    def test_same_failure_shape_for_both_conventions(self):
        det = DeterministicSigner(FailingPrimitive(), SignatureScheme.ED25519)
        rnd = RandomizedSigner(FailingPrimitive(), SignatureScheme.ECDSA_P256_SHA256)

        with pytest.raises(SigningFailure) as det_info:
            det.sign(b"m")
        with pytest.raises(SigningFailure) as rnd_info:
            rnd.sign(b"m")

        assert type(det_info.value) is type(rnd_info.value)
        assert det_info.value.args == rnd_info.value.args
