"""
Unit tests for Ed25519 signing.
"""
import base64

import pytest
from nacl.signing import SigningKey

from core.crypto.signing import Ed25519Signer, SigningKeyError, verify_signature

SEED = bytes(range(32))
SEED_B64 = base64.b64encode(SEED).decode()


class TestEd25519Signer:
    def test_signature_verifies_with_public_key(self):
        signer = Ed25519Signer(SEED_B64)
        signature = signer.sign(b"payload")
        assert verify_signature(b"payload", signature, signer.public_key_b64)

    def test_public_key_matches_seed(self):
        expected = base64.b64encode(SigningKey(SEED).verify_key.encode()).decode()
        assert Ed25519Signer(SEED_B64).public_key_b64 == expected

    def test_accepts_64_byte_secret_key(self):
        secret = SEED + SigningKey(SEED).verify_key.encode()
        signer = Ed25519Signer(base64.b64encode(secret).decode())
        assert signer.public_key_b64 == Ed25519Signer(SEED_B64).public_key_b64

    @pytest.mark.parametrize("key", ["", "not base64!", base64.b64encode(b"short").decode()])
    def test_rejects_bad_keys(self, key):
        with pytest.raises(SigningKeyError):
            Ed25519Signer(key)

    def test_signing_is_deterministic(self):
        signer = Ed25519Signer(SEED_B64)
        assert signer.sign(b"same") == signer.sign(b"same")


class TestVerifySignature:
    def test_tampered_message_fails(self):
        signer = Ed25519Signer(SEED_B64)
        signature = signer.sign(b"payload")
        assert not verify_signature(b"payload!", signature, signer.public_key_b64)

    def test_wrong_public_key_fails(self):
        signature = Ed25519Signer(SEED_B64).sign(b"payload")
        other = Ed25519Signer(base64.b64encode(bytes(range(32, 64))).decode())
        assert not verify_signature(b"payload", signature, other.public_key_b64)

    @pytest.mark.parametrize("index", [0, 31, 63])
    def test_flipped_signature_byte_fails(self, index):
        signer = Ed25519Signer(SEED_B64)
        raw = bytearray(base64.b64decode(signer.sign(b"payload")))
        raw[index] ^= 0x01
        flipped = base64.b64encode(bytes(raw)).decode()
        assert not verify_signature(b"payload", flipped, signer.public_key_b64)

    def test_malformed_inputs_fail_without_raising(self):
        assert not verify_signature(b"payload", "@@@", "@@@")
        assert not verify_signature(b"payload", base64.b64encode(b"x").decode(), SEED_B64)
