"""
Unit tests for password hashing.

Tests cover:
- Hashes never equal the plaintext
- Salted hashes differ for the same password
- Verification of matching and non-matching passwords
- Malformed hash handling
"""

import pytest

from shelf_common.security import DEFAULT_BCRYPT_ROUNDS, PasswordCodec


@pytest.fixture
def codec() -> PasswordCodec:
    return PasswordCodec(rounds=4)


class TestPasswordHashing:
    """Test hash generation."""

    def test_hash_is_not_plaintext(self, codec):
        """Stored credential never equals the password."""
        hashed = codec.hash("hunter22")

        assert hashed != "hunter22"
        assert hashed.startswith("$2b$04$")

    def test_same_password_hashes_differently(self, codec):
        """Each hash carries its own salt."""
        assert codec.hash("hunter22") != codec.hash("hunter22")

    def test_empty_password_rejected(self, codec):
        with pytest.raises(ValueError):
            codec.hash("")

    def test_default_rounds(self):
        assert PasswordCodec().rounds == DEFAULT_BCRYPT_ROUNDS == 12


class TestPasswordVerification:
    """Test hash verification."""

    def test_verify_correct_password(self, codec):
        hashed = codec.hash("correct-horse")

        assert codec.verify("correct-horse", hashed) is True

    def test_verify_wrong_password(self, codec):
        hashed = codec.hash("correct-horse")

        assert codec.verify("battery-staple", hashed) is False

    def test_verify_is_case_sensitive(self, codec):
        hashed = codec.hash("Secret123")

        assert codec.verify("secret123", hashed) is False

    def test_hash_from_other_cost_factor_verifies(self, codec):
        """Cost factor is read from the hash itself."""
        hashed = PasswordCodec(rounds=5).hash("portable")

        assert codec.verify("portable", hashed) is True

    @pytest.mark.parametrize("stored", ["", "not-a-hash", "$2b$04$short"])
    def test_malformed_hash_does_not_match(self, codec, stored):
        assert codec.verify("anything", stored) is False

    def test_empty_password_does_not_match(self, codec):
        assert codec.verify("", codec.hash("x")) is False
