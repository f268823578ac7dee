"""
Tests for password hashing.
"""

import pytest

from campaigns.auth.passwords import hash_password, verify_password


class TestPasswords:
    def test_verify_round_trip(self):
        hashed = hash_password("Secret#1", rounds=4)
        assert hashed != "Secret#1"
        assert verify_password("Secret#1", hashed)

    def test_wrong_password(self):
        hashed = hash_password("Secret#1", rounds=4)
        assert not verify_password("Secret#2", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("Secret#1", rounds=4) != hash_password("Secret#1", rounds=4)

    @pytest.mark.parametrize("corrupt", ["", "not-a-hash", "$2b$04$short"])
    def test_malformed_hash_is_a_mismatch(self, corrupt):
        assert verify_password("Secret#1", corrupt) is False
