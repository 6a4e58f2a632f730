# tests for auth service — bcrypt hashes and the access / refresh token pair

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from jose import jwt

from journaling_app.config import settings
from journaling_app.services.auth_service import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    issue_token_pair,
    decode_token,
)


def _lifetime(payload: dict) -> timedelta:
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc) - datetime.now(timezone.utc)


class TestPasswords:
    """hashing a journal owner's password"""

    def test_hash_is_bcrypt(self):
        hashed = hash_password("morning pages")
        assert hashed.startswith("$2")
        assert "morning pages" not in hashed

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_round_trip(self):
        hashed = hash_password("morning pages")
        assert verify_password("morning pages", hashed) is True
        assert verify_password("Morning pages", hashed) is False

    def test_account_without_password(self):
        # oauth sign-ins store no hash
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False


class TestTokenPair:
    """tokens handed out at signup, login and refresh"""

    def test_pair_claims(self):
        pair = issue_token_pair("user123", "sam@email.com")
        access = decode_token(pair["accessToken"])
        refresh = decode_token(pair["refreshToken"])
        assert (access["sub"], access["email"], access["type"]) == ("user123", "sam@email.com", "access")
        assert (refresh["sub"], refresh["type"]) == ("user123", "refresh")

    def test_access_lifetime_from_settings(self):
        payload = decode_token(create_access_token({"sub": "user123"}))
        expected = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        assert expected - timedelta(seconds=30) < _lifetime(payload) <= expected

    def test_refresh_outlives_access(self):
        pair = issue_token_pair("user123", "sam@email.com")
        assert _lifetime(decode_token(pair["refreshToken"])) > _lifetime(decode_token(pair["accessToken"]))

    def test_explicit_expiry(self):
        payload = decode_token(create_access_token({"sub": "user123"}, expires_delta=timedelta(minutes=5)))
        assert _lifetime(payload) <= timedelta(minutes=5)

    def test_caller_claims_untouched(self):
        claims = {"sub": "user123"}
        create_refresh_token(claims)
        assert claims == {"sub": "user123"}


class TestDecode:
    """tokens that must not authenticate anyone"""

    def test_expired(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(seconds=-10))
        assert decode_token(token) is None

    def test_signed_with_another_secret(self):
        token = jwt.encode({"sub": "user123", "type": "access"}, "not-the-secret", algorithm=settings.JWT_ALGORITHM)
        assert decode_token(token) is None

    def test_secret_rotation_invalidates(self):
        token = create_access_token({"sub": "user123"})
        with patch.object(settings, "JWT_SECRET", "rotated-secret"):
            assert decode_token(token) is None

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed(self, token):
        assert decode_token(token) is None
