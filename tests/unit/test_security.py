"""Unit tests for security utilities."""
import pytest
import jwt
from datetime import timedelta
from unittest.mock import Mock

from globalpoll.core import config
from globalpoll.core.exceptions import AuthenticationError
from globalpoll.core.security import (
    create_access_token,
    get_password_hash,
    is_password_hash,
    keyed_digest,
    verify_admin_token,
    verify_cron_secret,
    verify_password,
)


@pytest.mark.unit
class TestPasswordHashing:
    def test_hash_and_verify(self):
        password_hash = get_password_hash("admin123")
        assert is_password_hash(password_hash)
        assert verify_password("admin123", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_hashes_are_salted(self):
        assert get_password_hash("admin123") != get_password_hash("admin123")

    def test_invalid_hash_does_not_raise(self):
        assert verify_password("admin123", "admin123") is False


@pytest.mark.unit
def test_keyed_digest_depends_on_secret(monkeypatch):
    before = keyed_digest("value")
    monkeypatch.setattr(config.settings, "SECRET_KEY", "another-secret")
    assert keyed_digest("value") != before


@pytest.mark.unit
class TestVerifyAdminToken:
    def _request(self, token=None):
        request = Mock()
        request.cookies = {"admin_token": token} if token else {}
        return request

    def test_valid_token(self):
        payload = verify_admin_token(self._request(create_access_token({"is_admin": True})))
        assert payload["is_admin"] is True

    def test_missing_cookie(self):
        with pytest.raises(AuthenticationError, match="Not authenticated"):
            verify_admin_token(self._request())

    def test_expired_token(self):
        token = create_access_token({"is_admin": True}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError, match="Token expired"):
            verify_admin_token(self._request(token))

    def test_token_signed_with_other_key(self):
        token = jwt.encode({"is_admin": True}, "not-the-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError, match="Invalid token"):
            verify_admin_token(self._request(token))

    def test_non_admin_token(self):
        with pytest.raises(AuthenticationError, match="Not authorized"):
            verify_admin_token(self._request(create_access_token({"is_admin": False})))


@pytest.mark.unit
class TestVerifyCronSecret:
    def test_open_when_no_secret(self, monkeypatch):
        monkeypatch.setattr(config.settings, "CRON_SECRET", None)
        request = Mock()
        request.headers = {}
        verify_cron_secret(request)

    def test_bearer_secret_required_when_configured(self, monkeypatch):
        monkeypatch.setattr(config.settings, "CRON_SECRET", "s3cret")
        request = Mock()
        request.headers = {"Authorization": "Bearer wrong"}
        with pytest.raises(AuthenticationError):
            verify_cron_secret(request)

        request.headers = {"Authorization": "Bearer s3cret"}
        verify_cron_secret(request)
