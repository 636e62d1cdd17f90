"""Unit tests for admin accounts and bootstrap."""
import pytest
from datetime import timedelta

from globalpoll.core import config
from globalpoll.core.security import get_password_hash, is_password_hash
from globalpoll.core.utils import utcnow
from globalpoll.db.models import Admin
from globalpoll.services.admin import authenticate_admin, bootstrap, ensure_default_admin
from globalpoll.services.poll import create_poll


@pytest.mark.unit
class TestEnsureDefaultAdmin:
    def test_creates_admin_with_hashed_password(self, db_session):
        assert ensure_default_admin(db_session) is True

        admin = db_session.query(Admin).one()
        assert admin.username == "admin"
        assert admin.password_hash != "admin123"
        assert is_password_hash(admin.password_hash)

    def test_idempotent(self, db_session):
        ensure_default_admin(db_session)
        assert ensure_default_admin(db_session) is False
        assert db_session.query(Admin).count() == 1

    def test_prehashed_password_stored_as_is(self, db_session, monkeypatch):
        password_hash = get_password_hash("s3cret-pass")
        monkeypatch.setattr(config.settings, "DEFAULT_ADMIN_PASSWORD", password_hash)

        ensure_default_admin(db_session)

        assert db_session.query(Admin).one().password_hash == password_hash
        assert authenticate_admin(db_session, "admin", "s3cret-pass") is not None


@pytest.mark.unit
class TestAuthenticateAdmin:
    def test_valid_credentials(self, db_session):
        ensure_default_admin(db_session)
        assert authenticate_admin(db_session, "admin", "admin123").username == "admin"

    def test_wrong_password(self, db_session):
        ensure_default_admin(db_session)
        assert authenticate_admin(db_session, "admin", "nope") is None

    def test_unknown_user(self, db_session):
        ensure_default_admin(db_session)
        assert authenticate_admin(db_session, "root", "admin123") is None


@pytest.mark.unit
def test_bootstrap_creates_admin_and_sweeps(db_session):
    expired = create_poll(db_session, "Old?", now=utcnow() - timedelta(hours=30))

    result = bootstrap(db_session)

    assert result == {"admin_created": True, "archived_poll_ids": [expired.id]}
    assert bootstrap(db_session) == {"admin_created": False, "archived_poll_ids": []}
