"""Admin accounts and bootstrap tasks."""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from globalpoll.core import config
from globalpoll.core.logging_config import get_logger
from globalpoll.core.security import (
    get_password_hash,
    is_password_hash,
    password_needs_rehash,
    verify_password,
)
from globalpoll.db.models import Admin
from globalpoll.services.poll import sweep_expired

logger = get_logger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """
    Create the default admin when no admin exists.

    DEFAULT_ADMIN_PASSWORD may be plaintext (hashed here) or an Argon2 hash
    produced by hash_password.py (stored as-is).

    Returns:
        True if an admin was created
    """
    if db.query(Admin).count() > 0:
        return False

    password = config.settings.DEFAULT_ADMIN_PASSWORD
    password_hash = password if is_password_hash(password) else get_password_hash(password)

    admin = Admin(username=config.settings.DEFAULT_ADMIN_USERNAME, password_hash=password_hash)
    db.add(admin)
    db.commit()

    logger.info("default_admin_created", username=admin.username)
    return True


def authenticate_admin(db: Session, username: str, password: str) -> Optional[Admin]:
    """Return the admin if the credentials match, else None."""
    admin = db.query(Admin).filter(Admin.username == username).first()
    if not admin or not verify_password(password, admin.password_hash):
        logger.warning("admin_login_failed", username=username)
        return None

    if password_needs_rehash(admin.password_hash):
        admin.password_hash = get_password_hash(password)
        db.commit()

    logger.info("admin_login_succeeded", admin_id=admin.id)
    return admin


def bootstrap(db: Session) -> Dict[str, object]:
    """First-boot and periodic housekeeping: default admin + expiry sweep."""
    admin_created = ensure_default_admin(db)
    archived: List[int] = sweep_expired(db)
    return {"admin_created": admin_created, "archived_poll_ids": archived}
