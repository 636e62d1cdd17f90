"""Security and authentication utilities."""
import hmac
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional
import argon2
import jwt
from fastapi import Request

from globalpoll.core import config
from globalpoll.core.exceptions import AuthenticationError

ADMIN_COOKIE_NAME = "admin_token"

# Argon2 hasher for admin passwords
ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


def is_password_hash(value: str) -> bool:
    """True if ``value`` already is an encoded Argon2 hash."""
    return value.startswith("$argon2")


def get_password_hash(password: str) -> str:
    """Hash a password using Argon2 (random per-hash salt)."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its Argon2 hash."""
    try:
        return ph.verify(password_hash, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def password_needs_rehash(password_hash: str) -> bool:
    """True if the stored hash was made with weaker parameters than ``ph``."""
    return ph.check_needs_rehash(password_hash)


def keyed_digest(value: str) -> str:
    """
    Deterministic one-way digest of ``value`` using HMAC-SHA256.

    Keyed with SECRET_KEY so that stored identity keys cannot be reversed or
    recomputed without the server secret.

    Returns:
        64-character hex string (SHA256 output)
    """
    return hmac.new(
        config.settings.SECRET_KEY.encode(),
        value.encode(),
        hashlib.sha256
    ).hexdigest()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)


def verify_admin_token(request: Request) -> dict:
    """Verify the admin JWT from its cookie and return the payload."""
    token = request.cookies.get(ADMIN_COOKIE_NAME)

    if not token:
        raise AuthenticationError("Not authenticated")

    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid token")

    if not payload.get("is_admin"):
        raise AuthenticationError("Not authorized")
    return payload


def verify_cron_secret(request: Request) -> None:
    """Require ``Authorization: Bearer <CRON_SECRET>`` when a secret is configured."""
    secret = config.settings.CRON_SECRET
    if not secret:
        return

    header = request.headers.get("Authorization", "")
    scheme, _, supplied = header.partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(supplied.strip(), secret):
        raise AuthenticationError("Invalid scheduler credentials")
