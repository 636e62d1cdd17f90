"""Visitor identity derived from request metadata."""
import ipaddress
from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request

from globalpoll.core.constants import LOOPBACK_ADDRESS, MAX_IP_LENGTH
from globalpoll.core.security import keyed_digest


@dataclass(frozen=True)
class Identity:
    """Who is voting or commenting: client IP plus a device fingerprint key."""

    ip_address: str
    device_fingerprint: str


def _valid_ip(value: Optional[str]) -> Optional[str]:
    """Return ``value`` normalized if it parses as an IPv4/IPv6 address."""
    if not value:
        return None
    try:
        address = str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None
    # IPv6 zone ids are free text
    return address if len(address) <= MAX_IP_LENGTH else None


def get_client_ip(headers: Mapping[str, str]) -> str:
    """
    Get client IP, considering proxies.

    Header values that are not IP addresses are skipped, so whatever is
    returned fits the ``ip_address`` columns.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        first = _valid_ip(forwarded.split(",")[0])
        if first:
            return first

    real_ip = _valid_ip(headers.get("x-real-ip"))
    if real_ip:
        return real_ip

    return LOOPBACK_ADDRESS


def derive_device_fingerprint(
    ip_address: str,
    user_agent: str = "",
    accept: str = "",
    accept_language: str = "",
    fingerprint: Optional[str] = None,
    device_id: Optional[str] = None,
) -> str:
    """
    Derive the stored device fingerprint key.

    A persisted client device id is the strongest signal and is used on its
    own, so the key survives network changes and matches on endpoints that
    only receive the device id. Without one, the key is built from the
    browser characteristics plus the optional client fingerprint.

    Returns:
        64-character hex HMAC-SHA256 digest
    """
    if device_id and device_id.strip():
        return keyed_digest(f"device:{device_id.strip()}")

    composite = ":".join([
        ip_address,
        user_agent or "",
        accept or "",
        accept_language or "",
        fingerprint or "",
    ])
    return keyed_digest(composite)


def resolve_identity(
    request: Request,
    fingerprint: Optional[str] = None,
    device_id: Optional[str] = None,
) -> Identity:
    """Build the Identity for ``request``."""
    headers = request.headers
    ip_address = get_client_ip(headers)
    device_fingerprint = derive_device_fingerprint(
        ip_address,
        user_agent=headers.get("user-agent", ""),
        accept=headers.get("accept", ""),
        accept_language=headers.get("accept-language", ""),
        fingerprint=fingerprint,
        device_id=device_id,
    )
    return Identity(ip_address=ip_address, device_fingerprint=device_fingerprint)
