"""Client metadata extraction for session records.

Both helpers are pure: device classification reads only the User-Agent string,
and address extraction reads only request headers and the transport peer.
"""

import ipaddress
from typing import Callable, List, Optional, Tuple

from fastapi import Request

UNKNOWN_DEVICE = "Unknown Device"

# Width of user_sessions.ip_address.
MAX_ADDRESS_LENGTH = 64


def _contains(*markers: str) -> Callable[[str], bool]:
    return lambda user_agent: all(marker in user_agent for marker in markers)


# Ordered (predicate, label) rules: mobile marker first, then the platform
# inside mobile, then tablet and desktop platforms. The first match wins, so
# a new device is a new row here.
DEVICE_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_contains("Mobile", "iPhone"), "iPhone"),
    (_contains("Mobile", "Android"), "Android Mobile"),
    (_contains("Mobile"), "Mobile Device"),
    (_contains("iPad"), "iPad"),
    (_contains("Macintosh"), "Mac"),
    (_contains("Windows"), "Windows PC"),
    (_contains("Linux"), "Linux PC"),
]
FALLBACK_DEVICE = "Desktop Browser"


def extract_device_info(user_agent: Optional[str]) -> str:
    """Classify a User-Agent string into a short device label.

    Args:
        user_agent: Raw User-Agent header, possibly missing.

    Returns:
        str: One of iPhone, Android Mobile, Mobile Device, iPad, Mac,
        Windows PC, Linux PC, Desktop Browser or Unknown Device.
    """
    if not user_agent:
        return UNKNOWN_DEVICE
    for predicate, label in DEVICE_RULES:
        if predicate(user_agent):
            return label
    return FALLBACK_DEVICE


def _valid_address(value: Optional[str]) -> Optional[str]:
    """The stripped value if it parses as an IPv4 or IPv6 address, else None."""
    candidate = (value or "").strip()
    if not candidate or len(candidate) > MAX_ADDRESS_LENGTH:
        return None
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return None
    return candidate


def extract_client_address(request: Request) -> Optional[str]:
    """Best-effort origin address of a request.

    Precedence: first entry of X-Forwarded-For, then the transport peer, then
    X-Real-IP. The first value that is a valid IP address wins; headers are
    client-controlled, so anything else falls through to the next source.
    """
    forwarded = request.headers.get("x-forwarded-for")
    candidates = [
        forwarded.split(",")[0] if forwarded else None,
        request.client.host if request.client else None,
        request.headers.get("x-real-ip"),
    ]
    for candidate in candidates:
        address = _valid_address(candidate)
        if address:
            return address
    return None
