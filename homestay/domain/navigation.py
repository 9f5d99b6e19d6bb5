"""
Deep-link handling — turn external URLs and push payloads into app paths.

A launch URL often arrives before the navigation stack is ready.  It is
parked in a PendingNavigation slot and delivered once, after boot.  The
slot holds at most one URL: a newer URL overwrites an unconsumed one,
since only the latest navigation intent matters.

Unrecognised or malformed links resolve to None and are ignored.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any

log = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[^:]+://")


class Navigator(ABC):
    """Port: the router that performs the actual screen transition."""

    @abstractmethod
    def push(self, path: str) -> None:
        """Navigate to an in-app path such as /listing/123."""
        ...


class PendingNavigation:
    """One-shot mailbox for a launch URL. Inject one per app instance."""

    def __init__(self):
        self._url: str | None = None

    def set_pending(self, url: str | None) -> None:
        self._url = url

    def consume_pending(self) -> str | None:
        url, self._url = self._url, None
        return url


def resolve_path(url: str | None) -> str | None:
    """
    Map an external URL to an app path.

        homestays://listing/123              → /listing/123
        homestays://booking/456              → /booking/456
        homestays://booking/456/confirmation → /booking/456
        anything else                        → None
    """
    if not isinstance(url, str):
        return None
    path = _SCHEME.sub("", url.strip(), count=1).lstrip("/").strip()
    parts = [p for p in path.split("?", 1)[0].split("/") if p]
    if len(parts) < 2:
        return None
    kind, resource_id = parts[0], parts[1]
    if kind == "listing":
        return f"/listing/{resource_id}"
    if kind == "booking":
        # booking/<id>/confirmation lands on the booking itself
        return f"/booking/{resource_id}"
    return None


def path_from_notification(data: dict[str, Any] | None) -> str | None:
    """
    Map a push notification payload to an app path.

    The backend may send a ready path ("url": "/listing/123"), a listingId,
    or a bookingId — checked in that order.
    """
    if not data:
        return None
    url = data.get("url")
    if isinstance(url, str) and url.startswith("/"):
        return url
    for field, prefix in (("listingId", "/listing"), ("bookingId", "/booking")):
        value = data.get(field)
        if isinstance(value, bool):
            continue
        if isinstance(value, int) or (isinstance(value, str) and value):
            return f"{prefix}/{value}"
    return None


def deliver_pending(pending: PendingNavigation, navigator: Navigator) -> str | None:
    """Consume the parked URL and navigate to it. Returns the path, or None."""
    url = pending.consume_pending()
    if url is None:
        return None
    path = resolve_path(url)
    if path is None:
        log.info("Ignoring unrecognised deep link %r", url)
        return None
    navigator.push(path)
    return path
