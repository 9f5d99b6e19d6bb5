"""
Deep-link and push-notification routing.
"""

import pytest

from homestay.adapters.console_navigator import ConsoleNavigator
from homestay.domain.navigation import (
    PendingNavigation,
    deliver_pending,
    path_from_notification,
    resolve_path,
)


# ---------------------------------------------------------------------------
# Pending slot
# ---------------------------------------------------------------------------


def test_consume_is_one_shot():
    pending = PendingNavigation()
    pending.set_pending("homestays://listing/123")
    assert pending.consume_pending() == "homestays://listing/123"
    assert pending.consume_pending() is None


def test_last_write_wins():
    pending = PendingNavigation()
    pending.set_pending("homestays://listing/1")
    pending.set_pending("homestays://booking/2")
    assert pending.consume_pending() == "homestays://booking/2"


def test_instances_do_not_share_state():
    p1, p2 = PendingNavigation(), PendingNavigation()
    p1.set_pending("homestays://listing/1")
    assert p2.consume_pending() is None


# ---------------------------------------------------------------------------
# URL → path
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("url, expected", [
    ("homestays://listing/123", "/listing/123"),
    ("mobile://listing/123/", "/listing/123"),
    ("homestays:///listing/7", "/listing/7"),
    ("homestays://booking/456", "/booking/456"),
    ("homestays://booking/456/confirmation", "/booking/456"),
    ("homestays://listing/9?ref=share", "/listing/9"),
    ("listing/5", "/listing/5"),
])
def test_resolve_known_shapes(url, expected):
    assert resolve_path(url) == expected


@pytest.mark.parametrize("url", [
    "",
    "   ",
    "homestays://",
    "homestays://listing",
    "homestays://listing/",
    "homestays://profile/3",
    "https://example.com",
    None,
    42,
])
def test_resolve_unknown_shapes_is_none(url):
    assert resolve_path(url) is None


# ---------------------------------------------------------------------------
# Notification payload → path
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("data, expected", [
    ({"url": "/booking/9"}, "/booking/9"),
    ({"url": "https://x", "listingId": 4}, "/listing/4"),
    ({"listingId": "12"}, "/listing/12"),
    ({"bookingId": 77}, "/booking/77"),
    ({"listingId": 1, "bookingId": 2}, "/listing/1"),
    ({"listingId": "", "bookingId": 2}, "/booking/2"),
    ({"listingId": True}, None),
    ({"other": 1}, None),
    ({}, None),
    (None, None),
])
def test_path_from_notification(data, expected):
    assert path_from_notification(data) == expected


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


def test_deliver_pending_navigates_once():
    pending = PendingNavigation()
    navigator = ConsoleNavigator(echo=False)
    pending.set_pending("homestays://listing/42")

    assert deliver_pending(pending, navigator) == "/listing/42"
    assert deliver_pending(pending, navigator) is None
    assert navigator.visited == ["/listing/42"]


def test_deliver_unrecognised_link_is_consumed_without_navigating():
    pending = PendingNavigation()
    navigator = ConsoleNavigator(echo=False)
    pending.set_pending("homestays://settings")

    assert deliver_pending(pending, navigator) is None
    assert navigator.visited == []
    assert pending.consume_pending() is None


def test_console_navigator_prints(capsys):
    ConsoleNavigator().push("/booking/3")
    assert "/booking/3" in capsys.readouterr().out
