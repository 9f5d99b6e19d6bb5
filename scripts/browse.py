#!/usr/bin/env python3
"""
Command-line runner for the homestay client.

Usage (from project root):
    python scripts/browse.py                           # home screen, cache first
    python scripts/browse.py refresh                   # home screen, skip the cache
    python scripts/browse.py listing 42                # listing detail + reviews
    python scripts/browse.py preview 42 2026-11-01 2026-11-04
    python scripts/browse.py link homestays://listing/42
    python scripts/browse.py invalidate listings_      # drop cached listings

Environment variables (all optional):
    HOMESTAY_API_URL            - API base URL (default: UAT API)
    HOMESTAY_API_TOKEN          - bearer token
    HOMESTAY_CACHE_BACKEND      - "sqlite" or "memory" (default: sqlite)
    HOMESTAY_CACHE_DB           - SQLite path (default: data/homestay_cache.db)
    HOMESTAY_CACHE_TTL_MINUTES  - cache TTL (default: 15)
"""

import asyncio
import logging
import os
import sys

# Make sure project root is on sys.path when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from homestay.adapters.console_navigator import ConsoleNavigator
from homestay.adapters.ports import ApiError
from homestay.domain.booking import format_rs, pay_button_label, price_lines
from homestay.domain.navigation import PendingNavigation, deliver_pending
from homestay.factory import create_cache, create_gateway
from homestay.loader import LoadState, home_screen_loader, listing_screen_loader

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger(__name__)


def _render(title: str, state: LoadState) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}{'  (cached)' if state.stale else ''}")
    print(f"{'=' * 60}")
    if state.show_skeleton:
        print("  loading …")
    if state.error:
        print(f"  ! {state.error}")
    for name, value in state.data.items():
        if isinstance(value, list):
            print(f"  {name}: {len(value)} item(s)")
            for listing in value[:5]:
                print(f"    #{listing.id:<6} {listing.title[:40]:<40} {format_rs(listing.price_per_night)}")
        elif value is not None:
            print(f"  {name}: {value}")


async def show_home(force_refresh: bool) -> int:
    home = home_screen_loader(create_gateway(), create_cache())
    home.subscribe(lambda s: _render("Home", s))
    state = await (home.refresh() if force_refresh else home.load())
    home.dispose()
    return 1 if state.show_error_screen else 0


async def show_listing(listing_id: str) -> int:
    detail = listing_screen_loader(create_gateway(), create_cache(), listing_id)
    detail.subscribe(lambda s: _render(f"Listing {listing_id}", s))
    state = await detail.load()
    detail.dispose()
    return 1 if state.show_error_screen else 0


async def show_preview(listing_id: int, check_in: str, check_out: str) -> int:
    gateway = create_gateway()
    try:
        preview = await asyncio.to_thread(gateway.get_booking_preview, listing_id, check_in, check_out)
    except ApiError as exc:
        log.error("Booking preview failed: %s", exc)
        return 1
    for label, amount in price_lines(preview):
        print(f"  {label:<40} {amount:>16}")
    print(f"\n  [ {pay_button_label(preview)} ]")
    return 0


def follow_link(url: str) -> int:
    pending = PendingNavigation()
    pending.set_pending(url)
    if deliver_pending(pending, ConsoleNavigator()) is None:
        log.warning("Deep link %r not recognised", url)
        return 1
    return 0


async def invalidate(prefix: str) -> int:
    await create_cache().invalidate(prefix)
    log.info("Invalidated cache entries under %r", prefix)
    return 0


async def main() -> int:
    if len(sys.argv) < 2:
        return await show_home(force_refresh=False)

    cmd = sys.argv[1]

    if cmd == "refresh":
        return await show_home(force_refresh=True)
    if cmd == "listing" and len(sys.argv) >= 3:
        return await show_listing(sys.argv[2])
    if cmd == "preview" and len(sys.argv) >= 5:
        return await show_preview(int(sys.argv[2]), sys.argv[3], sys.argv[4])
    if cmd == "link" and len(sys.argv) >= 3:
        return follow_link(sys.argv[2])
    if cmd == "invalidate" and len(sys.argv) >= 3:
        return await invalidate(sys.argv[2])

    print(__doc__)
    return 2


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        log.info("Stopped.")
