"""
Adapter contract tests for HomestayGateway — both simulator and real.

The same contract is verified against:
  - SimulatorHomestayGateway  (always runs, no network needed)
  - HomestayClient            (skipped if HOMESTAY_LIVE_API_URL is not set)
"""

import os

import pytest

from homestay.adapters.homestay_client import HomestayClient
from homestay.adapters.ports import ApiError, BookingPreview, Listing
from homestay.adapters.simulator_homestay import SimulatorHomestayGateway

from tests.contracts.homestay_gateway_contract import HomestayGatewayContract


def _listing(listing_id: int, **kw) -> Listing:
    defaults = dict(title=f"Homestay {listing_id}", price_per_night=2500.0, location="Pokhara", max_guests=4)
    defaults.update(kw)
    return Listing(id=listing_id, **defaults)


# ---------------------------------------------------------------------------
# Simulator — always runs
# ---------------------------------------------------------------------------


class TestSimulatorHomestayContract(HomestayGatewayContract):

    def create_gateway(self):
        gw = SimulatorHomestayGateway()
        gw.inject_listing(_listing(1, extra={"province_name": "Gandaki"}))
        gw.inject_listing(_listing(2, location="Bandipur"))
        gw.set_hero([1])
        gw.set_featured([1, 2])
        gw.inject_review(1, {"rating": 5, "comment": "Lovely host"})
        return gw

    def get_test_listing_id(self):
        return 1

    def test_hero_and_featured_follow_configuration(self):
        gw = self.create_gateway()
        assert [l.id for l in gw.get_hero()] == [1]
        assert [l.id for l in gw.get_featured()] == [1, 2]

    def test_search_filters_location_price_and_guests(self):
        gw = SimulatorHomestayGateway()
        gw.inject_listing(_listing(1, location="Pokhara", price_per_night=1500))
        gw.inject_listing(_listing(2, location="Pokhara Lakeside", price_per_night=4000))
        gw.inject_listing(_listing(3, location="Bandipur", price_per_night=1500, max_guests=2))

        assert {l.id for l in gw.search_listings({"location": "pokhara"})} == {1, 2}
        assert {l.id for l in gw.search_listings({"maxPrice": 2000})} == {1, 3}
        assert {l.id for l in gw.search_listings({"guests": 3})} == {1, 2}

    def test_fail_raises_until_cleared(self):
        gw = self.create_gateway()
        gw.fail("get_hero", status=500)
        with pytest.raises(ApiError) as info:
            gw.get_hero()
        assert info.value.status == 500
        gw.get_featured()  # other operations unaffected
        gw.clear_failures()
        assert gw.get_hero()

    def test_fail_star_fails_everything(self):
        gw = self.create_gateway()
        gw.fail("*")
        with pytest.raises(ApiError):
            gw.get_featured()
        with pytest.raises(ApiError):
            gw.get_listing(1)

    def test_calls_are_recorded(self):
        gw = self.create_gateway()
        gw.get_listing(1)
        gw.get_listing_reviews(1)
        assert gw.calls == [("get_listing", (1,)), ("get_listing_reviews", (1, None))]

    def test_booking_preview(self):
        gw = self.create_gateway()
        preview = BookingPreview(
            nights=3, price_per_night=2500, subtotal=7500,
            fee_label="Service fee", fee_amount=375, total=7875, currency="NPR",
        )
        gw.set_preview(1, preview)
        assert gw.get_booking_preview(1, "2026-11-01", "2026-11-04") == preview
        with pytest.raises(ApiError):
            gw.get_booking_preview(1, "2026-11-04", "2026-11-01")


# ---------------------------------------------------------------------------
# Real API — skipped without a configured endpoint
# ---------------------------------------------------------------------------

API_URL = os.environ.get("HOMESTAY_LIVE_API_URL", "")
LISTING_ID = os.environ.get("TEST_LISTING_ID", "")

LIVE_AVAILABLE = bool(API_URL) and bool(LISTING_ID)


@pytest.mark.skipif(
    not LIVE_AVAILABLE,
    reason="HOMESTAY_LIVE_API_URL or TEST_LISTING_ID not set",
)
class TestHomestayClientContract(HomestayGatewayContract):

    def create_gateway(self):
        return HomestayClient(base_url=API_URL)

    def get_test_listing_id(self):
        return int(LISTING_ID)
