"""
Adapter contract for HomestayGateway.

Any implementation of HomestayGateway (real HTTP client, in-memory simulator, ...)
must pass these tests.  Subclass this and provide create_gateway() and
get_test_listing_id() to run the contract against your adapter.
"""

from abc import ABC, abstractmethod

import pytest

from homestay.adapters.ports import ApiError, HomestayGateway, Listing, ReviewPage


class HomestayGatewayContract(ABC):
    """Contract tests that every HomestayGateway implementation must satisfy."""

    @abstractmethod
    def create_gateway(self) -> HomestayGateway:
        """Return a fresh instance of the adapter under test."""
        ...

    @abstractmethod
    def get_test_listing_id(self) -> int:
        """Return a listing ID that exists."""
        ...

    def test_get_hero_returns_listings(self):
        result = self.create_gateway().get_hero()
        assert isinstance(result, list)
        assert all(isinstance(l, Listing) for l in result)

    def test_get_featured_returns_listings(self):
        result = self.create_gateway().get_featured()
        assert isinstance(result, list)
        assert all(isinstance(l, Listing) for l in result)

    def test_get_listing_returns_requested_id(self):
        listing_id = self.get_test_listing_id()
        listing = self.create_gateway().get_listing(listing_id)
        assert listing.id == listing_id
        assert listing.title

    def test_get_unknown_listing_raises(self):
        with pytest.raises(ApiError):
            self.create_gateway().get_listing(999999999)

    def test_get_listing_reviews_returns_page(self):
        page = self.create_gateway().get_listing_reviews(self.get_test_listing_id())
        assert isinstance(page, ReviewPage)
        assert isinstance(page.reviews, list)
        assert page.total >= len(page.reviews)

    def test_search_returns_list(self):
        result = self.create_gateway().search_listings({"location": "", "guests": 1})
        assert isinstance(result, list)

    def test_listing_survives_dict_round_trip(self):
        """What the cache stores must decode back to the same listing."""
        listing = self.create_gateway().get_listing(self.get_test_listing_id())
        assert Listing.from_dict(listing.to_dict()) == listing
