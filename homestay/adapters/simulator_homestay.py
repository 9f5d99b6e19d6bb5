from typing import Any

from .ports import ApiError, BookingPreview, HomestayGateway, Listing, ReviewPage


class SimulatorHomestayGateway(HomestayGateway):
    """
    In-memory fake for testing. No mocking framework needed.

    Test helpers:
        inject_listing()      — register a listing (also visible to search)
        set_hero() / set_featured() — choose which listings the home screen sees
        inject_review()       — add a review to a listing
        set_preview()         — register a booking preview for a listing
        fail()                — make an operation raise ApiError until cleared
        calls                 — list of (operation, args) recorded on every call
    """

    def __init__(self):
        self._listings: dict[int, Listing] = {}
        self._hero: list[int] = []
        self._featured: list[int] = []
        self._reviews: dict[int, list[dict[str, Any]]] = {}
        self._previews: dict[int, BookingPreview] = {}
        self._failures: dict[str, ApiError] = {}
        self.calls: list[tuple[str, tuple]] = []

    # -- test helpers ----------------------------------------------------

    def inject_listing(self, listing: Listing) -> None:
        self._listings[listing.id] = listing

    def set_hero(self, listing_ids: list[int]) -> None:
        self._hero = list(listing_ids)

    def set_featured(self, listing_ids: list[int]) -> None:
        self._featured = list(listing_ids)

    def inject_review(self, listing_id: int, review: dict[str, Any]) -> None:
        self._reviews.setdefault(listing_id, []).append(review)

    def set_preview(self, listing_id: int, preview: BookingPreview) -> None:
        self._previews[listing_id] = preview

    def fail(self, operation: str, message: str = "Network request failed", status: int | None = None) -> None:
        """Make `operation` (e.g. "get_hero") raise ApiError. Use "*" for every operation."""
        self._failures[operation] = ApiError(message, status=status)

    def clear_failures(self) -> None:
        self._failures.clear()

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        err = self._failures.get(operation) or self._failures.get("*")
        if err is not None:
            raise err

    # -- HomestayGateway -------------------------------------------------

    def get_hero(self) -> list[Listing]:
        self._record("get_hero")
        return [self._listings[i] for i in self._hero if i in self._listings]

    def get_featured(self) -> list[Listing]:
        self._record("get_featured")
        return [self._listings[i] for i in self._featured if i in self._listings]

    def search_listings(self, params: dict[str, Any]) -> list[Listing]:
        self._record("search_listings", dict(params))
        location = (params.get("location") or "").lower()
        min_price = params.get("minPrice")
        max_price = params.get("maxPrice")
        guests = params.get("guests")
        return [
            l for l in self._listings.values()
            if location in l.location.lower()
            and (min_price is None or l.price_per_night >= min_price)
            and (max_price is None or l.price_per_night <= max_price)
            and (guests is None or l.max_guests is None or l.max_guests >= guests)
        ]

    def get_listing(self, listing_id: int) -> Listing:
        self._record("get_listing", listing_id)
        listing = self._listings.get(listing_id)
        if listing is None:
            raise ApiError("Listing not found", status=404)
        return listing

    def get_listing_reviews(self, listing_id: int, page: int | None = None) -> ReviewPage:
        self._record("get_listing_reviews", listing_id, page)
        reviews = list(self._reviews.get(listing_id, []))
        return ReviewPage(reviews=reviews, total=len(reviews))

    def get_booking_preview(self, listing_id: int, check_in: str, check_out: str) -> BookingPreview:
        self._record("get_booking_preview", listing_id, check_in, check_out)
        if check_out <= check_in:
            raise ApiError("check_out must be after check_in", status=400)
        preview = self._previews.get(listing_id)
        if preview is None:
            raise ApiError("Listing not found", status=404)
        return preview
