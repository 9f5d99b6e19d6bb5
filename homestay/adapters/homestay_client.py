from typing import Any

import requests

from .ports import ApiError, BookingPreview, HomestayGateway, Listing, ReviewPage

DEFAULT_BASE_URL = "https://testcmsapi.dghub.io"


def image_url(path: str | None, base_url: str = DEFAULT_BASE_URL) -> str:
    """Absolute URL for a backend-served image. Uploads live under /images/."""
    if not path or not isinstance(path, str):
        return ""
    trimmed = path.strip()
    if not trimmed:
        return ""
    if trimmed.startswith("http"):
        return trimmed
    if not trimmed.startswith("/"):
        trimmed = f"/images/{trimmed}"
    return base_url.rstrip("/") + trimmed


class HomestayClient(HomestayGateway):
    """Adapter: real homestay API HTTP client."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, token: str | None = None, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path if path.startswith('/') else '/' + path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(f"{exc}. URL: {url}") from exc

        try:
            data = resp.json()
        except ValueError:
            if resp.ok:
                raise ApiError(f"Response from {url} is not JSON", status=resp.status_code)
            data = {}

        if not resp.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(message or resp.reason or "Request failed", status=resp.status_code, data=data)
        return data

    def _listings(self, path: str, params: dict[str, Any] | None = None) -> list[Listing]:
        data = self._get(path, params)
        if not isinstance(data, dict):
            raise ApiError(f"Malformed listings response from {path}", data=data)
        try:
            return [Listing.from_dict(item) for item in data.get("listings") or []]
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"Malformed listing in response from {path}: {exc}", data=data) from exc

    def get_hero(self) -> list[Listing]:
        return self._listings("/api/listings/hero")

    def get_featured(self) -> list[Listing]:
        return self._listings("/api/listings/featured")

    def search_listings(self, params: dict[str, Any]) -> list[Listing]:
        query = {k: v for k, v in params.items() if v is not None and v != ""}
        return self._listings("/api/listings", query)

    def get_listing(self, listing_id: int) -> Listing:
        data = self._get(f"/api/listings/{listing_id}")
        if not isinstance(data, dict) or "id" not in data:
            raise ApiError(f"Malformed listing response for {listing_id}", data=data)
        return Listing.from_dict(data)

    def get_listing_reviews(self, listing_id: int, page: int | None = None) -> ReviewPage:
        params = {"page": page} if page is not None else None
        data = self._get(f"/api/listings/{listing_id}/reviews", params)
        if not isinstance(data, dict):
            return ReviewPage(reviews=[], total=0)
        reviews = data.get("reviews")
        if not isinstance(reviews, list):
            reviews = []
        return ReviewPage(reviews=reviews, total=int(data.get("total") or len(reviews)))

    def get_booking_preview(self, listing_id: int, check_in: str, check_out: str) -> BookingPreview:
        data = self._get(
            f"/api/listings/{listing_id}/booking-preview",
            {"check_in": check_in, "check_out": check_out},
        )
        if not isinstance(data, dict):
            raise ApiError(f"Malformed booking preview for {listing_id}", data=data)
        try:
            return BookingPreview.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"Malformed booking preview for {listing_id}: {exc}", data=data) from exc
