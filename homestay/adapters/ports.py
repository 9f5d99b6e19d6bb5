from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields
from typing import Any


class ApiError(Exception):
    """A request to the homestay API failed (transport, non-2xx, bad body)."""

    def __init__(self, message: str, status: int | None = None, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data


@dataclass
class Listing:
    """A homestay listing as returned by /api/listings/*."""

    id: int
    title: str
    price_per_night: float
    location: str = ""
    type: str = ""
    max_guests: int | None = None
    image_urls: list[str] = field(default_factory=list)
    average_rating: float | None = None
    review_count: int = 0
    extra: dict[str, Any] = field(default_factory=dict)  # fields we don't model

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Listing":
        known = {f.name for f in fields(cls)} - {"extra"}
        return cls(
            id=int(d["id"]),
            title=d.get("title", ""),
            price_per_night=float(d.get("price_per_night") or 0),
            location=d.get("location") or "",
            type=d.get("type") or "",
            max_guests=d.get("max_guests"),
            image_urls=list(d.get("image_urls") or []),
            average_rating=d.get("average_rating"),
            review_count=int(d.get("review_count") or 0),
            extra={k: v for k, v in d.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        extra = d.pop("extra")
        return {**extra, **d}


@dataclass
class ReviewPage:
    """One page of /api/listings/{id}/reviews."""

    reviews: list[dict[str, Any]]
    total: int


@dataclass
class BookingPreview:
    """Server-computed price breakdown for a stay. Never recomputed locally."""

    nights: int
    price_per_night: float
    subtotal: float
    fee_label: str | None
    fee_amount: float
    total: float
    currency: str
    extra_services_lines: list[dict[str, Any]] = field(default_factory=list)  # {"name", "amount"}
    extra_services_total: float | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BookingPreview":
        extras_total = d.get("extra_services_total")
        return cls(
            nights=int(d.get("nights", 0)),
            price_per_night=float(d.get("price_per_night", 0)),
            subtotal=float(d.get("subtotal_room", d.get("subtotal", 0)) or 0),
            fee_label=d.get("fee_label"),
            fee_amount=float(d.get("fee_amount") or 0),
            total=float(d.get("total", 0)),
            currency=d.get("currency", "NPR"),
            extra_services_lines=[
                {"name": str(line["name"]), "amount": float(line["amount"])}
                for line in d.get("extra_services_lines") or []
            ],
            extra_services_total=float(extras_total) if extras_total is not None else None,
        )


class HomestayGateway(ABC):
    """
    Port: how we read from the homestay booking API.

    The loaders depend ONLY on this interface.
    Every method either returns parsed data or raises — never a sentinel.
    """

    @abstractmethod
    def get_hero(self) -> list[Listing]:
        """Listings for the home screen carousel."""
        ...

    @abstractmethod
    def get_featured(self) -> list[Listing]:
        """Featured listings for the home screen."""
        ...

    @abstractmethod
    def search_listings(self, params: dict[str, Any]) -> list[Listing]:
        """Listings matching search params (location, minPrice, maxPrice, guests, ...)."""
        ...

    @abstractmethod
    def get_listing(self, listing_id: int) -> Listing:
        """One listing. Raises ApiError(status=404) if it does not exist."""
        ...

    @abstractmethod
    def get_listing_reviews(self, listing_id: int, page: int | None = None) -> ReviewPage:
        """A page of reviews for a listing."""
        ...

    @abstractmethod
    def get_booking_preview(self, listing_id: int, check_in: str, check_out: str) -> BookingPreview:
        """Price breakdown for check_in..check_out (YYYY-MM-DD)."""
        ...
