"""
Cache-then-refresh loading for screens.

A screen is described by a list of Resources.  load() runs:

  1. (unless forced) hydrate from cache → publish immediately, marked stale
  2. fetch every resource from the API concurrently
  3. success → replace displayed data wholesale, write cache, clear error
     failure → forced: clear data + error;  background: keep data + error
  4. clear loading / refreshing

Each load is tagged with a generation number.  Only the most recently
started load may change state; older ones are discarded when they
resolve, as is anything arriving after dispose().
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from homestay.adapters.ports import HomestayGateway, Listing, ReviewPage
from homestay.domain import cache as cache_keys
from homestay.domain.cache import TTLCache

log = logging.getLogger(__name__)

HOME_ERROR = "Could not load. Pull to retry."
LISTING_ERROR = "Could not load listing."
SEARCH_ERROR = "Could not load listings. Pull to retry."


def _identity(value: Any) -> Any:
    return value


@dataclass
class Resource:
    """One independently fetched piece of a screen."""

    name: str
    fetch: Callable[[], Any]               # blocking gateway call, run in a worker thread
    cache_key: str | None = None           # None = never cached
    empty: Callable[[], Any] = list        # value shown when there is nothing
    encode: Callable[[Any], Any] = _identity   # value → JSON-able, for the cache
    decode: Callable[[Any], Any] = _identity   # JSON-able → value, from the cache
    fallback: Callable[[], Any] | None = None  # set for non-essential resources


@dataclass
class LoadState:
    data: dict[str, Any]
    loading: bool = True
    refreshing: bool = False
    error: str | None = None
    stale: bool = False                    # data came from cache, not yet confirmed
    primary: tuple[str, ...] = field(default=())  # resources that count as "something to show"

    @property
    def has_data(self) -> bool:
        names = self.primary or tuple(self.data)
        return any(
            self.data.get(n) is not None and self.data.get(n) != []
            for n in names
        )

    @property
    def show_skeleton(self) -> bool:
        return self.loading and not self.has_data and self.error is None

    @property
    def show_error_banner(self) -> bool:
        """Dismissible error over content that is still visible."""
        return self.error is not None and self.has_data

    @property
    def show_error_screen(self) -> bool:
        """Nothing to show: empty state with a retry action."""
        return self.error is not None and not self.has_data


class ResourceLoader:
    """Loads one screen's resources, cache first, network always."""

    def __init__(
        self,
        resources: list[Resource],
        cache: TTLCache,
        error_message: str,
        name: str = "screen",
        enabled: bool = True,
    ):
        self.name = name
        self._resources = resources
        self._cache = cache
        self._error_message = error_message
        self._enabled = enabled
        self._generation = 0
        self._disposed = False
        self._confirmed = False  # state.data came from the network
        self._listeners: list[Callable[[LoadState], None]] = []
        self.state = LoadState(
            data=self._empty_data(),
            primary=tuple(r.name for r in resources if r.fallback is None),
        )

    # -- observation -----------------------------------------------------

    def subscribe(self, callback: Callable[[LoadState], None]) -> Callable[[], None]:
        """Call callback with every new state. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _publish(self, **changes: Any) -> None:
        self.state = replace(self.state, **changes)
        for callback in list(self._listeners):
            callback(self.state)

    def _empty_data(self) -> dict[str, Any]:
        return {r.name: r.empty() for r in self._resources}

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    # -- operations ------------------------------------------------------

    async def load(self, force_refresh: bool = False) -> LoadState:
        """Hydrate from cache (unless forced), then refresh from the network."""
        if self._disposed:
            return self.state
        self._generation += 1
        generation = self._generation

        if not self._enabled:
            self._publish(loading=False, refreshing=False)
            return self.state

        cacheable = [r for r in self._resources if r.cache_key]

        # Cached entries are never newer than data already fetched by this loader
        if not force_refresh and cacheable and not self._confirmed:
            cached = await asyncio.gather(*(self._read_cache(r) for r in cacheable))
            hits = {r.name: v for r, v in zip(cacheable, cached) if v is not None}
            if hits and self._is_current(generation):
                log.debug("%s: showing %d cached resource(s)", self.name, len(hits))
                self._publish(data={**self.state.data, **hits}, stale=True)

        results = await asyncio.gather(
            *(self._fetch(r) for r in self._resources),
            return_exceptions=True,
        )

        if not self._is_current(generation):
            log.debug("%s: discarding result of superseded load #%d", self.name, generation)
            return self.state

        failure = next((r for r in results if isinstance(r, BaseException)), None)
        if failure is not None:
            log.warning("%s: load failed (forced=%s): %s", self.name, force_refresh, failure)
            if force_refresh:
                self._publish(
                    data=self._empty_data(), error=self._error_message,
                    stale=False, loading=False, refreshing=False,
                )
                self._confirmed = False
            else:
                self._publish(error=self._error_message, loading=False, refreshing=False)
            return self.state

        fresh = {r.name: value for r, value in zip(self._resources, results)}
        self._confirmed = True
        self._publish(data=fresh, error=None, stale=False, loading=False, refreshing=False)

        await asyncio.gather(*(
            self._cache.set(r.cache_key, r.encode(fresh[r.name]))
            for r in cacheable
            if r.fallback is None
        ))
        return self.state

    async def refresh(self) -> LoadState:
        """Pull-to-refresh: the user asked for fresh data."""
        self._publish(refreshing=True)
        return await self.load(force_refresh=True)

    async def retry(self) -> LoadState:
        """Retry from the error affordance."""
        self._publish(loading=True, error=None)
        return await self.load(force_refresh=True)

    def dismiss_error(self) -> None:
        self._publish(error=None)

    def dispose(self) -> None:
        """The screen went away: drop listeners and ignore anything still in flight."""
        self._disposed = True
        self._listeners.clear()

    # -- helpers ---------------------------------------------------------

    async def _read_cache(self, resource: Resource) -> Any | None:
        raw = await self._cache.get(resource.cache_key)
        if raw is None:
            return None
        try:
            return resource.decode(raw)
        except Exception as exc:
            log.debug("%s: unreadable cached %s: %s", self.name, resource.name, exc)
            return None

    async def _fetch(self, resource: Resource) -> Any:
        try:
            return await asyncio.to_thread(resource.fetch)
        except Exception as exc:
            if resource.fallback is None:
                raise
            log.info("%s: %s unavailable, using fallback: %s", self.name, resource.name, exc)
            return resource.fallback()


# -- screens -------------------------------------------------------------


def _encode_listings(listings: list[Listing]) -> list[dict[str, Any]]:
    return [l.to_dict() for l in listings]


def _decode_listings(raw: list[dict[str, Any]]) -> list[Listing]:
    return [Listing.from_dict(d) for d in raw]


def home_screen_loader(gateway: HomestayGateway, cache: TTLCache) -> ResourceLoader:
    """Hero carousel + featured list."""
    return ResourceLoader(
        [
            Resource("hero", gateway.get_hero, cache_keys.HERO,
                     encode=_encode_listings, decode=_decode_listings),
            Resource("featured", gateway.get_featured, cache_keys.FEATURED,
                     encode=_encode_listings, decode=_decode_listings),
        ],
        cache,
        error_message=HOME_ERROR,
        name="home",
    )


def _parse_listing_id(raw: Any) -> int | None:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def listing_screen_loader(gateway: HomestayGateway, cache: TTLCache, listing_id: Any) -> ResourceLoader:
    """
    Listing detail + first page of reviews.

    Reviews are non-essential: a failure shows an empty page, and they are
    never cached.  A listing_id that is not a positive integer disables the
    loader, so load() only clears the loading flag.
    """
    lid = _parse_listing_id(listing_id)
    if lid is None:
        log.info("listing: ignoring invalid id %r", listing_id)

    def empty_reviews() -> ReviewPage:
        return ReviewPage(reviews=[], total=0)

    return ResourceLoader(
        [
            Resource("listing", lambda: gateway.get_listing(lid),
                     cache_keys.listing_key(lid) if lid else None,
                     empty=lambda: None, encode=Listing.to_dict, decode=Listing.from_dict),
            Resource("reviews", lambda: gateway.get_listing_reviews(lid),
                     empty=empty_reviews, fallback=empty_reviews),
        ],
        cache,
        error_message=LISTING_ERROR,
        name=f"listing:{lid}",
        enabled=lid is not None,
    )


def search_loader(gateway: HomestayGateway, cache: TTLCache, params: dict[str, Any]) -> ResourceLoader:
    """Search results, cached per canonical parameter set."""
    params = dict(params)
    return ResourceLoader(
        [
            Resource("results", lambda: gateway.search_listings(params), cache_keys.search_key(params),
                     encode=_encode_listings, decode=_decode_listings),
        ],
        cache,
        error_message=SEARCH_ERROR,
        name="search",
    )
