from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from typing import Any

from ..clients.ledger import OwnershipLedger
from ..errors import InvalidExpiresTimestamp, InvalidListing, SalePriceCannotBeZero
from ..logging import get_logger
from ..models.currency import Currency
from ..models.events import UpdateListing
from ..models.listing import UINT64_MAX, Listing, ListingView
from .access import require_owner_or_approved
from .events import EventLog

_log = get_logger()

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


class ListingRegistry:
    """Holds the single current listing per asset.

    A missing entry means "not listed". Expired entries may linger in the
    map but are never returned by ``get``/``view``.
    """

    def __init__(self, ledger: OwnershipLedger, events: EventLog, clock: Clock = system_clock) -> None:
        self._ledger = ledger
        self._events = events
        self._clock = clock
        self._listings: dict[int, Listing] = {}

    def now(self) -> int:
        return self._clock()

    def set_listing(
        self,
        asset_id: int,
        sale_price: int,
        expires_at: int,
        currency: Currency,
        historical_price: int,
        caller: str,
    ) -> Listing:
        if sale_price <= 0:
            raise SalePriceCannotBeZero("sale price must be positive")
        if expires_at > UINT64_MAX:
            raise InvalidExpiresTimestamp(f"expiry {expires_at} out of range")
        if expires_at < self.now():
            raise InvalidExpiresTimestamp(f"expiry {expires_at} is in the past")
        if historical_price < 0:
            raise ValueError("historical price must be non-negative")
        owner = require_owner_or_approved(self._ledger, asset_id, caller)

        listing = Listing(
            sale_price=sale_price,
            expires_at=expires_at,
            currency=currency,
            historical_price=historical_price,
        )
        self._listings[asset_id] = listing
        self._events.emit(
            UpdateListing(
                asset_id=asset_id,
                seller=owner,
                sale_price=sale_price,
                expires_at=expires_at,
                currency=str(currency),
                historical_price=historical_price,
            )
        )
        _log.info(
            "listing_updated",
            asset_id=asset_id,
            seller=owner,
            caller=caller,
            sale_price=sale_price,
            expires_at=expires_at,
            currency=str(currency),
        )
        return listing

    def remove_listing(self, asset_id: int, caller: str) -> None:
        require_owner_or_approved(self._ledger, asset_id, caller)
        if not self.is_active(asset_id):
            raise InvalidListing(f"asset {asset_id} is not listed")
        self.invalidate(asset_id)

    def invalidate(self, asset_id: int) -> None:
        """Reset the listing. Always emits the zeroed event, even if nothing was listed."""
        self._listings.pop(asset_id, None)
        self._events.emit(UpdateListing(asset_id=asset_id, seller=None))
        _log.info("listing_invalidated", asset_id=asset_id)

    def is_active(self, asset_id: int) -> bool:
        listing = self._listings.get(asset_id)
        return listing is not None and listing.is_active(self.now())

    def get(self, asset_id: int) -> Listing | None:
        listing = self._listings.get(asset_id)
        if listing is None or not listing.is_active(self.now()):
            return None
        return listing

    def stored(self, asset_id: int) -> Listing | None:
        """Raw record regardless of expiry, for term comparison on purchase."""
        return self._listings.get(asset_id)

    def view(self, asset_id: int) -> ListingView:
        return ListingView.from_listing(asset_id, self.get(asset_id))

    def active_listings(self) -> Iterator[tuple[int, Listing]]:
        now = self.now()
        for asset_id, listing in sorted(self._listings.items()):
            if listing.is_active(now):
                yield asset_id, listing

    def checkpoint(self) -> Any:
        return dict(self._listings)

    def restore(self, state: Any) -> None:
        self._listings = dict(state)
