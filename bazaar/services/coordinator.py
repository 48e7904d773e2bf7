from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from ..clients.ledger import OwnershipLedger
from ..errors import (
    IncorrectValueSent,
    InconsistentSalePrice,
    InconsistentTokens,
    InsufficientAllowance,
    InvalidListing,
    PaymentTransferFailed,
    UnsupportedCurrency,
)
from ..logging import get_logger
from ..models.currency import Currency, Native, is_native, parse_currency
from ..models.events import Event, Purchased
from ..models.listing import Listing, ListingView
from .atomic import Journaled, atomic
from .events import EventLog
from .guard import ReentrancyGuard
from .hooks import ListingInvalidationHook
from .payments import PaymentProcessor
from .registry import ListingRegistry
from .royalty import RoyaltyCalculator

_log = get_logger()


class PurchaseCoordinator:
    """Public face of the exchange: list, delist, buy, and read listings.

    ``account`` is the identity the exchange acts as: it receives attached
    native value and is the spender of buyers' token allowances. Every
    mutating operation runs under one non-reentrant guard; a purchase also
    runs inside an atomic unit over ``journaled`` collaborators, the
    registry and the event log.
    """

    def __init__(
        self,
        ledger: OwnershipLedger,
        registry: ListingRegistry,
        royalties: RoyaltyCalculator,
        payments: PaymentProcessor,
        events: EventLog,
        account: str,
        journaled: Iterable[Journaled] = (),
    ) -> None:
        self.account = account
        self._ledger = ledger
        self._registry = registry
        self._royalties = royalties
        self._payments = payments
        self._events = events
        self._journaled: tuple[Journaled, ...] = (registry, events, *journaled)
        self._guard = ReentrancyGuard()
        self.transfer_hook = ListingInvalidationHook(registry).install(ledger)

    def list_item(
        self,
        caller: str,
        asset_id: int,
        sale_price: int,
        expires_at: int,
        currency: str | Currency,
        historical_price: int = 0,
    ) -> ListingView:
        parsed = parse_currency(currency)
        with self._guard:
            if not self._payments.supports(parsed):
                raise UnsupportedCurrency(f"no payment rail for {parsed}")
            listing = self._registry.set_listing(
                asset_id,
                sale_price,
                expires_at,
                parsed,
                historical_price,
                caller,
            )
        return ListingView.from_listing(asset_id, listing)

    def delist_item(self, caller: str, asset_id: int) -> None:
        with self._guard:
            self._registry.remove_listing(asset_id, caller)

    def get_listing(self, asset_id: int) -> ListingView:
        """Current terms, zeroed when not for sale.

        Waits for a purchase running on another thread, so a rolled-back
        purchase is never observed half done.
        """
        with self._guard.reading():
            return self._registry.view(asset_id)

    def active_listings(self) -> list[tuple[int, Listing]]:
        with self._guard.reading():
            return list(self._registry.active_listings())

    def events_since(self, offset: int = 0) -> list[Event]:
        with self._guard.reading():
            return self._events.since(offset)

    def buy_item(
        self,
        buyer: str,
        asset_id: int,
        expected_sale_price: int,
        expected_currency: str | Currency,
        value: int = 0,
    ) -> Purchased:
        expected = parse_currency(expected_currency)
        with self._guard, atomic(*self._journaled):
            seller = self._ledger.owner_of(asset_id)
            listing = self._check_terms(asset_id, expected_sale_price, expected)

            quote = self._royalties.compute(asset_id, listing.sale_price, listing.historical_price)
            proceeds = listing.sale_price - quote.amount
            payer = self._collect(buyer, listing, value)

            if not self._payments.pay(quote.amount, payer, quote.recipient, listing.currency):
                raise PaymentTransferFailed(f"royalty payment to {quote.recipient} failed")
            if not self._payments.pay(proceeds, payer, seller, listing.currency):
                raise PaymentTransferFailed(f"seller payment to {seller} failed")

            self._ledger.transfer(seller, buyer, asset_id)
            # Ledgers that do not run the pre-transfer hook still must not leave the listing live
            if self._registry.is_active(asset_id):
                self._registry.invalidate(asset_id)

            purchased = Purchased(
                asset_id=asset_id,
                seller=seller,
                buyer=buyer,
                sale_price=listing.sale_price,
                currency=str(listing.currency),
                royalty_amount=quote.amount,
            )
            event = cast(Purchased, self._events.emit(purchased))
        _log.info(
            "purchase_completed",
            asset_id=asset_id,
            seller=seller,
            buyer=buyer,
            sale_price=listing.sale_price,
            currency=str(listing.currency),
            royalty_recipient=quote.recipient,
            royalty_amount=quote.amount,
            proceeds=proceeds,
        )
        return event

    def _check_terms(self, asset_id: int, expected_sale_price: int, expected: Currency) -> Listing:
        stored = self._registry.stored(asset_id)
        sale_price = stored.sale_price if stored is not None else 0
        currency: Currency = stored.currency if stored is not None else Native()
        if expected_sale_price != sale_price:
            raise InconsistentSalePrice(
                f"expected price {expected_sale_price}, listing is at {sale_price}"
            )
        if expected != currency:
            raise InconsistentTokens(f"expected currency {expected}, listing is in {currency}")
        if stored is None or not self._registry.is_active(asset_id):
            raise InvalidListing(f"asset {asset_id} is not listed")
        return stored

    def _collect(self, buyer: str, listing: Listing, value: int) -> str:
        """Check the buyer's funding and return the account both legs are paid from."""
        if is_native(listing.currency):
            if value != listing.sale_price:
                raise IncorrectValueSent(f"sent {value}, price is {listing.sale_price}")
            if not self._payments.pay(value, buyer, self.account, listing.currency):
                raise PaymentTransferFailed(f"could not collect {value} from {buyer}")
            return self.account
        allowance = self._payments.allowance(listing.currency, buyer)
        if allowance < listing.sale_price:
            raise InsufficientAllowance(
                f"allowance {allowance} below price {listing.sale_price}"
            )
        return buyer
