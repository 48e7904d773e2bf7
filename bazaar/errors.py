from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every named marketplace failure.

    ``code`` is the stable, client-facing kind; ``status_code`` is what the
    HTTP layer answers with.
    """

    status_code = 400

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.code)
        self.detail = detail or self.code

    @property
    def code(self) -> str:
        return type(self).__name__


class SalePriceCannotBeZero(MarketplaceError):
    status_code = 422


class InvalidExpiresTimestamp(MarketplaceError):
    status_code = 422


class CallerIsntOwnerNorApproved(MarketplaceError):
    status_code = 403


class InconsistentSalePrice(MarketplaceError):
    status_code = 409


class InconsistentTokens(MarketplaceError):
    status_code = 409


class InvalidListing(MarketplaceError):
    status_code = 409


class IncorrectValueSent(MarketplaceError):
    status_code = 402


class InsufficientAllowance(MarketplaceError):
    status_code = 402


class PaymentTransferFailed(MarketplaceError):
    status_code = 402


class RoyaltyExceedsSalePrice(MarketplaceError):
    status_code = 422


class ReentrantCall(MarketplaceError):
    status_code = 409


class UnsupportedCurrency(MarketplaceError):
    status_code = 422


class RoyaltyLookupFailed(MarketplaceError):
    """The remote royalty registry could not give a usable answer."""

    status_code = 502
