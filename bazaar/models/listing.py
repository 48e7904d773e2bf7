from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from .currency import NATIVE, Currency

UINT64_MAX = 2**64 - 1


@dataclass(frozen=True)
class Listing:
    """Sale terms attached to one asset.

    Amounts are in the smallest unit of ``currency``. ``historical_price`` is
    what the current owner paid and is exempt from royalties.
    """

    sale_price: int
    expires_at: int
    currency: Currency
    historical_price: int = 0

    def is_active(self, now: int) -> bool:
        return self.sale_price > 0 and self.expires_at >= now


class ListingView(BaseModel):
    asset_id: int
    sale_price: int = 0
    expires_at: int = 0
    currency: str = NATIVE
    historical_price: int = 0

    @classmethod
    def empty(cls, asset_id: int) -> ListingView:
        return cls(asset_id=asset_id)

    @classmethod
    def from_listing(cls, asset_id: int, listing: Listing | None) -> ListingView:
        if listing is None:
            return cls.empty(asset_id)
        return cls(
            asset_id=asset_id,
            sale_price=listing.sale_price,
            expires_at=listing.expires_at,
            currency=str(listing.currency),
            historical_price=listing.historical_price,
        )

    def as_tuple(self) -> tuple[int, int, str, int]:
        return (self.sale_price, self.expires_at, self.currency, self.historical_price)


class ListItemRequest(BaseModel):
    sale_price: int = Field(..., ge=0)
    expires_at: int = Field(..., ge=0, le=UINT64_MAX)
    currency: str = Field(default=NATIVE, min_length=1)
    historical_price: int = Field(default=0, ge=0)


class BuyItemRequest(BaseModel):
    expected_sale_price: int = Field(..., ge=0)
    expected_currency: str = Field(default=NATIVE, min_length=1)
    value: int = Field(default=0, ge=0)
