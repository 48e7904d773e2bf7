from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .currency import NATIVE


class UpdateListing(BaseModel):
    kind: Literal["UpdateListing"] = "UpdateListing"
    seq: int = Field(default=0, ge=0)
    asset_id: int
    seller: str | None
    sale_price: int = 0
    expires_at: int = 0
    currency: str = NATIVE
    historical_price: int = 0

    @property
    def is_removal(self) -> bool:
        return self.sale_price == 0 and self.expires_at == 0


class Purchased(BaseModel):
    kind: Literal["Purchased"] = "Purchased"
    seq: int = Field(default=0, ge=0)
    asset_id: int
    seller: str
    buyer: str
    sale_price: int
    currency: str
    royalty_amount: int


Event = UpdateListing | Purchased
