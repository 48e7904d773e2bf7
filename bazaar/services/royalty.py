from __future__ import annotations

from dataclasses import dataclass

from ..clients.royalties import RoyaltyConfig
from ..errors import RoyaltyExceedsSalePrice


@dataclass(frozen=True)
class RoyaltyQuote:
    recipient: str
    amount: int
    basis: int


def taxable_basis(sale_price: int, historical_price: int) -> int:
    return max(0, sale_price - historical_price)


class RoyaltyCalculator:
    """Value-added royalties: only appreciation over the seller's own
    acquisition price is subject to the configured rate."""

    def __init__(self, config: RoyaltyConfig) -> None:
        self._config = config

    def compute(self, asset_id: int, sale_price: int, historical_price: int) -> RoyaltyQuote:
        basis = taxable_basis(sale_price, historical_price)
        info = self._config.royalty_info(asset_id, basis)
        # Recipient is still reported when nothing is owed
        amount = info.amount if basis > 0 else 0
        if amount < 0 or amount > basis:
            raise RoyaltyExceedsSalePrice(
                f"royalty {info.amount} exceeds taxable basis {basis} for asset {asset_id}"
            )
        return RoyaltyQuote(recipient=info.recipient, amount=amount, basis=basis)
