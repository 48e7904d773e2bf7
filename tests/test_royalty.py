from __future__ import annotations

import pytest

from bazaar.clients.royalties import RoyaltyInfo, StaticRoyaltyConfig
from bazaar.errors import RoyaltyExceedsSalePrice
from bazaar.services.royalty import RoyaltyCalculator, taxable_basis


def _calc(bps: int = 1000) -> RoyaltyCalculator:
    return RoyaltyCalculator(StaticRoyaltyConfig("artist", bps))


def test_full_price_is_taxed_without_history() -> None:
    quote = _calc().compute(1, 100, 0)
    assert (quote.recipient, quote.amount, quote.basis) == ("artist", 10, 100)


def test_only_appreciation_is_taxed() -> None:
    quote = _calc().compute(1, 1000, 600)
    assert quote.basis == 400
    assert quote.amount == 40


@pytest.mark.parametrize("historical", [100, 150, 10**9])
def test_sale_at_or_below_cost_pays_nothing(historical: int) -> None:
    quote = _calc().compute(1, 100, historical)
    assert quote.amount == 0
    assert quote.recipient == "artist"


def test_amount_rounds_down() -> None:
    assert _calc(250).compute(1, 99, 0).amount == 2


def test_per_asset_override() -> None:
    cfg = StaticRoyaltyConfig("artist", 1000)
    cfg.set_asset_royalty(7, "estate", 500)
    calc = RoyaltyCalculator(cfg)

    assert calc.compute(7, 100, 0).recipient == "estate"
    assert calc.compute(7, 100, 0).amount == 5
    assert calc.compute(8, 100, 0).recipient == "artist"

    cfg.reset_asset_royalty(7)
    assert calc.compute(7, 100, 0).amount == 10


def test_invalid_bps_rejected() -> None:
    with pytest.raises(ValueError):
        StaticRoyaltyConfig("artist", 10_001)


def test_config_overcharging_is_rejected() -> None:
    class Greedy:
        def royalty_info(self, asset_id: int, amount: int) -> RoyaltyInfo:
            return RoyaltyInfo("artist", amount + 1)

    with pytest.raises(RoyaltyExceedsSalePrice):
        RoyaltyCalculator(Greedy()).compute(1, 100, 0)


def test_taxable_basis_never_negative() -> None:
    assert taxable_basis(10, 20) == 0
    assert taxable_basis(20, 10) == 10
