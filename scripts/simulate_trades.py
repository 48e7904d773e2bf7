from __future__ import annotations

import argparse
import random
from collections import Counter
from pathlib import Path

from tqdm import tqdm

from bazaar.clients.tokens import InMemoryToken
from bazaar.errors import MarketplaceError
from bazaar.exporters.excel import build_workbook
from bazaar.models.listing import ListingView
from bazaar.runtime import build_exchange

TOKEN = "0xusd"


def main() -> None:
    ap = argparse.ArgumentParser(description="Run random list/buy rounds against an in-memory exchange")
    ap.add_argument("--assets", type=int, default=20)
    ap.add_argument("--traders", type=int, default=5)
    ap.add_argument("--rounds", type=int, default=500)
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--out", default=None, help="Optional .xlsx path for the event log")
    args = ap.parse_args()

    rng = random.Random(args.seed)
    ex = build_exchange(tokens=[InMemoryToken(TOKEN, symbol="USD")])
    market = ex.coordinator.account
    traders = [f"trader-{i}" for i in range(args.traders)]
    for t in traders:
        ex.bank.mint(t, 10**9)
        ex.token(TOKEN).mint(t, 10**9)
        ex.token(TOKEN).approve(t, market, 10**9)
    for aid in range(1, args.assets + 1):
        ex.ledger.mint(aid, rng.choice(traders))

    # Last price paid per asset becomes the next listing's historical price
    paid: dict[int, int] = {}
    outcomes: Counter[str] = Counter()
    for _ in tqdm(range(args.rounds), desc="Trading"):
        aid = rng.randint(1, args.assets)
        owner = ex.ledger.owner_of(aid)
        currency = rng.choice(["native", TOKEN])
        price = rng.randint(1, 10_000)
        try:
            ex.coordinator.list_item(
                owner,
                aid,
                price,
                ex.registry.now() + 3600,
                currency,
                historical_price=paid.get(aid, 0),
            )
            buyer = rng.choice([t for t in traders if t != owner] or traders)
            quoted = price if rng.random() > 0.1 else price - 1
            ex.coordinator.buy_item(buyer, aid, quoted, currency, value=price if currency == "native" else 0)
            paid[aid] = price
            outcomes["purchased"] += 1
        except MarketplaceError as exc:
            outcomes[exc.code] += 1

    for k, v in sorted(outcomes.items()):
        print(f"{k}: {v}")
    print(f"events: {len(ex.events)}")

    if args.out:
        listings = [ListingView.from_listing(a, l).model_dump() for a, l in ex.registry.active_listings()]
        wb = build_workbook(listings=listings, events=[e.model_dump() for e in ex.events.since(0)])
        Path(args.out).parent.mkdir(parents=True, exist_ok=True)
        wb.save(args.out)
        print(f"Wrote workbook: {args.out}")


if __name__ == "__main__":
    main()
