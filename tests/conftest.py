from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from bazaar.api.deps import exchange
from bazaar.api.main import create_app
from bazaar.clients.royalties import StaticRoyaltyConfig
from bazaar.clients.tokens import InMemoryToken
from bazaar.config import Settings
from bazaar.runtime import Exchange, build_exchange

NOW = 1_700_000_000
MARKET = "market"
ROYALTY_RECIPIENT = "artist"
TOKEN = "0xusdc"
SELLER = "alice"
BUYER = "bob"
FUNDS = 1_000_000


class FakeClock:
    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ex(clock: FakeClock) -> Exchange:
    cfg = Settings(MARKET_ACCOUNT=MARKET, DEFAULT_ROYALTY_RECIPIENT=ROYALTY_RECIPIENT, DEFAULT_ROYALTY_BPS=1000)
    exchange_ = build_exchange(
        cfg,
        tokens=[InMemoryToken(TOKEN, symbol="USDC")],
        royalty_config=StaticRoyaltyConfig(ROYALTY_RECIPIENT, 1000),
        clock=clock,
    )
    exchange_.ledger.mint(1, SELLER)
    exchange_.ledger.mint(2, SELLER)
    for account in (SELLER, BUYER):
        exchange_.bank.mint(account, FUNDS)
        exchange_.token(TOKEN).mint(account, FUNDS)
    return exchange_


@pytest.fixture()
def client(ex: Exchange) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[exchange] = lambda: ex
    with TestClient(app) as c:
        yield c
