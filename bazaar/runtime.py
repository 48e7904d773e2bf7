from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import lru_cache

from .clients.ledger import InMemoryLedger
from .clients.native import NativeBank
from .clients.royalties import HttpRoyaltyRegistry, RoyaltyConfig, StaticRoyaltyConfig
from .clients.tokens import InMemoryToken
from .config import Settings, settings
from .services.coordinator import PurchaseCoordinator
from .services.events import EventLog
from .services.payments import PaymentProcessor
from .services.registry import Clock, ListingRegistry, system_clock
from .services.royalty import RoyaltyCalculator


@dataclass
class Exchange:
    """One wired exchange: collaborators plus the coordinator on top."""

    ledger: InMemoryLedger
    bank: NativeBank
    tokens: dict[str, InMemoryToken]
    royalty_config: RoyaltyConfig
    events: EventLog
    registry: ListingRegistry
    coordinator: PurchaseCoordinator
    settings: Settings = field(repr=False)

    def token(self, address: str) -> InMemoryToken:
        return self.tokens[address]


def build_exchange(
    cfg: Settings | None = None,
    tokens: Iterable[InMemoryToken] = (),
    royalty_config: RoyaltyConfig | None = None,
    clock: Clock = system_clock,
) -> Exchange:
    cfg = cfg or settings
    ledger = InMemoryLedger()
    bank = NativeBank()
    token_list = list(tokens)
    if not token_list:
        # Whitelisted tokens get an in-memory ledger each
        token_list = [InMemoryToken(address) for address in sorted(cfg.allowed_tokens() or ())]
    token_map = {t.address: t for t in token_list}
    if royalty_config is None:
        if cfg.ROYALTY_REGISTRY_URL:
            royalty_config = HttpRoyaltyRegistry()
        else:
            royalty_config = StaticRoyaltyConfig(cfg.DEFAULT_ROYALTY_RECIPIENT, cfg.DEFAULT_ROYALTY_BPS)
    events = EventLog()
    registry = ListingRegistry(ledger, events, clock=clock)
    payments = PaymentProcessor(bank, token_map.values(), spender=cfg.MARKET_ACCOUNT)
    coordinator = PurchaseCoordinator(
        ledger=ledger,
        registry=registry,
        royalties=RoyaltyCalculator(royalty_config),
        payments=payments,
        events=events,
        account=cfg.MARKET_ACCOUNT,
        journaled=(ledger, bank, *token_map.values()),
    )
    return Exchange(
        ledger=ledger,
        bank=bank,
        tokens=token_map,
        royalty_config=royalty_config,
        events=events,
        registry=registry,
        coordinator=coordinator,
        settings=cfg,
    )


@lru_cache(maxsize=1)
def get_exchange() -> Exchange:
    return build_exchange()
