from __future__ import annotations

from ..clients.ledger import OwnershipLedger
from ..logging import get_logger
from .registry import ListingRegistry

_log = get_logger()


class ListingInvalidationHook:
    """Pre-transfer callback: a listing never survives a change of owner."""

    def __init__(self, registry: ListingRegistry) -> None:
        self._registry = registry

    def __call__(self, asset_id: int, from_: str, to: str) -> None:
        if self._registry.is_active(asset_id):
            _log.info("listing_cleared_by_transfer", asset_id=asset_id, from_=from_, to=to)
            self._registry.invalidate(asset_id)

    def install(self, ledger: OwnershipLedger) -> ListingInvalidationHook:
        ledger.add_pre_transfer_hook(self)
        return self
