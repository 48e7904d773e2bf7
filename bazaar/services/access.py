from __future__ import annotations

from ..clients.ledger import OwnershipLedger
from ..errors import CallerIsntOwnerNorApproved


def require_owner_or_approved(ledger: OwnershipLedger, asset_id: int, caller: str) -> str:
    """Return the current owner if ``caller`` may act for them on ``asset_id``."""
    owner = ledger.owner_of(asset_id)
    if not ledger.is_approved_or_owner(caller, asset_id):
        raise CallerIsntOwnerNorApproved(f"{caller} is not owner nor approved for asset {asset_id}")
    return owner
