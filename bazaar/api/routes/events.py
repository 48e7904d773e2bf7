from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...runtime import Exchange
from ..deps import exchange

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
def events(
    offset: int = Query(0, ge=0, description="First sequence number to return"),
    kind: str | None = Query(None, description="UpdateListing or Purchased"),
    ex: Exchange = Depends(exchange),
) -> dict[str, object]:
    recorded = ex.coordinator.events_since(offset)
    items = [e.model_dump() for e in recorded if not kind or e.kind == kind]
    next_offset = recorded[-1].seq + 1 if recorded else max(offset, 0)
    return {"offset": offset, "count": len(items), "next_offset": next_offset, "items": items}
