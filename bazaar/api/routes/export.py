from __future__ import annotations

from io import BytesIO

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ...exporters.excel import build_workbook
from ...models.listing import ListingView
from ...runtime import Exchange
from ..deps import exchange

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/excel/events")
def export_events_excel(ex: Exchange = Depends(exchange)) -> StreamingResponse:
    """Workbook with the active listings and the full event log."""
    listings = [
        ListingView.from_listing(aid, listing).model_dump()
        for aid, listing in ex.coordinator.active_listings()
    ]
    events = [e.model_dump() for e in ex.coordinator.events_since(0)]

    wb = build_workbook(listings=listings, events=events)
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    headers = {"Content-Disposition": "attachment; filename=bazaar_events.xlsx"}
    return StreamingResponse(
        buf,
        media_type=(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        ),
        headers=headers,
    )
