from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, cast

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

LISTING_HEADERS = ["asset_id", "sale_price", "expires_at", "currency", "historical_price"]
EVENT_HEADERS = [
    "seq",
    "kind",
    "asset_id",
    "seller",
    "buyer",
    "sale_price",
    "expires_at",
    "currency",
    "historical_price",
    "royalty_amount",
]


def _auto_fit(ws: Worksheet) -> None:
    widths: dict[int, int] = {}
    for row in ws.rows:
        for cell in row:
            value = str(cell.value) if cell.value is not None else ""
            col_idx = int(getattr(cell, "col_idx", getattr(cell, "column", 0)))
            widths[col_idx] = max(widths.get(col_idx, 0), len(value) + 2)
    for col, width in widths.items():
        ws.column_dimensions[get_column_letter(col)].width = min(60, width)


def _fill(ws: Worksheet, headers: list[str], rows: Iterable[dict[str, Any]]) -> None:
    ws.append(headers)
    for h in ws[1]:
        h.font = Font(bold=True)
    for row in rows:
        # Prices can exceed Excel's float precision; keep them exact as text
        ws.append([_cell(row.get(h)) for h in headers])
    ws.auto_filter.ref = ws.dimensions
    ws.freeze_panes = "A2"
    _auto_fit(ws)


def _cell(value: Any) -> Any:
    if isinstance(value, int) and abs(value) >= 2**53:
        return str(value)
    return value


def build_workbook(
    listings: Iterable[dict[str, Any]],
    events: Iterable[dict[str, Any]],
) -> Workbook:
    wb = Workbook()
    ws_listings = cast(Worksheet, wb.active)
    ws_listings.title = "Listings"
    ws_events = cast(Worksheet, wb.create_sheet("Events"))

    _fill(ws_listings, LISTING_HEADERS, listings)
    _fill(ws_events, EVENT_HEADERS, events)

    ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    for ws in (ws_listings, ws_events):
        ws.oddFooter.center.text = f"Exported {ts}"  # type: ignore[union-attr]

    return wb
