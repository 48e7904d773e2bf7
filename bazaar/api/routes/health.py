from __future__ import annotations

from fastapi import APIRouter, Depends

from ... import __version__
from ...runtime import Exchange
from ..deps import exchange

router = APIRouter()


@router.get("/healthz")
async def healthz(ex: Exchange = Depends(exchange)) -> dict[str, object]:
    return {"status": "ok", "version": __version__, "events": len(ex.events)}
