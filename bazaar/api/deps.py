from __future__ import annotations

from fastapi import Header, HTTPException

from ..runtime import Exchange, get_exchange


def exchange() -> Exchange:
    return get_exchange()


def account(x_account: str | None = Header(default=None)) -> str:
    if not x_account or not x_account.strip():
        raise HTTPException(status_code=401, detail="X-Account header required")
    return x_account.strip()
