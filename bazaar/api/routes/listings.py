from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ...models.currency import Currency, Token, parse_currency
from ...models.events import Purchased
from ...models.listing import BuyItemRequest, ListingView, ListItemRequest
from ...runtime import Exchange
from ..deps import account, exchange

router = APIRouter(prefix="/listings", tags=["listings"])


def _currency(raw: str, ex: Exchange) -> Currency:
    try:
        currency = parse_currency(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid currency")
    allowed = ex.settings.allowed_tokens()
    if isinstance(currency, Token) and allowed is not None and currency.address not in allowed:
        raise HTTPException(status_code=400, detail="token not allowed")
    return currency


@router.get("")
def active_listings(ex: Exchange = Depends(exchange)) -> dict[str, object]:
    items = [
        ListingView.from_listing(aid, listing).model_dump()
        for aid, listing in ex.coordinator.active_listings()
    ]
    return {"count": len(items), "items": items}


@router.get("/{asset_id}")
def get_listing(asset_id: int, ex: Exchange = Depends(exchange)) -> ListingView:
    """Current terms for an asset; all fields zeroed when it is not for sale."""
    return ex.coordinator.get_listing(asset_id)


@router.put("/{asset_id}")
def list_item(
    asset_id: int,
    body: ListItemRequest,
    caller: str = Depends(account),
    ex: Exchange = Depends(exchange),
) -> ListingView:
    return ex.coordinator.list_item(
        caller,
        asset_id,
        sale_price=body.sale_price,
        expires_at=body.expires_at,
        currency=_currency(body.currency, ex),
        historical_price=body.historical_price,
    )


@router.delete("/{asset_id}", status_code=204)
def delist_item(
    asset_id: int,
    caller: str = Depends(account),
    ex: Exchange = Depends(exchange),
) -> Response:
    ex.coordinator.delist_item(caller, asset_id)
    return Response(status_code=204)


@router.post("/{asset_id}/buy")
def buy_item(
    asset_id: int,
    body: BuyItemRequest,
    buyer: str = Depends(account),
    ex: Exchange = Depends(exchange),
) -> Purchased:
    return ex.coordinator.buy_item(
        buyer,
        asset_id,
        expected_sale_price=body.expected_sale_price,
        expected_currency=_currency(body.expected_currency, ex),
        value=body.value,
    )
