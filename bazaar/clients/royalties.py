from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, cast

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..config import settings
from ..errors import RoyaltyLookupFailed
from ..logging import get_logger

_log = get_logger()

BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class RoyaltyInfo:
    recipient: str
    amount: int


class RoyaltyConfig(Protocol):
    def royalty_info(self, asset_id: int, amount: int) -> RoyaltyInfo: ...


def _apply_bps(amount: int, bps: int) -> int:
    return amount * bps // BPS_DENOMINATOR


def _check_bps(bps: int) -> None:
    if not 0 <= bps <= BPS_DENOMINATOR:
        raise ValueError(f"royalty basis points out of range: {bps}")


class StaticRoyaltyConfig:
    """Default recipient/rate with optional per-asset overrides."""

    def __init__(self, recipient: str, bps: int) -> None:
        _check_bps(bps)
        self._default = (recipient, bps)
        self._per_asset: dict[int, tuple[str, int]] = {}

    def set_asset_royalty(self, asset_id: int, recipient: str, bps: int) -> None:
        _check_bps(bps)
        self._per_asset[asset_id] = (recipient, bps)

    def reset_asset_royalty(self, asset_id: int) -> None:
        self._per_asset.pop(asset_id, None)

    def royalty_info(self, asset_id: int, amount: int) -> RoyaltyInfo:
        recipient, bps = self._per_asset.get(asset_id, self._default)
        return RoyaltyInfo(recipient=recipient, amount=_apply_bps(amount, bps))


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


def _retryer() -> Retrying:
    return Retrying(
        reraise=True,
        stop=stop_after_attempt(settings.RETRY_MAX),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=3),
        retry=retry_if_exception(_is_transient),
    )


def _client() -> httpx.Client:
    return httpx.Client(
        base_url=str(settings.ROYALTY_REGISTRY_URL),
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT),
        headers={"User-Agent": settings.USER_AGENT},
    )


class HttpRoyaltyRegistry:
    """Royalty lookup against a remote registry.

    Endpoint: GET /royalties/{asset_id} -> {"recipient": str, "bps": int}.
    Transport errors and 5xx answers are retried. Anything still failing,
    and any malformed answer, raises ``RoyaltyLookupFailed``.
    """

    def royalty_info(self, asset_id: int, amount: int) -> RoyaltyInfo:
        try:
            with _client() as client:
                for attempt in _retryer():
                    with attempt:
                        resp = client.get(f"/royalties/{asset_id}")
                        resp.raise_for_status()
                        data = cast(dict[str, Any], resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            _log.warning("royalty_lookup_failed", asset_id=asset_id, error=repr(exc))
            raise RoyaltyLookupFailed(f"royalty registry unavailable for asset {asset_id}") from exc
        recipient = data.get("recipient") if isinstance(data, dict) else None
        bps = data.get("bps") if isinstance(data, dict) else None
        if not isinstance(recipient, str) or not isinstance(bps, int) or not 0 <= bps <= BPS_DENOMINATOR:
            raise RoyaltyLookupFailed(f"malformed royalty config for asset {asset_id}: {data!r}")
        _log.info("royalty_config_fetched", asset_id=asset_id, recipient=recipient, bps=bps)
        return RoyaltyInfo(recipient=recipient, amount=_apply_bps(amount, bps))
