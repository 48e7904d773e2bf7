from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from ..logging import get_logger

_log = get_logger()

PreTransferHook = Callable[[int, str, str], None]


class LedgerError(Exception):
    pass


class UnknownAsset(LedgerError):
    pass


class NotCurrentOwner(LedgerError):
    pass


class TransferNotAuthorized(LedgerError):
    pass


class OwnershipLedger(Protocol):
    """What the exchange needs from the asset ownership store."""

    def owner_of(self, asset_id: int) -> str: ...

    def is_approved_or_owner(self, spender: str, asset_id: int) -> bool: ...

    def transfer(self, from_: str, to: str, asset_id: int) -> None: ...

    def add_pre_transfer_hook(self, hook: PreTransferHook) -> None: ...


class InMemoryLedger:
    """Ownership store for uniquely identified assets.

    Every transfer path goes through ``_move``, which runs the registered
    pre-transfer hooks before the owner changes.
    """

    def __init__(self) -> None:
        self._owners: dict[int, str] = {}
        self._approvals: dict[int, str] = {}
        self._operators: dict[str, set[str]] = {}
        self._hooks: list[PreTransferHook] = []

    def add_pre_transfer_hook(self, hook: PreTransferHook) -> None:
        self._hooks.append(hook)

    def mint(self, asset_id: int, to: str) -> None:
        if asset_id in self._owners:
            raise LedgerError(f"asset {asset_id} already minted")
        self._owners[asset_id] = to
        _log.info("asset_minted", asset_id=asset_id, owner=to)

    def owner_of(self, asset_id: int) -> str:
        try:
            return self._owners[asset_id]
        except KeyError:
            raise UnknownAsset(f"asset {asset_id} does not exist") from None

    def get_approved(self, asset_id: int) -> str | None:
        self.owner_of(asset_id)
        return self._approvals.get(asset_id)

    def approve(self, caller: str, to: str | None, asset_id: int) -> None:
        owner = self.owner_of(asset_id)
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise TransferNotAuthorized(f"{caller} cannot approve for asset {asset_id}")
        if to is None:
            self._approvals.pop(asset_id, None)
        else:
            self._approvals[asset_id] = to

    def set_approval_for_all(self, owner: str, operator: str, approved: bool) -> None:
        ops = self._operators.setdefault(owner, set())
        if approved:
            ops.add(operator)
        else:
            ops.discard(operator)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return operator in self._operators.get(owner, set())

    def is_approved_or_owner(self, spender: str, asset_id: int) -> bool:
        owner = self.owner_of(asset_id)
        return (
            spender == owner
            or self.is_approved_for_all(owner, spender)
            or self._approvals.get(asset_id) == spender
        )

    def transfer_from(self, caller: str, from_: str, to: str, asset_id: int) -> None:
        if not self.is_approved_or_owner(caller, asset_id):
            raise TransferNotAuthorized(f"{caller} cannot transfer asset {asset_id}")
        self._move(from_, to, asset_id)

    def transfer(self, from_: str, to: str, asset_id: int) -> None:
        """Privileged transfer used by the exchange after a settled purchase."""
        self._move(from_, to, asset_id)

    def _move(self, from_: str, to: str, asset_id: int) -> None:
        owner = self.owner_of(asset_id)
        if owner != from_:
            raise NotCurrentOwner(f"{from_} does not own asset {asset_id}")
        if not to:
            raise LedgerError("transfer to empty account")
        for hook in self._hooks:
            hook(asset_id, from_, to)
        self._approvals.pop(asset_id, None)
        self._owners[asset_id] = to
        _log.info("asset_transferred", asset_id=asset_id, from_=from_, to=to)

    def checkpoint(self) -> Any:
        return (
            dict(self._owners),
            dict(self._approvals),
            {owner: set(ops) for owner, ops in self._operators.items()},
        )

    def restore(self, state: Any) -> None:
        owners, approvals, operators = state
        self._owners = dict(owners)
        self._approvals = dict(approvals)
        self._operators = {owner: set(ops) for owner, ops in operators.items()}
