from __future__ import annotations

from typing import Any, Protocol

from ..logging import get_logger

_log = get_logger()


class FungibleToken(Protocol):
    address: str

    def allowance(self, owner: str, spender: str) -> int: ...

    def transfer_from(self, spender: str, from_: str, to: str, amount: int) -> bool: ...


class InMemoryToken:
    """Balance/allowance token. ``transfer_from`` reports failure with False."""

    def __init__(self, address: str, symbol: str | None = None) -> None:
        self.address = address
        self.symbol = symbol or address
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._balances[account] = self.balance_of(account) + amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._allowances[(owner, spender)] = amount

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def transfer_from(self, spender: str, from_: str, to: str, amount: int) -> bool:
        allowed = self.allowance(from_, spender)
        if allowed < amount or self.balance_of(from_) < amount:
            _log.warning(
                "token_transfer_refused",
                token=self.address,
                from_=from_,
                to=to,
                amount=amount,
                allowance=allowed,
            )
            return False
        self._allowances[(from_, spender)] = allowed - amount
        self._balances[from_] = self.balance_of(from_) - amount
        self._balances[to] = self.balance_of(to) + amount
        return True

    def checkpoint(self) -> Any:
        return (dict(self._balances), dict(self._allowances))

    def restore(self, state: Any) -> None:
        balances, allowances = state
        self._balances = dict(balances)
        self._allowances = dict(allowances)
