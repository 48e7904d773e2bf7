from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from ..clients.native import NativeBank
from ..clients.tokens import FungibleToken
from ..logging import get_logger
from ..models.currency import Currency, Native

_log = get_logger()


class PaymentRail(Protocol):
    def pay(self, amount: int, payer: str, recipient: str) -> bool: ...

    def allowance(self, owner: str) -> int: ...


class NativeRail:
    """Direct sends from an account the exchange controls."""

    def __init__(self, bank: NativeBank) -> None:
        self._bank = bank

    def pay(self, amount: int, payer: str, recipient: str) -> bool:
        return self._bank.send(payer, recipient, amount)

    def allowance(self, owner: str) -> int:
        # Native value is attached to the call, never pre-authorized
        return 0


class TokenRail:
    """Pulls funds with ``transfer_from`` against an allowance granted to ``spender``."""

    def __init__(self, token: FungibleToken, spender: str) -> None:
        self._token = token
        self._spender = spender

    def pay(self, amount: int, payer: str, recipient: str) -> bool:
        return bool(self._token.transfer_from(self._spender, payer, recipient, amount))

    def allowance(self, owner: str) -> int:
        return self._token.allowance(owner, self._spender)


class PaymentProcessor:
    def __init__(self, bank: NativeBank, tokens: Iterable[FungibleToken], spender: str) -> None:
        self._native = NativeRail(bank)
        self._tokens = {t.address: TokenRail(t, spender) for t in tokens}

    def supports(self, currency: Currency) -> bool:
        return isinstance(currency, Native) or currency.address in self._tokens

    def rail_for(self, currency: Currency) -> PaymentRail | None:
        if isinstance(currency, Native):
            return self._native
        return self._tokens.get(currency.address)

    def allowance(self, currency: Currency, owner: str) -> int:
        rail = self.rail_for(currency)
        if rail is None:
            return 0
        return rail.allowance(owner)

    def pay(self, amount: int, payer: str, recipient: str, currency: Currency) -> bool:
        """Move ``amount`` from payer to recipient; False when the rail refuses."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        if amount == 0:
            return True
        rail = self.rail_for(currency)
        if rail is None:
            _log.warning("payment_unknown_currency", currency=str(currency), amount=amount)
            return False
        try:
            ok = rail.pay(amount, payer, recipient)
        except Exception as exc:
            _log.warning(
                "payment_rail_error",
                currency=str(currency),
                payer=payer,
                recipient=recipient,
                amount=amount,
                error=repr(exc),
            )
            return False
        if not ok:
            _log.warning(
                "payment_leg_failed",
                currency=str(currency),
                payer=payer,
                recipient=recipient,
                amount=amount,
            )
        return ok
