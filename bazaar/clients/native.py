from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..logging import get_logger

_log = get_logger()

# Called on delivery with (sender, amount); raising rejects the payment
ReceiveCallback = Callable[[str, int], None]


class NativeBank:
    """Native-currency balances with direct sends.

    A recipient can refuse direct payments (``reject``) or run code on
    receipt (``on_receive``). Either way a refused delivery is reported as a
    failed send and balances are left untouched.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._rejecting: set[str] = set()
        self._receivers: dict[str, ReceiveCallback] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._balances[account] = self.balance_of(account) + amount

    def reject(self, account: str, rejecting: bool = True) -> None:
        if rejecting:
            self._rejecting.add(account)
        else:
            self._rejecting.discard(account)

    def on_receive(self, account: str, callback: ReceiveCallback | None) -> None:
        if callback is None:
            self._receivers.pop(account, None)
        else:
            self._receivers[account] = callback

    def send(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        if recipient in self._rejecting:
            _log.warning("native_send_rejected", sender=sender, recipient=recipient, amount=amount)
            return False
        if self.balance_of(sender) < amount:
            _log.warning("native_send_insufficient", sender=sender, recipient=recipient, amount=amount)
            return False
        before = dict(self._balances)
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        callback = self._receivers.get(recipient)
        if callback is not None:
            try:
                callback(sender, amount)
            except Exception as exc:
                self._balances = before
                _log.warning(
                    "native_send_reverted",
                    sender=sender,
                    recipient=recipient,
                    amount=amount,
                    error=repr(exc),
                )
                return False
        return True

    def checkpoint(self) -> Any:
        return dict(self._balances)

    def restore(self, state: Any) -> None:
        self._balances = dict(state)
