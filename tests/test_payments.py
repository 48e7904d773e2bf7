from __future__ import annotations

import pytest

from bazaar.clients.native import NativeBank
from bazaar.clients.tokens import InMemoryToken
from bazaar.models.currency import Native, Token
from bazaar.services.payments import PaymentProcessor

SPENDER = "market"


def _setup() -> tuple[NativeBank, InMemoryToken, PaymentProcessor]:
    bank = NativeBank()
    bank.mint("payer", 100)
    token = InMemoryToken("0xt")
    token.mint("payer", 100)
    return bank, token, PaymentProcessor(bank, [token], spender=SPENDER)


def test_zero_amount_is_a_no_op() -> None:
    bank, token, payments = _setup()
    bank.reject("nobody")
    assert payments.pay(0, "payer", "nobody", Native())
    assert payments.pay(0, "payer", "nobody", Token("0xunknown"))
    assert bank.balance_of("payer") == 100


def test_native_send() -> None:
    bank, _, payments = _setup()
    assert payments.pay(30, "payer", "r", Native())
    assert bank.balance_of("r") == 30
    assert bank.balance_of("payer") == 70


def test_native_rejected_and_insufficient() -> None:
    bank, _, payments = _setup()
    bank.reject("r")
    assert not payments.pay(30, "payer", "r", Native())
    assert not payments.pay(500, "payer", "other", Native())
    assert bank.balance_of("payer") == 100


def test_native_receive_callback_failure_reverts_delivery() -> None:
    bank, _, payments = _setup()

    def _boom(sender: str, amount: int) -> None:
        raise RuntimeError("no thanks")

    bank.on_receive("r", _boom)
    assert not payments.pay(30, "payer", "r", Native())
    assert bank.balance_of("r") == 0
    assert bank.balance_of("payer") == 100


def test_token_pull_against_allowance() -> None:
    _, token, payments = _setup()
    token.approve("payer", SPENDER, 50)
    assert payments.allowance(Token("0xt"), "payer") == 50

    assert payments.pay(20, "payer", "r", Token("0xt"))
    assert token.balance_of("r") == 20
    assert payments.allowance(Token("0xt"), "payer") == 30

    assert not payments.pay(40, "payer", "r", Token("0xt"))
    assert token.balance_of("r") == 20


def test_unknown_token_reports_failure() -> None:
    _, _, payments = _setup()
    assert payments.allowance(Token("0xmissing"), "payer") == 0
    assert not payments.pay(1, "payer", "r", Token("0xmissing"))
    assert not payments.supports(Token("0xmissing"))
    assert payments.supports(Native())


def test_rail_exception_is_reported_as_failure() -> None:
    class Broken:
        address = "0xbroken"

        def allowance(self, owner: str, spender: str) -> int:
            return 10**6

        def transfer_from(self, spender: str, from_: str, to: str, amount: int) -> bool:
            raise RuntimeError("token paused")

    payments = PaymentProcessor(NativeBank(), [Broken()], spender=SPENDER)
    assert not payments.pay(5, "payer", "r", Token("0xbroken"))


def test_negative_amount_rejected() -> None:
    _, _, payments = _setup()
    with pytest.raises(ValueError):
        payments.pay(-1, "payer", "r", Native())
