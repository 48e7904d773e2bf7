from __future__ import annotations

from dataclasses import dataclass

NATIVE = "native"
ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(frozen=True)
class Native:
    """The chain's native currency."""

    def __str__(self) -> str:
        return NATIVE


@dataclass(frozen=True)
class Token:
    """A fungible payment token identified by its contract address."""

    address: str

    def __post_init__(self) -> None:
        if not self.address or self.address.lower() in (NATIVE, ZERO_ADDRESS):
            raise ValueError(f"invalid token address: {self.address!r}")

    def __str__(self) -> str:
        return self.address


Currency = Native | Token


def parse_currency(value: str | Currency) -> Currency:
    if isinstance(value, (Native, Token)):
        return value
    raw = value.strip()
    if raw.lower() in (NATIVE, ZERO_ADDRESS):
        return Native()
    return Token(raw)


def is_native(currency: Currency) -> bool:
    return isinstance(currency, Native)
