from __future__ import annotations

from decimal import Decimal, InvalidOperation


def format_amount(amount_cents: int, currency: str = "") -> str:
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    text = f"{sign}{whole}.{cents:02d}"
    return f"{currency} {text}" if currency else text


def to_percent(value: int | str | Decimal | float) -> Decimal:
    """
    Normalise a percentage to Decimal.

    Floats go through ``str`` so that 33.3 stays 33.3 instead of its binary
    approximation.
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a percentage: {value!r}") from exc
