from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import ClassVar, Sequence, Union

from splitledger.errors import InvalidSplitError
from splitledger.models import Split, SplitType
from splitledger.utils.money import to_percent

PERCENT_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal(100)


@dataclass(frozen=True, slots=True)
class EqualSplit:
    split_type: ClassVar[SplitType] = SplitType.EQUAL


@dataclass(frozen=True, slots=True)
class ExactSplit:
    amounts_cents: tuple[int, ...]

    split_type: ClassVar[SplitType] = SplitType.EXACT


@dataclass(frozen=True, slots=True)
class PercentageSplit:
    percentages: tuple[Decimal, ...]

    split_type: ClassVar[SplitType] = SplitType.PERCENTAGE


SplitPolicy = Union[EqualSplit, ExactSplit, PercentageSplit]


def split_amount(amount_cents: int, consumers: Sequence[str]) -> dict[str, int]:
    """Equal split; leftover cents go one each to the first consumers."""
    if amount_cents < 0:
        raise InvalidSplitError("amount_cents must be non-negative")
    if not consumers:
        raise InvalidSplitError("consumers must not be empty")

    base_share, remainder = divmod(amount_cents, len(consumers))
    return {
        consumer: base_share + (1 if idx < remainder else 0)
        for idx, consumer in enumerate(consumers)
    }


def _exact_shares(total_cents: int, participant_ids: Sequence[str], amounts: Sequence[int]) -> list[int]:
    if len(amounts) != len(participant_ids):
        raise InvalidSplitError(
            f"expected {len(participant_ids)} exact amounts, got {len(amounts)}"
        )
    if any(amount < 0 for amount in amounts):
        raise InvalidSplitError("exact amounts must be non-negative")
    if sum(amounts) != total_cents:
        raise InvalidSplitError(
            f"exact amounts sum to {sum(amounts)}, expected {total_cents}"
        )
    return list(amounts)


def _percentage_shares(
    total_cents: int, participant_ids: Sequence[str], percentages: Sequence[Decimal]
) -> list[int]:
    if len(percentages) != len(participant_ids):
        raise InvalidSplitError(
            f"expected {len(participant_ids)} percentages, got {len(percentages)}"
        )
    for pct in percentages:
        if not pct.is_finite() or pct < 0 or pct > HUNDRED:
            raise InvalidSplitError(f"percentage out of range: {pct}")
    if abs(sum(percentages, Decimal(0)) - HUNDRED) > PERCENT_TOLERANCE:
        raise InvalidSplitError(f"percentages sum to {sum(percentages)}, expected 100")

    raw = [Decimal(total_cents) * pct / HUNDRED for pct in percentages]
    shares = [int(value.to_integral_value(rounding=ROUND_FLOOR)) for value in raw]
    remainder = total_cents - sum(shares)

    # Largest fractional part first; sorted() keeps input order on ties.
    order = sorted(range(len(shares)), key=lambda i: raw[i] - shares[i], reverse=True)
    step = 1 if remainder > 0 else -1
    idx = 0
    while remainder != 0:
        target = order[idx % len(order)]
        if step > 0 or shares[target] > 0:
            shares[target] += step
            remainder -= step
        idx += 1
    return shares


def calculate_splits(total_cents: int, participant_ids: Sequence[str], policy: SplitPolicy) -> list[Split]:
    if total_cents <= 0:
        raise InvalidSplitError("total amount must be positive")
    if not participant_ids:
        raise InvalidSplitError("participants must not be empty")
    if len(set(participant_ids)) != len(participant_ids):
        raise InvalidSplitError("participants must be unique")

    match policy:
        case EqualSplit():
            shares = list(split_amount(total_cents, participant_ids).values())
        case ExactSplit(amounts_cents=amounts):
            shares = _exact_shares(total_cents, participant_ids, amounts)
        case PercentageSplit(percentages=percentages):
            shares = _percentage_shares(total_cents, participant_ids, percentages)
        case _:
            raise InvalidSplitError(f"unknown split policy: {policy!r}")

    return [Split(member_id=member_id, amount_cents=share) for member_id, share in zip(participant_ids, shares)]


def policy_from_type(split_type: SplitType | str, values: Sequence[object] | None = None) -> SplitPolicy:
    try:
        kind = split_type if isinstance(split_type, SplitType) else SplitType(str(split_type).strip().lower())
    except ValueError as exc:
        raise InvalidSplitError(f"unknown split type: {split_type!r}") from exc

    if kind is SplitType.EQUAL:
        if values:
            raise InvalidSplitError("equal split takes no values")
        return EqualSplit()

    if values is None:
        raise InvalidSplitError(f"{kind.value} split requires values")

    if kind is SplitType.EXACT:
        amounts: list[int] = []
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSplitError(f"exact amounts must be integer cents, got {value!r}")
            amounts.append(value)
        return ExactSplit(amounts_cents=tuple(amounts))

    try:
        percentages = tuple(to_percent(value) for value in values)  # type: ignore[arg-type]
    except ValueError as exc:
        raise InvalidSplitError(str(exc)) from exc
    return PercentageSplit(percentages=percentages)
