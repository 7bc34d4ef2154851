from decimal import Decimal

import pytest

from splitledger.errors import InvalidSplitError
from splitledger.models import SplitType
from splitledger.services.split import (
    EqualSplit,
    ExactSplit,
    PercentageSplit,
    calculate_splits,
    policy_from_type,
    split_amount,
)


def _amounts(splits):
    return [split.amount_cents for split in splits]


def test_split_amount_even():
    shares = split_amount(1000, ["a", "b", "c", "d"])
    assert shares == {"a": 250, "b": 250, "c": 250, "d": 250}


def test_split_amount_remainder_goes_to_first_consumers():
    shares = split_amount(1001, ["a", "b", "c"])
    assert shares == {"a": 334, "b": 334, "c": 333}
    assert sum(shares.values()) == 1001


def test_equal_split_preserves_participant_order():
    splits = calculate_splits(9000, ["a", "b", "c"], EqualSplit())
    assert [split.member_id for split in splits] == ["a", "b", "c"]
    assert _amounts(splits) == [3000, 3000, 3000]


def test_exact_split():
    splits = calculate_splits(10000, ["a", "b", "c"], ExactSplit((2000, 3000, 5000)))
    assert _amounts(splits) == [2000, 3000, 5000]


def test_exact_split_sum_mismatch():
    with pytest.raises(InvalidSplitError):
        calculate_splits(10000, ["a", "b", "c"], ExactSplit((2000, 3000, 4000)))


def test_exact_split_length_mismatch():
    with pytest.raises(InvalidSplitError):
        calculate_splits(10000, ["a", "b", "c"], ExactSplit((5000, 5000)))


def test_exact_split_rejects_negative_values():
    with pytest.raises(InvalidSplitError):
        calculate_splits(1000, ["a", "b"], ExactSplit((1500, -500)))


def test_percentage_split():
    policy = PercentageSplit((Decimal(50), Decimal(25), Decimal(25)))
    splits = calculate_splits(1000, ["a", "b", "c"], policy)
    assert _amounts(splits) == [500, 250, 250]


def test_percentage_split_leftover_cent_goes_to_largest_fraction():
    policy = PercentageSplit((Decimal("33.33"), Decimal("33.33"), Decimal("33.34")))
    splits = calculate_splits(100, ["a", "b", "c"], policy)
    assert _amounts(splits) == [33, 33, 34]


def test_percentage_split_must_sum_to_hundred():
    policy = PercentageSplit((Decimal(50), Decimal(30), Decimal(10)))
    with pytest.raises(InvalidSplitError):
        calculate_splits(1000, ["a", "b", "c"], policy)


def test_percentage_split_rejects_out_of_range():
    policy = PercentageSplit((Decimal(150), Decimal(-50)))
    with pytest.raises(InvalidSplitError):
        calculate_splits(1000, ["a", "b"], policy)


@pytest.mark.parametrize("total", [1, 7, 100, 9999, 123457])
@pytest.mark.parametrize(
    "policy",
    [
        EqualSplit(),
        PercentageSplit((Decimal("33.33"), Decimal("33.33"), Decimal("33.34"))),
        PercentageSplit((Decimal("12.5"), Decimal("12.5"), Decimal("75"))),
        PercentageSplit((Decimal("0"), Decimal("0.005"), Decimal("99.995"))),
    ],
)
def test_split_sum_matches_total(total, policy):
    splits = calculate_splits(total, ["a", "b", "c"], policy)
    assert sum(_amounts(splits)) == total
    assert all(amount >= 0 for amount in _amounts(splits))


@pytest.mark.parametrize(
    "total, participants",
    [
        (0, ["a"]),
        (-100, ["a", "b"]),
        (100, []),
        (100, ["a", "a"]),
    ],
)
def test_invalid_inputs(total, participants):
    with pytest.raises(InvalidSplitError):
        calculate_splits(total, participants, EqualSplit())


def test_policy_from_type():
    assert policy_from_type(SplitType.EQUAL) == EqualSplit()
    assert policy_from_type("exact", [100, 200]) == ExactSplit((100, 200))
    assert policy_from_type("percentage", [50, "25", 25.0]) == PercentageSplit(
        (Decimal(50), Decimal(25), Decimal(25))
    )


def test_policy_from_type_errors():
    with pytest.raises(InvalidSplitError):
        policy_from_type("shares")
    with pytest.raises(InvalidSplitError):
        policy_from_type(SplitType.EXACT)
    with pytest.raises(InvalidSplitError):
        policy_from_type(SplitType.EXACT, [10.5, 20])
    with pytest.raises(InvalidSplitError):
        policy_from_type(SplitType.PERCENTAGE, ["half", "half"])
    with pytest.raises(InvalidSplitError):
        policy_from_type(SplitType.EQUAL, [1, 2])


@pytest.mark.parametrize("raw", ["EQUAL", "Equal", " equal "])
def test_policy_from_type_ignores_case(raw):
    assert policy_from_type(raw) == EqualSplit()


def test_policy_from_type_upper_case_values():
    assert policy_from_type("EXACT", [100, 200]) == ExactSplit((100, 200))
    assert policy_from_type("PERCENTAGE", [60, 40]) == PercentageSplit((Decimal(60), Decimal(40)))
