import random

import pytest

from splitledger.errors import OutstandingBalanceError
from splitledger.services.ledger import BalanceLedger


def test_adjust_updates_both_directions():
    ledger = BalanceLedger(["a", "b"])
    ledger.adjust("b", "a", 3000)

    assert ledger.balance("a", "b") == 3000
    assert ledger.balance("b", "a") == -3000
    assert ledger.entries() == [("a", "b", 3000)]


def test_reversal_removes_entries():
    ledger = BalanceLedger(["a", "b"])
    ledger.adjust("b", "a", 3000)
    ledger.adjust("b", "a", -3000)

    assert ledger.snapshot() == {"a": {}, "b": {}}
    assert ledger.is_settled("a")
    assert ledger.is_settled("b")


def test_net_balance_and_summary():
    ledger = BalanceLedger(["a", "b", "c"])
    ledger.adjust("b", "a", 3000)
    ledger.adjust("a", "c", 1000)

    assert ledger.net_balance("a") == 2000
    summary = ledger.summary("a")
    assert summary.owed_to_member == 3000
    assert summary.member_owes == 1000
    assert summary.net == 2000


def test_snapshot_is_a_read_only_copy():
    ledger = BalanceLedger(["a", "b"])
    ledger.adjust("b", "a", 500)
    snapshot = ledger.snapshot()

    with pytest.raises(TypeError):
        snapshot["a"]["b"] = 0  # type: ignore[index]

    ledger.adjust("b", "a", 500)
    assert snapshot["a"]["b"] == 500
    assert ledger.balance("a", "b") == 1000


def test_self_adjust_rejected():
    ledger = BalanceLedger(["a"])
    with pytest.raises(ValueError):
        ledger.adjust("a", "a", 100)


def test_remove_member_requires_settled_balance():
    ledger = BalanceLedger(["a", "b"])
    ledger.adjust("b", "a", 100)

    with pytest.raises(OutstandingBalanceError) as exc_info:
        ledger.remove_member("b")
    assert exc_info.value.balances == {"a": -100}
    assert ledger.has_member("b")

    ledger.adjust("b", "a", -100)
    ledger.remove_member("b")
    assert not ledger.has_member("b")
    assert ledger.member_ids() == ["a"]


def test_replace_rejects_unbalanced_map():
    ledger = BalanceLedger(["a", "b"])
    ledger.adjust("b", "a", 100)

    with pytest.raises(ValueError):
        ledger.replace({"a": {"b": 100}, "b": {}})
    assert ledger.balance("a", "b") == 100


def test_antisymmetry_holds_after_random_adjustments():
    rng = random.Random(7)
    members = ["a", "b", "c", "d", "e"]
    ledger = BalanceLedger(members)

    for _ in range(300):
        debtor, creditor = rng.sample(members, 2)
        ledger.adjust(debtor, creditor, rng.randint(-5000, 5000))

    snapshot = ledger.snapshot()
    for member_id, row in snapshot.items():
        for other_id, amount in row.items():
            assert amount != 0
            assert snapshot[other_id][member_id] == -amount
