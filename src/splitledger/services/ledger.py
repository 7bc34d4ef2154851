from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from splitledger.errors import OutstandingBalanceError
from splitledger.models import MemberBalance

# Entries whose magnitude falls below one cent are settled and get dropped.
SETTLED_THRESHOLD_CENTS = 1

LedgerSnapshot = Mapping[str, Mapping[str, int]]


class BalanceLedger:
    """
    Pairwise balances for one group (or for groupless two-party expenses).

    ``balances[a][b] > 0`` means ``b`` owes ``a`` that many cents; the mirror
    entry ``balances[b][a]`` always holds the negated value.
    """

    def __init__(self, member_ids: Iterable[str] = ()) -> None:
        self._balances: dict[str, dict[str, int]] = {}
        for member_id in member_ids:
            self.add_member(member_id)

    def add_member(self, member_id: str) -> None:
        self._balances.setdefault(member_id, {})

    def has_member(self, member_id: str) -> bool:
        return member_id in self._balances

    def member_ids(self) -> list[str]:
        return list(self._balances)

    def remove_member(self, member_id: str) -> None:
        if not self.is_settled(member_id):
            raise OutstandingBalanceError(member_id, self._balances[member_id])
        self._balances.pop(member_id, None)
        for row in self._balances.values():
            row.pop(member_id, None)

    def adjust(self, debtor_id: str, creditor_id: str, amount_cents: int) -> None:
        if debtor_id == creditor_id:
            raise ValueError("a member cannot owe themselves")
        if amount_cents == 0:
            return
        self._apply(creditor_id, debtor_id, amount_cents)
        self._apply(debtor_id, creditor_id, -amount_cents)

    def _apply(self, member_id: str, other_id: str, delta: int) -> None:
        row = self._balances.setdefault(member_id, {})
        value = row.get(other_id, 0) + delta
        if abs(value) < SETTLED_THRESHOLD_CENTS:
            row.pop(other_id, None)
        else:
            row[other_id] = value

    def balance(self, member_id: str, other_id: str) -> int:
        return self._balances.get(member_id, {}).get(other_id, 0)

    def balances_of(self, member_id: str) -> Mapping[str, int]:
        return MappingProxyType(dict(self._balances.get(member_id, {})))

    def net_balance(self, member_id: str) -> int:
        return sum(self._balances.get(member_id, {}).values())

    def summary(self, member_id: str) -> MemberBalance:
        row = self._balances.get(member_id, {})
        return MemberBalance(
            member_id=member_id,
            owed_to_member=sum(amount for amount in row.values() if amount > 0),
            member_owes=sum(-amount for amount in row.values() if amount < 0),
        )

    def is_settled(self, member_id: str) -> bool:
        return not self._balances.get(member_id)

    def entries(self) -> list[tuple[str, str, int]]:
        """Outstanding debts as ``(creditor, debtor, cents)``, one per pair."""
        return [
            (creditor_id, debtor_id, amount)
            for creditor_id, row in self._balances.items()
            for debtor_id, amount in row.items()
            if amount > 0
        ]

    def snapshot(self) -> LedgerSnapshot:
        return MappingProxyType(
            {member_id: MappingProxyType(dict(row)) for member_id, row in self._balances.items()}
        )

    def replace(self, balances: LedgerSnapshot) -> None:
        fresh: dict[str, dict[str, int]] = {}
        for member_id, row in balances.items():
            fresh[member_id] = {
                other_id: amount
                for other_id, amount in row.items()
                if abs(amount) >= SETTLED_THRESHOLD_CENTS
            }
        for member_id, row in fresh.items():
            for other_id, amount in row.items():
                if fresh.get(other_id, {}).get(member_id, 0) != -amount:
                    raise ValueError(f"unbalanced entry between {member_id} and {other_id}")
        self._balances = fresh
