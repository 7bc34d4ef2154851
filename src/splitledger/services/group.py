from __future__ import annotations

import threading
from typing import Callable, Sequence

from splitledger.errors import InvalidSettlementError, OutstandingBalanceError
from splitledger.logging import get_logger
from splitledger.models import Expense, Member, MemberBalance, Settlement
from splitledger.services.ledger import BalanceLedger, LedgerSnapshot
from splitledger.services.membership import assert_member, assert_members
from splitledger.services.notify import (
    NotificationDispatcher,
    expense_message,
    settlement_message,
    simplification_message,
)
from splitledger.services.settlement import Transfer, net_balances, plan_transfers, simplify_debts
from splitledger.services.split import SplitPolicy, calculate_splits


class Group:
    """
    A group's members, balance ledger and history.

    Every read-then-write runs under the group's own lock; notifications are
    sent after the lock is released.
    """

    def __init__(
        self,
        group_id: str,
        name: str,
        dispatcher: NotificationDispatcher,
        next_sequence: Callable[[], int],
        currency_label: str = "",
    ) -> None:
        self.id = group_id
        self.name = name
        self._dispatcher = dispatcher
        self._next_sequence = next_sequence
        self._currency = currency_label
        self._members: dict[str, Member] = {}
        self._ledger = BalanceLedger()
        self._expenses: list[Expense] = []
        self._settlements: list[Settlement] = []
        self._lock = threading.RLock()
        self._log = get_logger(__name__).bind(group_id=group_id)

    def has_member(self, member_id: str) -> bool:
        return member_id in self._members

    def members(self) -> list[Member]:
        with self._lock:
            return list(self._members.values())

    def member_ids(self) -> list[str]:
        with self._lock:
            return list(self._members)

    def add_member(self, member: Member) -> None:
        with self._lock:
            if member.id in self._members:
                return
            self._members[member.id] = member
            self._ledger.add_member(member.id)
        self._log.info("member.added", member_id=member.id)

    def remove_member(self, member_id: str) -> bool:
        with self._lock:
            assert_member(self, member_id)
            if not self._ledger.is_settled(member_id):
                self._log.info("member.remove_blocked", member_id=member_id)
                raise OutstandingBalanceError(member_id, self._ledger.balances_of(member_id))
            self._ledger.remove_member(member_id)
            del self._members[member_id]
        self._log.info("member.removed", member_id=member_id)
        return True

    def add_expense(
        self,
        description: str,
        amount_cents: int,
        payer_id: str,
        participant_ids: Sequence[str],
        policy: SplitPolicy,
    ) -> Expense:
        with self._lock:
            assert_member(self, payer_id)
            assert_members(self, participant_ids)
            splits = calculate_splits(amount_cents, participant_ids, policy)

            for split in splits:
                if split.member_id != payer_id:
                    self._ledger.adjust(split.member_id, payer_id, split.amount_cents)

            sequence = self._next_sequence()
            expense = Expense(
                id=f"expense{sequence}",
                description=description,
                amount_cents=amount_cents,
                payer_id=payer_id,
                splits=tuple(splits),
                split_type=policy.split_type,
                group_id=self.id,
                sequence=sequence,
            )
            self._expenses.append(expense)
            recipients = list(self._members)
            payer_name = self._members[payer_id].name

        self._log.info(
            "expense.recorded",
            expense_id=expense.id,
            payer_id=payer_id,
            amount_cents=amount_cents,
            split_type=expense.split_type.value,
        )
        self._dispatcher.broadcast(recipients, expense_message(expense, payer_name, self._currency))
        return expense

    def settle(self, payer_id: str, payee_id: str, amount_cents: int) -> Settlement:
        """Record that ``payer_id`` handed ``amount_cents`` to ``payee_id``."""
        if amount_cents <= 0:
            raise InvalidSettlementError("settlement amount must be positive")
        if payer_id == payee_id:
            raise InvalidSettlementError("a member cannot settle with themselves")

        with self._lock:
            assert_members(self, (payer_id, payee_id))
            self._ledger.adjust(payer_id, payee_id, -amount_cents)

            sequence = self._next_sequence()
            settlement = Settlement(
                id=f"settlement{sequence}",
                payer_id=payer_id,
                payee_id=payee_id,
                amount_cents=amount_cents,
                group_id=self.id,
                sequence=sequence,
            )
            self._settlements.append(settlement)
            recipients = list(self._members)
            payer_name = self._members[payer_id].name
            payee_name = self._members[payee_id].name

        self._log.info(
            "settlement.recorded",
            settlement_id=settlement.id,
            payer_id=payer_id,
            payee_id=payee_id,
            amount_cents=amount_cents,
        )
        self._dispatcher.broadcast(
            recipients, settlement_message(settlement, payer_name, payee_name, self._currency)
        )
        return settlement

    def simplify(self) -> LedgerSnapshot:
        with self._lock:
            before = len(self._ledger.entries())
            simplified = simplify_debts(self._ledger.snapshot())
            self._ledger.replace(simplified.balances)
            snapshot = self._ledger.snapshot()
            recipients = list(self._members)
        self._log.info(
            "debts.simplified",
            entries_before=before,
            entries_after=len(simplified.transfers),
        )
        self._dispatcher.broadcast(recipients, simplification_message(self.name, len(simplified.transfers)))
        return snapshot

    def suggested_transfers(self) -> list[Transfer]:
        with self._lock:
            return plan_transfers(net_balances(self._ledger.snapshot()))

    def balances(self) -> LedgerSnapshot:
        with self._lock:
            return self._ledger.snapshot()

    def member_balance(self, member_id: str) -> MemberBalance:
        with self._lock:
            assert_member(self, member_id)
            return self._ledger.summary(member_id)

    def outstanding_debts(self) -> list[tuple[str, str, int]]:
        with self._lock:
            return self._ledger.entries()

    def expenses(self) -> list[Expense]:
        with self._lock:
            return list(self._expenses)

    def settlements(self) -> list[Settlement]:
        with self._lock:
            return list(self._settlements)
