from __future__ import annotations

import threading
from typing import Callable, Mapping

from splitledger.errors import InvalidSettlementError, InvalidSplitError
from splitledger.logging import get_logger
from splitledger.models import Expense, MemberBalance, Settlement
from splitledger.services.ledger import BalanceLedger
from splitledger.services.notify import NotificationDispatcher, expense_message, settlement_message
from splitledger.services.split import SplitPolicy, calculate_splits


class IndividualLedger:
    """Direct two-party expenses kept outside of any group."""

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        next_sequence: Callable[[], int],
        name_of: Callable[[str], str] = str,
        currency_label: str = "",
    ) -> None:
        self._dispatcher = dispatcher
        self._next_sequence = next_sequence
        self._name_of = name_of
        self._currency = currency_label
        self._ledger = BalanceLedger()
        self._expenses: list[Expense] = []
        self._settlements: list[Settlement] = []
        self._lock = threading.RLock()
        self._log = get_logger(__name__)

    def add_expense(
        self,
        description: str,
        amount_cents: int,
        payer_id: str,
        other_id: str,
        policy: SplitPolicy,
    ) -> Expense:
        if payer_id == other_id:
            raise InvalidSplitError("an individual expense needs two different members")

        splits = calculate_splits(amount_cents, [payer_id, other_id], policy)
        with self._lock:
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
                group_id=None,
                sequence=sequence,
            )
            self._expenses.append(expense)

        self._log.info(
            "expense.recorded",
            expense_id=expense.id,
            payer_id=payer_id,
            other_id=other_id,
            amount_cents=amount_cents,
        )
        message = expense_message(expense, self._name_of(payer_id), self._currency)
        self._dispatcher.broadcast((payer_id, other_id), message)
        return expense

    def settle(self, payer_id: str, payee_id: str, amount_cents: int) -> Settlement:
        if amount_cents <= 0:
            raise InvalidSettlementError("settlement amount must be positive")
        if payer_id == payee_id:
            raise InvalidSettlementError("a member cannot settle with themselves")

        with self._lock:
            self._ledger.adjust(payer_id, payee_id, -amount_cents)
            sequence = self._next_sequence()
            settlement = Settlement(
                id=f"settlement{sequence}",
                payer_id=payer_id,
                payee_id=payee_id,
                amount_cents=amount_cents,
                group_id=None,
                sequence=sequence,
            )
            self._settlements.append(settlement)

        self._log.info(
            "settlement.recorded",
            settlement_id=settlement.id,
            payer_id=payer_id,
            payee_id=payee_id,
            amount_cents=amount_cents,
        )
        message = settlement_message(
            settlement, self._name_of(payer_id), self._name_of(payee_id), self._currency
        )
        self._dispatcher.broadcast((payer_id, payee_id), message)
        return settlement

    def balances(self, member_id: str) -> Mapping[str, int]:
        with self._lock:
            return self._ledger.balances_of(member_id)

    def summary(self, member_id: str) -> MemberBalance:
        with self._lock:
            return self._ledger.summary(member_id)

    def expenses(self) -> list[Expense]:
        with self._lock:
            return list(self._expenses)

    def settlements(self) -> list[Settlement]:
        with self._lock:
            return list(self._settlements)
