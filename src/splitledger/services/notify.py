from __future__ import annotations

from typing import Iterable, Optional, Protocol

from splitledger.logging import get_logger
from splitledger.models import Expense, Settlement
from splitledger.utils.money import format_amount


class Notifier(Protocol):
    def notify(self, member_id: str, message: str) -> None: ...


class LogNotifier:
    def __init__(self) -> None:
        self._log = get_logger("splitledger.notify")

    def notify(self, member_id: str, message: str) -> None:
        self._log.info("notify.sent", member_id=member_id, message=message)


class NotificationDispatcher:
    """Best-effort delivery: a failing notifier is logged, never raised."""

    def __init__(self, notifier: Optional[Notifier] = None) -> None:
        self._notifier = notifier or LogNotifier()
        self._log = get_logger(__name__)

    def notify(self, member_id: str, message: str) -> None:
        try:
            self._notifier.notify(member_id, message)
        except Exception:
            self._log.warning("notify.failed", member_id=member_id, exc_info=True)

    def broadcast(self, member_ids: Iterable[str], message: str) -> None:
        for member_id in member_ids:
            self.notify(member_id, message)


def expense_message(expense: Expense, payer_name: str, currency: str) -> str:
    return (
        f"New expense added: {expense.description} "
        f"({format_amount(expense.amount_cents, currency)}) paid by {payer_name}"
    )


def settlement_message(settlement: Settlement, payer_name: str, payee_name: str, currency: str) -> str:
    return f"Settlement: {payer_name} paid {payee_name} {format_amount(settlement.amount_cents, currency)}"


def simplification_message(group_name: str, transfers: int) -> str:
    noun = "payment" if transfers == 1 else "payments"
    return f"Debts simplified in {group_name}: {transfers} {noun} settle the group"
