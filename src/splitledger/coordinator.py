"""Library entry point: groups, members and individual expenses in one place."""

from __future__ import annotations

import itertools
import threading
from typing import Mapping, Optional, Sequence, Union

from splitledger.config import Settings, get_settings
from splitledger.errors import GroupNotFoundError, MemberNotFoundError
from splitledger.logging import get_logger
from splitledger.models import Expense, Member, MemberBalance, Settlement, SplitType
from splitledger.services.group import Group
from splitledger.services.individual import IndividualLedger
from splitledger.services.ledger import LedgerSnapshot
from splitledger.services.notify import NotificationDispatcher, Notifier
from splitledger.services.split import EqualSplit, ExactSplit, PercentageSplit, SplitPolicy, policy_from_type

SplitSpec = Union[SplitType, str, SplitPolicy]


def _resolve_policy(split: SplitSpec, values: Optional[Sequence[object]]) -> SplitPolicy:
    if isinstance(split, (EqualSplit, ExactSplit, PercentageSplit)):
        return split
    return policy_from_type(split, values)


class SplitLedger:
    def __init__(self, notifier: Optional[Notifier] = None, settings: Optional[Settings] = None) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._dispatcher = NotificationDispatcher(notifier)
        self._sequence = itertools.count(1)
        self._group_ids = itertools.count(1)
        self._members: dict[str, Member] = {}
        self._groups: dict[str, Group] = {}
        self._registry_lock = threading.Lock()
        self._individual = IndividualLedger(
            self._dispatcher,
            self._next_sequence,
            name_of=self._display_name,
            currency_label=self._settings.currency_label,
        )
        self._log = get_logger(__name__)

    def _next_sequence(self) -> int:
        with self._registry_lock:
            return next(self._sequence)

    def _display_name(self, member_id: str) -> str:
        member = self._members.get(member_id)
        return member.name if member else member_id

    # Members

    def register_member(self, member: Member) -> Member:
        with self._registry_lock:
            return self._members.setdefault(member.id, member)

    def get_member(self, member_id: str) -> Member:
        try:
            return self._members[member_id]
        except KeyError:
            raise MemberNotFoundError(member_id) from None

    # Groups

    def create_group(self, name: str) -> str:
        with self._registry_lock:
            group_id = f"group{next(self._group_ids)}"
            self._groups[group_id] = Group(
                group_id,
                name,
                self._dispatcher,
                self._next_sequence,
                currency_label=self._settings.currency_label,
            )
        self._log.info("group.created", group_id=group_id, name=name)
        return group_id

    def get_group(self, group_id: str) -> Group:
        try:
            return self._groups[group_id]
        except KeyError:
            raise GroupNotFoundError(group_id) from None

    def add_member(self, group_id: str, member: Member) -> None:
        group = self.get_group(group_id)
        # The first registration of an id wins; every group shares that record.
        group.add_member(self.register_member(member))

    def remove_member(self, group_id: str, member_id: str) -> bool:
        return self.get_group(group_id).remove_member(member_id)

    def add_expense(
        self,
        group_id: str,
        description: str,
        amount_cents: int,
        payer_id: str,
        participant_ids: Sequence[str],
        split_type: SplitSpec = SplitType.EQUAL,
        values: Optional[Sequence[object]] = None,
    ) -> Expense:
        group = self.get_group(group_id)
        policy = _resolve_policy(split_type, values)
        return group.add_expense(description, amount_cents, payer_id, participant_ids, policy)

    def settle(self, group_id: str, payer_id: str, payee_id: str, amount_cents: int) -> Settlement:
        return self.get_group(group_id).settle(payer_id, payee_id, amount_cents)

    def simplify_debts(self, group_id: str) -> LedgerSnapshot:
        return self.get_group(group_id).simplify()

    def get_group_balances(self, group_id: str) -> LedgerSnapshot:
        return self.get_group(group_id).balances()

    # Individual expenses

    def add_individual_expense(
        self,
        description: str,
        amount_cents: int,
        payer_id: str,
        other_id: str,
        split_type: SplitSpec = SplitType.EQUAL,
        values: Optional[Sequence[object]] = None,
    ) -> Expense:
        policy = _resolve_policy(split_type, values)
        return self._individual.add_expense(description, amount_cents, payer_id, other_id, policy)

    def settle_individual(self, payer_id: str, payee_id: str, amount_cents: int) -> Settlement:
        return self._individual.settle(payer_id, payee_id, amount_cents)

    def get_individual_balances(self, member_id: str) -> Mapping[str, int]:
        return self._individual.balances(member_id)

    def get_member_summary(self, member_id: str) -> MemberBalance:
        return self._individual.summary(member_id)

    def individual_expenses(self) -> list[Expense]:
        return self._individual.expenses()
