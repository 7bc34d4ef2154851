from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from splitledger.services.ledger import SETTLED_THRESHOLD_CENTS, LedgerSnapshot


@dataclass(slots=True)
class Transfer:
    from_user: str
    to_user: str
    amount_cents: int


@dataclass(slots=True)
class SimplifiedDebts:
    balances: dict[str, dict[str, int]]
    transfers: list[Transfer] = field(default_factory=list)


def net_balances(snapshot: LedgerSnapshot) -> dict[str, int]:
    net: dict[str, int] = {member_id: 0 for member_id in snapshot}
    for creditor_id, row in snapshot.items():
        for debtor_id, amount in row.items():
            # Each pair appears twice; count it from the creditor side only.
            if amount > 0:
                net[creditor_id] = net.get(creditor_id, 0) + amount
                net[debtor_id] = net.get(debtor_id, 0) - amount
    return net


def _largest_first(net: Mapping[str, int], sign: int) -> list[list]:
    """``[member_id, remaining_cents]`` pairs on one side of the ledger.

    ``sorted`` is stable, so equal amounts keep the order of ``net``.
    """
    side = [[member_id, amount * sign] for member_id, amount in net.items() if amount * sign >= SETTLED_THRESHOLD_CENTS]
    return sorted(side, key=lambda entry: entry[1], reverse=True)


def plan_transfers(net: Mapping[str, int]) -> list[Transfer]:
    """
    Match the largest remaining debtor with the largest remaining creditor.

    Members whose net is below one cent take no part. The plan has at most
    ``creditors + debtors - 1`` transfers but is not always the shortest one
    possible; finding that is NP-hard in general.
    """
    creditors = _largest_first(net, 1)
    debtors = _largest_first(net, -1)

    plan: list[Transfer] = []
    while creditors and debtors:
        creditor, debtor = creditors[0], debtors[0]
        amount = min(creditor[1], debtor[1])
        plan.append(Transfer(from_user=debtor[0], to_user=creditor[0], amount_cents=amount))

        creditor[1] -= amount
        debtor[1] -= amount
        if creditor[1] < SETTLED_THRESHOLD_CENTS:
            creditors.pop(0)
        if debtor[1] < SETTLED_THRESHOLD_CENTS:
            debtors.pop(0)

    return plan


def simplify_debts(snapshot: LedgerSnapshot) -> SimplifiedDebts:
    transfers = plan_transfers(net_balances(snapshot))

    balances: dict[str, dict[str, int]] = {member_id: {} for member_id in snapshot}
    for transfer in transfers:
        creditor_row = balances.setdefault(transfer.to_user, {})
        debtor_row = balances.setdefault(transfer.from_user, {})
        creditor_row[transfer.from_user] = creditor_row.get(transfer.from_user, 0) + transfer.amount_cents
        debtor_row[transfer.to_user] = debtor_row.get(transfer.to_user, 0) - transfer.amount_cents

    return SimplifiedDebts(balances=balances, transfers=transfers)
