from __future__ import annotations

from typing import Mapping


class SplitLedgerError(Exception):
    pass


class InvalidSplitError(SplitLedgerError, ValueError):
    pass


class InvalidSettlementError(SplitLedgerError, ValueError):
    pass


class NotAMemberError(SplitLedgerError, PermissionError):
    def __init__(self, group_id: str, member_id: str) -> None:
        super().__init__(f"{member_id} is not a member of group {group_id}")
        self.group_id = group_id
        self.member_id = member_id


class OutstandingBalanceError(SplitLedgerError):
    def __init__(self, member_id: str, balances: Mapping[str, int]) -> None:
        super().__init__(f"{member_id} cannot leave with outstanding balances")
        self.member_id = member_id
        self.balances = dict(balances)


class GroupNotFoundError(SplitLedgerError, LookupError):
    def __init__(self, group_id: str) -> None:
        super().__init__(f"group {group_id} not found")
        self.group_id = group_id


class MemberNotFoundError(SplitLedgerError, LookupError):
    def __init__(self, member_id: str) -> None:
        super().__init__(f"member {member_id} not found")
        self.member_id = member_id
