from splitledger.coordinator import SplitLedger
from splitledger.errors import (
    GroupNotFoundError,
    InvalidSettlementError,
    InvalidSplitError,
    MemberNotFoundError,
    NotAMemberError,
    OutstandingBalanceError,
    SplitLedgerError,
)
from splitledger.models import Expense, Member, MemberBalance, Settlement, Split, SplitType
from splitledger.services.split import EqualSplit, ExactSplit, PercentageSplit

__all__ = [
    "EqualSplit",
    "ExactSplit",
    "Expense",
    "GroupNotFoundError",
    "InvalidSettlementError",
    "InvalidSplitError",
    "Member",
    "MemberBalance",
    "MemberNotFoundError",
    "NotAMemberError",
    "OutstandingBalanceError",
    "PercentageSplit",
    "Settlement",
    "Split",
    "SplitLedger",
    "SplitLedgerError",
    "SplitType",
]
