from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SplitType(str, Enum):
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"


@dataclass(frozen=True, slots=True)
class Member:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Split:
    member_id: str
    amount_cents: int


@dataclass(frozen=True, slots=True)
class Expense:
    id: str
    description: str
    amount_cents: int
    payer_id: str
    splits: tuple[Split, ...]
    split_type: SplitType
    group_id: Optional[str]
    sequence: int


@dataclass(frozen=True, slots=True)
class Settlement:
    id: str
    payer_id: str
    payee_id: str
    amount_cents: int
    group_id: Optional[str]
    sequence: int


@dataclass(frozen=True, slots=True)
class MemberBalance:
    member_id: str
    owed_to_member: int
    member_owes: int

    @property
    def net(self) -> int:
        return self.owed_to_member - self.member_owes
