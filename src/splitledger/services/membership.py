from __future__ import annotations

from typing import Iterable, Protocol

from splitledger.errors import NotAMemberError


class MemberRoster(Protocol):
    id: str

    def has_member(self, member_id: str) -> bool: ...


def is_member(group: MemberRoster, member_id: str) -> bool:
    return group.has_member(member_id)


def assert_member(group: MemberRoster, member_id: str) -> None:
    if not is_member(group, member_id):
        raise NotAMemberError(group.id, member_id)


def assert_members(group: MemberRoster, member_ids: Iterable[str]) -> None:
    for member_id in member_ids:
        assert_member(group, member_id)
