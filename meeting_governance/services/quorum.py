# meeting_governance/services/quorum.py
"""
Pure quorum and vote-tally rules.

Nothing here touches the database: the participation and action services
load the roster, attendance, recusals and votes, and hand plain ids and
values to these functions.
"""
from __future__ import annotations

import math
from typing import Iterable, Protocol

from meeting_governance.schemas.action import VoteTally, VoteValue
from meeting_governance.schemas.governing_body import PassThreshold, QuorumRule
from meeting_governance.schemas.participation import AttendanceStatus, QuorumResult

PRESENT_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


class RecusalLike(Protocol):
    member_id: str
    agenda_item_id: str | None


class VoteLike(Protocol):
    member_id: str
    value: str


def recused_member_ids(recusals: Iterable[RecusalLike], agenda_item_id: str | None = None) -> set[str]:
    """
    Members recused for the given scope.

    Meeting-wide recusals (no agenda item) always apply. Item recusals apply
    only when computing for that same item.
    """
    recused: set[str] = set()
    for recusal in recusals:
        if recusal.agenda_item_id is None:
            recused.add(recusal.member_id)
        elif agenda_item_id is not None and recusal.agenda_item_id == agenda_item_id:
            recused.add(recusal.member_id)
    return recused


def is_present(status: AttendanceStatus | str) -> bool:
    return AttendanceStatus(status) in PRESENT_STATUSES


def required_quorum(
    rule: QuorumRule | str,
    eligible_count: int,
    quorum_number: int | None = None,
) -> int:
    """
    Members that must be present out of `eligible_count`.

    - majority:   floor(n / 2) + 1
    - two_thirds: ceil(2n / 3)
    - specific:   quorum_number
    """
    rule = QuorumRule(rule)
    if rule == QuorumRule.MAJORITY:
        return eligible_count // 2 + 1
    if rule == QuorumRule.TWO_THIRDS:
        return math.ceil(2 * eligible_count / 3)
    if quorum_number is None:
        raise ValueError("specific quorum rule requires quorum_number")
    return quorum_number


def calculate_quorum(
    roster_ids: Iterable[str],
    present_ids: Iterable[str],
    recused_ids: Iterable[str],
    rule: QuorumRule | str = QuorumRule.MAJORITY,
    quorum_number: int | None = None,
    agenda_item_id: str | None = None,
) -> QuorumResult:
    """
    Recused members are removed from the eligible roster and from the
    present count. Present ids not on the roster are ignored.
    """
    roster = set(roster_ids)
    recused = set(recused_ids) & roster
    eligible = roster - recused
    present = set(present_ids) & eligible

    required = required_quorum(rule, len(eligible), quorum_number)

    return QuorumResult(
        agenda_item_id=agenda_item_id,
        roster_count=len(roster),
        eligible_count=len(eligible),
        required_count=required,
        present_count=len(present),
        recused_count=len(recused),
        has_quorum=len(present) >= required,
    )


def tally_votes(
    votes: Iterable[VoteLike],
    recused_ids: Iterable[str] = (),
    threshold: PassThreshold | str = PassThreshold.SIMPLE_MAJORITY,
) -> VoteTally:
    """
    Count votes and apply the pass threshold.

    - simple_majority: yea > nay
    - two_thirds:      3 * yea >= 2 * (yea + nay) and yea > 0

    Abstentions and absences never count toward either side. Votes by
    recused members are counted under `recused` only.
    """
    recused = set(recused_ids)
    counts = {value: 0 for value in VoteValue}
    recused_count = 0

    for vote in votes:
        if vote.member_id in recused:
            recused_count += 1
            continue
        counts[VoteValue(vote.value)] += 1

    yea = counts[VoteValue.YEA]
    nay = counts[VoteValue.NAY]

    if PassThreshold(threshold) == PassThreshold.TWO_THIRDS:
        passed = yea > 0 and 3 * yea >= 2 * (yea + nay)
    else:
        passed = yea > nay

    return VoteTally(
        yea=yea,
        nay=nay,
        abstain=counts[VoteValue.ABSTAIN],
        absent=counts[VoteValue.ABSENT],
        recused=recused_count,
        passed=passed,
        margin=yea - nay,
    )
