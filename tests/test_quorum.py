# tests/test_quorum.py
from dataclasses import dataclass
from typing import Optional

import pytest

from meeting_governance.schemas.governing_body import PassThreshold, QuorumRule
from meeting_governance.services.quorum import (
    calculate_quorum,
    is_present,
    recused_member_ids,
    required_quorum,
    tally_votes,
)


@dataclass
class _Recusal:
    member_id: str
    agenda_item_id: Optional[str] = None


@dataclass
class _Vote:
    member_id: str
    value: str


ROSTER = ["m1", "m2", "m3", "m4", "m5"]


def test_body_of_five_with_two_recusals_has_quorum_with_two_present():
    result = calculate_quorum(
        roster_ids=ROSTER,
        present_ids=["m1", "m2"],
        recused_ids=["m4", "m5"],
        rule=QuorumRule.MAJORITY,
    )

    assert result.roster_count == 5
    assert result.eligible_count == 3
    assert result.required_count == 2
    assert result.present_count == 2
    assert result.recused_count == 2
    assert result.has_quorum is True


def test_recused_present_members_do_not_count_as_present():
    result = calculate_quorum(
        roster_ids=ROSTER,
        present_ids=["m1", "m4", "m5"],
        recused_ids=["m4", "m5"],
    )

    assert result.present_count == 1
    assert result.has_quorum is False


def test_present_ids_outside_roster_are_ignored():
    result = calculate_quorum(ROSTER, ["m1", "m2", "visitor"], [])

    assert result.present_count == 2
    assert result.required_count == 3
    assert result.has_quorum is False


@pytest.mark.parametrize(
    "rule,eligible,number,expected",
    [
        (QuorumRule.MAJORITY, 5, None, 3),
        (QuorumRule.MAJORITY, 4, None, 3),
        (QuorumRule.MAJORITY, 0, None, 1),
        (QuorumRule.TWO_THIRDS, 5, None, 4),
        (QuorumRule.TWO_THIRDS, 6, None, 4),
        (QuorumRule.SPECIFIC, 7, 3, 3),
    ],
)
def test_required_quorum(rule, eligible, number, expected):
    assert required_quorum(rule, eligible, number) == expected


def test_specific_rule_without_number_rejected():
    with pytest.raises(ValueError):
        required_quorum(QuorumRule.SPECIFIC, 5)


def test_item_recusals_only_apply_to_their_item():
    recusals = [_Recusal("m1"), _Recusal("m2", "item-7")]

    assert recused_member_ids(recusals) == {"m1"}
    assert recused_member_ids(recusals, "item-7") == {"m1", "m2"}
    assert recused_member_ids(recusals, "item-8") == {"m1"}


def test_present_statuses():
    assert is_present("present")
    assert is_present("late")
    assert not is_present("left_early")
    assert not is_present("excused")


def test_simple_majority_tally_excludes_recused_votes():
    votes = [
        _Vote("m1", "yea"),
        _Vote("m2", "yea"),
        _Vote("m3", "nay"),
        _Vote("m4", "abstain"),
        _Vote("m5", "nay"),
    ]

    tally = tally_votes(votes, recused_ids={"m5"})

    assert (tally.yea, tally.nay, tally.abstain, tally.recused) == (2, 1, 1, 1)
    assert tally.passed is True
    assert tally.margin == 1


def test_tie_fails_simple_majority():
    tally = tally_votes([_Vote("m1", "yea"), _Vote("m2", "nay")])

    assert tally.passed is False


def test_two_thirds_threshold():
    votes = [_Vote("m1", "yea"), _Vote("m2", "yea"), _Vote("m3", "nay")]
    assert tally_votes(votes, threshold=PassThreshold.TWO_THIRDS).passed is True

    votes.append(_Vote("m4", "nay"))
    assert tally_votes(votes, threshold=PassThreshold.TWO_THIRDS).passed is False

    only_abstentions = [_Vote("m1", "abstain")]
    assert tally_votes(only_abstentions, threshold="two_thirds").passed is False
