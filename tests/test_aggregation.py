import pytest

from nfe_checker.application.aggregation import MergePolicy, merge_authority_records

from tests.helpers import make_authority, make_key

KEY_A, KEY_B, KEY_C = make_key(tail="1"), make_key(tail="2"), make_key(tail="3")


def batches():
    return [
        [make_authority(KEY_A, "Autorizada", number="a1"), make_authority(KEY_B, number="b1")],
        [make_authority(KEY_A, "Cancelada", number="a2"), make_authority(KEY_C, number="c2")],
    ]


def test_first_wins_keeps_earliest_record():
    merged = merge_authority_records(batches(), MergePolicy.FIRST_WINS)

    assert [r.number for r in merged] == ["a1", "b1", "c2"]


def test_last_wins_replaces_in_place():
    merged = merge_authority_records(batches(), MergePolicy.LAST_WINS)

    assert [r.number for r in merged] == ["a2", "b1", "c2"]


def test_union_keeps_everything():
    merged = merge_authority_records(batches(), MergePolicy.UNION)

    assert [r.number for r in merged] == ["a1", "b1", "a2", "c2"]


def test_policy_accepts_plain_values():
    assert len(merge_authority_records(batches(), "last")) == 3

    with pytest.raises(ValueError):
        merge_authority_records(batches(), "random")
