from __future__ import annotations

import itertools

from scholarport.importing.deduplicator import Deduplicator
from scholarport.models import ScholarshipRecord


def _record(name, amount=0.0, deadline=None) -> ScholarshipRecord:
    return ScholarshipRecord(name=name, amount=amount, deadline=deadline)


SAMPLES = [
    _record("Merit Award", 5000, "2025-03-01"),
    _record("merit  award ", 5099, "2025-04-01"),
    _record("Merit Award", 9000, "2025-03-01"),
    _record("Merit Award", 9000, "2025-05-01"),
    _record("Other", 5000, "2025-03-01"),
    _record(None, 5000, "2025-03-01"),
    _record("Merit Award", 5100, None),
]


def test_name_plus_amount_or_deadline_matches() -> None:
    detector = Deduplicator()

    assert detector.is_duplicate(SAMPLES[0], SAMPLES[1])  # amount within 100
    assert detector.is_duplicate(SAMPLES[0], SAMPLES[2])  # same deadline
    assert not detector.is_duplicate(SAMPLES[0], SAMPLES[3])
    assert not detector.is_duplicate(SAMPLES[0], SAMPLES[4])
    assert not detector.is_duplicate(SAMPLES[0], SAMPLES[6])  # exactly 100 apart


def test_missing_name_never_matches() -> None:
    assert not Deduplicator().is_duplicate(SAMPLES[5], _record(None, 5000, "2025-03-01"))


def test_missing_deadlines_do_not_match_each_other() -> None:
    assert not Deduplicator().is_duplicate(_record("A", 100), _record("A", 900))


def test_predicate_is_symmetric() -> None:
    detector = Deduplicator()

    for a, b in itertools.product(SAMPLES, repeat=2):
        assert detector.is_duplicate(a, b) == detector.is_duplicate(b, a)


def test_first_match_in_collection_order_wins() -> None:
    existing = [_record("Other"), SAMPLES[2], SAMPLES[0]]

    [match] = Deduplicator().detect([_record("Merit Award", 5000, "2025-03-01")], existing)

    assert match.existing_index == 1
    assert match.is_duplicate


def test_unmatched_candidate_is_new() -> None:
    [match] = Deduplicator().detect([_record("New One", 10, "2025-01-01")], SAMPLES)

    assert not match.is_duplicate
