from __future__ import annotations

import pytest

from turnstile_sim.models import Direction, Person
from turnstile_sim.queue import CandidateLane, TurnstileQueue
from tests._support.people_helpers import E, X, make_people


def test_admit_separates_entering_and_exiting() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 0, 0, 0], [E, X, E, X])

    assert queue.admit(people, 0) == 4

    assert queue.entering_count == 2
    assert queue.exiting_count == 2
    assert [p.index for p in queue.entering] == [0, 2]
    assert [p.index for p in queue.exiting] == [1, 3]


def test_admit_only_adds_those_who_have_arrived() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 5, 10], [E, X, E])

    queue.admit(people, 5)

    assert queue.entering_count == 1
    assert queue.exiting_count == 1


def test_admit_is_idempotent_and_skips_passed_people() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 0, 0], [E, E, X])

    assert queue.admit(people, 0, passed={1}) == 2
    assert queue.admit(people, 0, passed={1}) == 0

    assert [p.index for p in queue.entering] == [0]
    assert [p.index for p in queue.exiting] == [2]


def test_lanes_are_ordered_by_index_not_arrival() -> None:
    queue = TurnstileQueue()
    late_low = Person(1, 4, Direction.ENTER)
    early_high = Person(7, 0, Direction.ENTER)
    mid = Person(3, 2, Direction.ENTER)

    queue.admit([early_high, mid, late_low], 4)

    assert queue.entering[0] is late_low
    assert [p.index for p in queue.entering] == [1, 3, 7]
    assert [p.index for p in queue.entering[1:]] == [3, 7]


def test_has_waiting() -> None:
    queue = TurnstileQueue()
    assert queue.has_waiting is False

    queue.admit(make_people([0], [E]), 0)
    assert queue.has_waiting is True


def test_remove_takes_person_from_their_lane() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 0, 0], [E, X, E])
    queue.admit(people, 0)

    queue.remove(people[2])
    queue.remove(people[1])

    assert [p.index for p in queue.entering] == [0]
    assert queue.exiting_count == 0
    assert people[2] not in queue.entering


def test_remove_non_head_then_head_keeps_order() -> None:
    lane = CandidateLane()
    people = make_people([0, 0, 0, 0], [E, E, E, E])
    for p in reversed(people):
        lane.add(p)

    lane.discard(people[2])
    assert lane[0] is people[0]
    lane.discard(people[0])
    assert lane[0] is people[1]
    lane.discard(people[1])
    assert lane[0] is people[3]
    assert len(lane) == 1


def test_remove_absent_person_is_a_no_op() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 9], [X, X])
    queue.admit(people, 0)

    queue.remove(people[1])

    assert [p.index for p in queue.exiting] == [0]


def test_empty_lane_head_raises_index_error() -> None:
    with pytest.raises(IndexError):
        CandidateLane()[0]


def test_admit_next_walks_arrival_ordered_input_once() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 1, 1, 4], [E, X, E, X])

    assert queue.admit_next(people, 0) == 1
    assert queue.admit_next(people, 0) == 0
    assert queue.admit_next(people, 2) == 2
    assert [p.index for p in queue.entering] == [0, 2]
    assert [p.index for p in queue.exiting] == [1]

    assert queue.admit_next(people, 10) == 1
    assert queue.exiting_count == 2


def test_clear_empties_both_lanes() -> None:
    queue = TurnstileQueue()
    people = make_people([0, 0], [E, X])
    queue.admit_next(people, 0)

    queue.clear()

    assert queue.has_waiting is False
    assert queue.admit_next(people, 0) == 2
