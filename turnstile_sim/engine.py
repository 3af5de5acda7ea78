from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from turnstile_sim.errors import InputFormatError, InvariantViolationError
from turnstile_sim.event_sink import EventSink
from turnstile_sim.events import EventType
from turnstile_sim.models import Direction, Person, TurnstileState
from turnstile_sim.policy import RuleTable, rules_for
from turnstile_sim.queue import TurnstileQueue

log = logging.getLogger(__name__)


def validate_people(people: Sequence[Person]) -> None:
    """
    Fail fast on input shape problems, before any tick is simulated.

    Contract:
      - at least one person
      - no duplicate index
      - people[i].index == i
      - arrival times non-decreasing in input order
    """
    if not people:
        raise InputFormatError("people must be a non-empty sequence")

    seen: set[int] = set()
    for p in people:
        if p.index in seen:
            raise InputFormatError(f"duplicate person index found: {p.index}")
        seen.add(p.index)

    for i in range(1, len(people)):
        if people[i].arrival_time < people[i - 1].arrival_time:
            raise InputFormatError(
                "people must be sorted by arrival time; "
                f"person at position {i} arrives at {people[i].arrival_time} "
                f"after {people[i - 1].arrival_time}"
            )

    for i, p in enumerate(people):
        if p.index != i:
            raise InputFormatError(f"person at position {i} has index {p.index}, expected {i}")


@dataclass
class PassageLedger:
    """
    Per-run passage record: the only place a pass time is ever written.

    People stay frozen; the simulator builds one ledger per simulate() call.
    """

    people: Sequence[Person]
    pass_times: list[int | None] = field(init=False)
    passed: set[int] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self.pass_times = [None] * len(self.people)

    @property
    def processed_count(self) -> int:
        return len(self.passed)

    def is_processed(self, person: Person) -> bool:
        return person.index in self.passed

    def pass_time(self, person: Person) -> int | None:
        return self.pass_times[person.index]

    def record(self, person: Person, tick: int) -> None:
        """Unprocessed -> processed at tick, exactly once per person."""
        if person.index in self.passed:
            raise InvariantViolationError(
                f"person {person.index} already passed at {self.pass_times[person.index]}"
            )
        if tick < person.arrival_time:
            raise InvariantViolationError(
                f"person {person.index} cannot pass at {tick} before arriving at {person.arrival_time}"
            )
        self.passed.add(person.index)
        self.pass_times[person.index] = tick

    def results(self) -> list[int]:
        if len(self.passed) != len(self.people):
            raise InvariantViolationError("simulation ended with people who never passed")
        return [int(t) for t in self.pass_times]


class TurnstileSimulator:
    """
    Steps a virtual clock one passage per tick until everyone has passed.

    State:
      - clock: current tick
      - state: previous tick's passage direction, IDLE after a gap (and at start)
      - ledger: pass times recorded so far (never stored on Person)
    """

    def __init__(
            self,
            rule_table: RuleTable | str = RuleTable.EXIT_PRIORITY,
            event_sink: EventSink | None = None,
    ) -> None:
        self.rule_table = RuleTable(rule_table)
        self.event_sink = event_sink
        self._rules = rules_for(self.rule_table)

    def simulate(self, people: Sequence[Person]) -> list[int]:
        validate_people(people)

        n = len(people)
        sink = self.event_sink
        queue = TurnstileQueue()
        clock = 0
        state = TurnstileState.IDLE
        ledger = PassageLedger(people)

        log.debug("simulating %d people (rule_table=%s)", n, self.rule_table.value)

        while ledger.processed_count < n:
            if sink is not None:
                sink.start_tick(clock)
                sink.emit(EventType.TICK_START, state=state.value)

            added = queue.admit_next(people, clock)
            if sink is not None and added:
                sink.emit(
                    EventType.CANDIDATES_ADMITTED,
                    added=added,
                    entering_waiting=queue.entering_count,
                    exiting_waiting=queue.exiting_count,
                )

            if not queue.has_waiting:
                # Empty lanes mean everyone admitted so far has passed, and input
                # is arrival-ordered, so the earliest remaining arrival is next in line.
                nxt = people[ledger.processed_count]
                if ledger.is_processed(nxt) or nxt.arrival_time <= clock:
                    raise InvariantViolationError(f"idle at tick {clock} but person {nxt.index} is not pending")
                if sink is not None:
                    sink.emit(EventType.IDLE_JUMP, person=nxt.index, from_tick=clock, to_tick=nxt.arrival_time)
                log.debug("idle from tick %d to %d", clock, nxt.arrival_time)
                clock = nxt.arrival_time
                state = TurnstileState.IDLE
                continue

            entering_waiting = queue.entering_count
            exiting_waiting = queue.exiting_count
            person = self._rules[state](queue.entering, queue.exiting)

            if sink is not None:
                sink.emit(
                    EventType.WINNER_SELECTED,
                    person=person.index,
                    direction=person.direction.name,
                    state=state.value,
                    entering_waiting=entering_waiting,
                    exiting_waiting=exiting_waiting,
                )

            ledger.record(person, clock)
            queue.remove(person)
            state = TurnstileState.after(person.direction)

            if sink is not None:
                sink.emit(
                    EventType.PASSAGE_RECORDED,
                    person=person.index,
                    pass_time=clock,
                    waited=clock - person.arrival_time,
                )

            clock += 1

        log.info("simulated %d passages, last at tick %d", n, clock - 1)
        return ledger.results()


def simulate(
        people: Sequence[Person],
        *,
        rule_table: RuleTable | str = RuleTable.EXIT_PRIORITY,
        event_sink: EventSink | None = None,
) -> list[int]:
    """Pass times indexed by person index. People must arrive pre-ordered (position == index)."""
    return TurnstileSimulator(rule_table=rule_table, event_sink=event_sink).simulate(people)


def build_people(times: Sequence[int], directions: Sequence[int]) -> list[Person]:
    if len(times) != len(directions):
        raise InputFormatError(
            f"times and directions must have the same length ({len(times)} != {len(directions)})"
        )
    return [Person(i, t, Direction.from_code(d)) for i, (t, d) in enumerate(zip(times, directions))]


def simulate_arrays(
        times: Sequence[int],
        directions: Sequence[int],
        *,
        rule_table: RuleTable | str = RuleTable.EXIT_PRIORITY,
        event_sink: EventSink | None = None,
) -> list[int]:
    """Convenience form over parallel arrays (direction codes: 0=enter, 1=exit)."""
    return simulate(build_people(times, directions), rule_table=rule_table, event_sink=event_sink)
