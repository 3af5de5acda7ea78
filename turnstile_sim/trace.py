from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from turnstile_sim.engine import simulate
from turnstile_sim.event_sink import InMemoryEventSink
from turnstile_sim.events import Event, EventType
from turnstile_sim.models import Person
from turnstile_sim.policy import RuleTable


@dataclass(frozen=True)
class PassageTrace:
    tick: int
    person: int
    direction: str
    # Turnstile state the winner was chosen under (IDLE / ENTER / EXIT)
    state_before: str
    # Lane sizes at selection time, winner included
    entering_waiting: int
    exiting_waiting: int
    waited: int


@dataclass(frozen=True)
class IdleGap:
    from_tick: int
    to_tick: int


def derive_passages(events: Iterable[Event]) -> list[PassageTrace]:
    """
    Pair WINNER_SELECTED with the PASSAGE_RECORDED that follows it.

    This function does not modify simulation behavior.
    """
    rows: list[PassageTrace] = []
    pending: Event | None = None

    for e in events:
        if e.type == EventType.WINNER_SELECTED:
            pending = e
            continue
        if e.type == EventType.PASSAGE_RECORDED and pending is not None and pending.person == e.person:
            rows.append(
                PassageTrace(
                    tick=e.tick,
                    person=int(e.person),
                    direction=str(pending.data["direction"]),
                    state_before=str(pending.data["state"]),
                    entering_waiting=int(pending.data["entering_waiting"]),
                    exiting_waiting=int(pending.data["exiting_waiting"]),
                    waited=int(e.data["waited"]),
                )
            )
            pending = None

    return rows


def derive_idle_gaps(events: Iterable[Event]) -> list[IdleGap]:
    return [
        IdleGap(from_tick=int(e.data["from_tick"]), to_tick=int(e.data["to_tick"]))
        for e in events
        if e.type == EventType.IDLE_JUMP
    ]


def run_with_trace(
        people: Sequence[Person],
        rule_table: RuleTable | str = RuleTable.EXIT_PRIORITY,
) -> tuple[list[int], list[PassageTrace]]:
    """
    Simulate and return (pass_times, per-passage trace).

    Adds observability only (no rule changes).
    """
    sink = InMemoryEventSink()
    times = simulate(people, rule_table=rule_table, event_sink=sink)
    return times, derive_passages(sink.events)


def render_trace(rows: Sequence[PassageTrace], gaps: Sequence[IdleGap] = ()) -> str:
    """One line per passage, with idle gaps interleaved at the tick they start."""
    lines: list[tuple[int, str]] = []
    for g in gaps:
        lines.append((g.from_tick, f"Tick {g.from_tick:>4d} | idle until tick {g.to_tick}"))
    for r in rows:
        lines.append(
            (
                r.tick,
                f"Tick {r.tick:>4d} | person {r.person:<4d} {r.direction:<5s} "
                f"(state={r.state_before:<5s} waiting enter={r.entering_waiting} exit={r.exiting_waiting}, "
                f"waited={r.waited})",
            )
        )
    # A gap starts on a tick nobody passes, so ticks never collide.
    out = [text for _, text in sorted(lines, key=lambda t: t[0])]
    return "\n".join(out) + ("\n" if out else "")
