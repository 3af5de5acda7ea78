from __future__ import annotations

from enum import Enum
from typing import Callable, Mapping, Sequence

from turnstile_sim.errors import InvariantViolationError
from turnstile_sim.models import Person, TurnstileState

Strategy = Callable[[Sequence[Person], Sequence[Person]], Person]


def _no_candidates() -> InvariantViolationError:
    return InvariantViolationError("priority rule invoked with nobody waiting in either lane")


def idle_prefers_exit(entering: Sequence[Person], exiting: Sequence[Person]) -> Person:
    """Rule 1: the turnstile was unused in the previous tick, exiting goes first."""
    if len(exiting) > 0:
        return exiting[0]
    if len(entering) > 0:
        return entering[0]
    raise _no_candidates()


def previous_exit_prefers_exit(entering: Sequence[Person], exiting: Sequence[Person]) -> Person:
    """Rule 2: the previous person exited, exiting keeps the turnstile (continuous flow)."""
    if len(exiting) > 0:
        return exiting[0]
    if len(entering) > 0:
        return entering[0]
    raise _no_candidates()


def previous_enter_prefers_exit(entering: Sequence[Person], exiting: Sequence[Person]) -> Person:
    """Rule 3: the previous person entered, a waiting exit still goes first."""
    if len(exiting) > 0:
        return exiting[0]
    if len(entering) > 0:
        return entering[0]
    raise _no_candidates()


def previous_enter_prefers_enter(entering: Sequence[Person], exiting: Sequence[Person]) -> Person:
    """Rule 3 (continuity reading): the previous person entered, entering keeps the turnstile."""
    if len(entering) > 0:
        return entering[0]
    if len(exiting) > 0:
        return exiting[0]
    raise _no_candidates()


class RuleTable(str, Enum):
    """
    Named state -> strategy tables.

    EXIT_PRIORITY reproduces the reference scenarios. ENTER_CONTINUITY keeps
    entering flowing after an entry, as the problem's prose describes it.
    """

    EXIT_PRIORITY = "exit_priority"
    ENTER_CONTINUITY = "enter_continuity"


_TABLES: dict[RuleTable, dict[TurnstileState, Strategy]] = {
    RuleTable.EXIT_PRIORITY: {
        TurnstileState.IDLE: idle_prefers_exit,
        TurnstileState.EXIT: previous_exit_prefers_exit,
        TurnstileState.ENTER: previous_enter_prefers_exit,
    },
    RuleTable.ENTER_CONTINUITY: {
        TurnstileState.IDLE: idle_prefers_exit,
        TurnstileState.EXIT: previous_exit_prefers_exit,
        TurnstileState.ENTER: previous_enter_prefers_enter,
    },
}


def rules_for(table: RuleTable | str = RuleTable.EXIT_PRIORITY) -> Mapping[TurnstileState, Strategy]:
    return _TABLES[RuleTable(table)]


def select_next(
        state: TurnstileState,
        entering: Sequence[Person],
        exiting: Sequence[Person],
        *,
        table: RuleTable | str = RuleTable.EXIT_PRIORITY,
) -> Person:
    """
    Pick the single person who passes on this tick.

    Inputs:
      - state: direction of the previous tick's passage, or IDLE
      - entering / exiting: waiting people, ascending by index (head = index 0)

    Same-direction ties always go to the lowest index (Rule 4). Person state is
    never touched here; the simulator records the passage.
    """
    return rules_for(table)[state](entering, exiting)
