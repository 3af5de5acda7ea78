from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """
    Event vocabulary for the turnstile engine.
    Keep this small; add types only when tests require them.
    """

    TICK_START = "TICK_START"
    CANDIDATES_ADMITTED = "CANDIDATES_ADMITTED"
    IDLE_JUMP = "IDLE_JUMP"
    WINNER_SELECTED = "WINNER_SELECTED"
    PASSAGE_RECORDED = "PASSAGE_RECORDED"


@dataclass(frozen=True, slots=True)
class Event:
    """
    A structured, orderable fact emitted by the engine (optionally).

    tick is simulated time as supplied by the engine; seq is owned by the sink.
    """

    tick: int
    seq: int
    type: EventType
    person: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
