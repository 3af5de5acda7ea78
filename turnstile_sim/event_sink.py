from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from turnstile_sim.events import Event, EventType


class EventSink(ABC):
    """
    Consumer of structured events.
    The engine must be able to run with event_sink=None (no events).
    """

    @abstractmethod
    def start_tick(self, tick: int) -> int: ...

    @abstractmethod
    def emit(self, event_type: EventType, person: int | None = None, **data: Any) -> None: ...


@dataclass
class InMemoryEventSink(EventSink):
    """
    Simple sink for tests/demos.

    Simulated time can jump over idle gaps, so the engine hands in the tick;
    the sink only checks it never goes backwards and owns seq numbering.
    """

    events: list[Event] = field(default_factory=list)
    _tick: int | None = field(default=None, init=False)
    _seq: int = field(default=0, init=False)

    @property
    def current_tick(self) -> int | None:
        return self._tick

    def start_tick(self, tick: int) -> int:
        if self._tick is not None and tick < self._tick:
            raise RuntimeError(f"tick went backwards: {tick} after {self._tick}")
        if tick != self._tick:
            self._seq = 0
        self._tick = tick
        return self._tick

    def emit(self, event_type: EventType, person: int | None = None, **data: object) -> None:
        if self._tick is None:
            raise RuntimeError("EventSink.start_tick() must be called before emitting events.")
        self._seq += 1
        self.events.append(
            Event(
                tick=self._tick,
                seq=self._seq,
                type=event_type,
                person=person,
                data=dict(data),
            )
        )
