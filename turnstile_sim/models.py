from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from turnstile_sim.errors import InputFormatError


class Direction(IntEnum):
    # Values match the input codes.
    ENTER = 0
    EXIT = 1

    @classmethod
    def from_code(cls, code: object) -> Direction:
        if isinstance(code, bool) or not isinstance(code, int):
            raise InputFormatError(f"direction code must be 0 or 1 (got {code!r})")
        try:
            return cls(code)
        except ValueError as e:
            raise InputFormatError(f"direction code must be 0 or 1 (got {code})") from e


class TurnstileState(str, Enum):
    """Direction of the previous tick's passage, or IDLE if nobody passed."""

    IDLE = "IDLE"
    ENTER = "ENTER"
    EXIT = "EXIT"

    @classmethod
    def after(cls, direction: Direction) -> TurnstileState:
        return cls.ENTER if direction == Direction.ENTER else cls.EXIT


@dataclass(frozen=True, eq=False)
class Person:
    """Who is waiting, since when, and which way. Pass times live in the run, not here."""

    index: int
    arrival_time: int
    direction: Direction

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise InputFormatError(f"person index must be a non-negative int (got {self.index!r})")
        if (
            isinstance(self.arrival_time, bool)
            or not isinstance(self.arrival_time, int)
            or self.arrival_time < 0
        ):
            raise InputFormatError(
                f"person {self.index}: arrival time must be a non-negative int (got {self.arrival_time!r})"
            )
        if not isinstance(self.direction, Direction):
            object.__setattr__(self, "direction", Direction.from_code(self.direction))

    @property
    def is_entering(self) -> bool:
        return self.direction == Direction.ENTER

    @property
    def is_exiting(self) -> bool:
        return self.direction == Direction.EXIT
