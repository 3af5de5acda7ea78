from __future__ import annotations

import heapq
import itertools
from collections.abc import Sequence
from typing import Container, Iterable, Iterator, overload

from turnstile_sim.models import Person


class CandidateLane(Sequence):
    """
    Waiting people of one direction, ordered by index (Rule 4).

    Backed by a min-heap on index with lazy deletion, so the head is cheap and
    removals never shift the heap. Slicing or iterating builds a sorted view.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, Person]] = []
        self._seq = itertools.count()
        self._members: dict[int, Person] = {}

    def add(self, person: Person) -> bool:
        if person.index in self._members:
            return False
        self._members[person.index] = person
        heapq.heappush(self._heap, (person.index, next(self._seq), person))
        return True

    def discard(self, person: Person) -> bool:
        if self._members.get(person.index) is not person:
            return False
        del self._members[person.index]
        self._prune()
        return True

    def clear(self) -> None:
        self._heap.clear()
        self._members.clear()

    def head(self) -> Person:
        self._prune()
        if not self._heap:
            raise IndexError("lane is empty")
        return self._heap[0][2]

    def _prune(self) -> None:
        heap = self._heap
        while heap and self._members.get(heap[0][0]) is not heap[0][2]:
            heapq.heappop(heap)

    def _ordered(self) -> list[Person]:
        return [self._members[i] for i in sorted(self._members)]

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, person: object) -> bool:
        return isinstance(person, Person) and self._members.get(person.index) is person

    def __iter__(self) -> Iterator[Person]:
        return iter(self._ordered())

    @overload
    def __getitem__(self, i: int) -> Person: ...

    @overload
    def __getitem__(self, i: slice) -> list[Person]: ...

    def __getitem__(self, i):
        if i == 0:
            return self.head()
        return self._ordered()[i]

    def __repr__(self) -> str:
        return f"CandidateLane({[p.index for p in self._ordered()]})"


class TurnstileQueue:
    """
    People who have arrived and not yet passed, split by direction.

    The simulator feeds it with admit_next() (cursor over arrival-ordered
    input); admit() is the order-agnostic full scan.
    """

    def __init__(self) -> None:
        self._entering = CandidateLane()
        self._exiting = CandidateLane()
        self._cursor = 0

    @property
    def entering(self) -> CandidateLane:
        return self._entering

    @property
    def exiting(self) -> CandidateLane:
        return self._exiting

    @property
    def entering_count(self) -> int:
        return len(self._entering)

    @property
    def exiting_count(self) -> int:
        return len(self._exiting)

    @property
    def has_waiting(self) -> bool:
        return len(self._entering) > 0 or len(self._exiting) > 0

    def _lane_for(self, person: Person) -> CandidateLane:
        return self._entering if person.is_entering else self._exiting

    def admit(self, people: Iterable[Person], current_time: int, passed: Container[int] = ()) -> int:
        """Add everyone arrived by current_time whose index is not in passed. Returns how many were new."""
        added = 0
        for p in people:
            if p.index not in passed and p.arrival_time <= current_time:
                if self._lane_for(p).add(p):
                    added += 1
        return added

    def admit_next(self, people: Sequence[Person], current_time: int) -> int:
        """
        Incremental admit over people sorted by arrival_time.

        Each person is looked at once across the whole run, so a full
        simulation stays O(N log N).
        """
        added = 0
        while self._cursor < len(people) and people[self._cursor].arrival_time <= current_time:
            p = people[self._cursor]
            self._cursor += 1
            if self._lane_for(p).add(p):
                added += 1
        return added

    def remove(self, person: Person) -> None:
        self._lane_for(person).discard(person)

    def clear(self) -> None:
        self._entering.clear()
        self._exiting.clear()
        self._cursor = 0
