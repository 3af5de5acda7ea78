from __future__ import annotations

from turnstile_sim.models import Direction, Person
from turnstile_sim.trace import run_with_trace


def main() -> None:
    people = [
        Person(0, 0, Direction.ENTER),
        Person(1, 1, Direction.ENTER),
        Person(2, 1, Direction.EXIT),
        Person(3, 3, Direction.ENTER),
        Person(4, 3, Direction.EXIT),
        Person(5, 9, Direction.ENTER),
    ]

    times, rows = run_with_trace(people)

    for r in rows:
        # Lane sizes are taken before the winner leaves its lane
        print(
            f"Tick {r.tick:2d} | person={r.person} {r.direction:<5s} "
            f"state={r.state_before:<5s} enter={r.entering_waiting} exit={r.exiting_waiting}"
        )

    print("\npass times:", " ".join(str(t) for t in times))


if __name__ == "__main__":
    main()
