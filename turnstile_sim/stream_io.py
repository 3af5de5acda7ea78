from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Sequence

from turnstile_sim.engine import build_people
from turnstile_sim.errors import InputFormatError
from turnstile_sim.events import Event
from turnstile_sim.models import Person
from turnstile_sim.policy import RuleTable


@dataclass(frozen=True)
class ScenarioOptions:
    # Which state -> rule table decides contested ticks.
    rule_table: RuleTable = RuleTable.EXIT_PRIORITY


@dataclass(frozen=True)
class Scenario:
    times: list[int]
    directions: list[int]
    options: ScenarioOptions = field(default_factory=ScenarioOptions)

    def people(self) -> list[Person]:
        return build_people(self.times, self.directions)


def _parse_int_line(line: str, *, label: str) -> list[int]:
    out: list[int] = []
    for i, tok in enumerate(line.split()):
        try:
            out.append(int(tok))
        except ValueError as e:
            raise InputFormatError(f"{label}[{i}] must be an integer (got {tok!r})") from e
    return out


def parse_text_input(text: str) -> Scenario:
    """Parse the console format.

    Layout:
      n
      t_0 t_1 ... t_{n-1}      (arrival times)
      d_0 d_1 ... d_{n-1}      (0 = enter, 1 = exit)

    Blank lines are ignored. A length mismatch is an input error; nothing is
    simulated.
    """
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if not lines:
        raise InputFormatError("empty input: expected n, times and directions")

    n_tokens = lines[0].split()
    if len(n_tokens) != 1:
        raise InputFormatError(f"first line must hold a single integer n (got {lines[0]!r})")
    try:
        n = int(n_tokens[0])
    except ValueError as e:
        raise InputFormatError(f"n must be an integer (got {n_tokens[0]!r})") from e
    if n < 1:
        raise InputFormatError(f"n must be >= 1 (got {n})")

    if len(lines) < 3:
        raise InputFormatError("expected three lines: n, arrival times, directions")

    times = _parse_int_line(lines[1], label="times")
    directions = _parse_int_line(lines[2], label="directions")

    if len(times) != n or len(directions) != n:
        raise InputFormatError(
            f"array lengths must match n={n} (times={len(times)}, directions={len(directions)})"
        )

    _check_values(times, directions)
    return Scenario(times=times, directions=directions)


def _check_values(times: Sequence[object], directions: Sequence[object]) -> None:
    for i, t in enumerate(times):
        if isinstance(t, bool) or not isinstance(t, int) or t < 0:
            raise InputFormatError(f"times[{i}] must be a non-negative int (got {t!r})")
    for i, d in enumerate(directions):
        if isinstance(d, bool) or d not in (0, 1):
            raise InputFormatError(f"directions[{i}] must be 0 or 1 (got {d!r})")


def load_text_input(path: Path) -> Scenario:
    if not path.exists():
        raise InputFormatError(f"file not found: {path}")
    if not path.is_file():
        raise InputFormatError(f"not a file: {path}")
    return parse_text_input(path.read_text(encoding="utf-8"))


def load_scenario(path: Path) -> Scenario:
    """Load and validate a JSON scenario.

    Format:
      {
        "times": [0, 0, 1, 5],
        "directions": [0, 1, 1, 0],
        "options": {"rule_table": "exit_priority"}
      }

    "options" is optional; rule_table is one of exit_priority, enter_continuity.
    """

    if not path.exists():
        raise InputFormatError(f"file not found: {path}")
    if not path.is_file():
        raise InputFormatError(f"not a file: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputFormatError(
            f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e

    if not isinstance(raw, dict):
        raise InputFormatError("root must be a JSON object")

    times = raw.get("times")
    directions = raw.get("directions")
    if not isinstance(times, list) or not times:
        raise InputFormatError("times must be a non-empty array")
    if not isinstance(directions, list) or not directions:
        raise InputFormatError("directions must be a non-empty array")
    if len(times) != len(directions):
        raise InputFormatError(
            f"times and directions must have the same length ({len(times)} != {len(directions)})"
        )
    _check_values(times, directions)

    options = _parse_options(raw.get("options", {}))
    return Scenario(times=[int(t) for t in times], directions=[int(d) for d in directions], options=options)


def _parse_options(raw: object) -> ScenarioOptions:
    if raw is None:
        return ScenarioOptions()
    if not isinstance(raw, dict):
        raise InputFormatError("options must be an object")

    rule_table = raw.get("rule_table", None)
    if rule_table is None:
        return ScenarioOptions()
    if not isinstance(rule_table, str) or not rule_table.strip():
        raise InputFormatError("options.rule_table must be a non-empty string when provided")
    try:
        table = RuleTable(rule_table.strip())
    except ValueError as e:
        allowed = ", ".join(t.value for t in RuleTable)
        raise InputFormatError(f"options.rule_table must be one of: {allowed}") from e
    return ScenarioOptions(rule_table=table)


def format_result(times: Sequence[int]) -> str:
    return " ".join(str(int(t)) for t in times)


def dump_event_stream(events: Sequence[Event]) -> list[dict[str, Any]]:
    """Return a JSON-serializable event stream, ordered by (tick, seq) as emitted."""
    out: list[dict[str, Any]] = []
    for e in events:
        d = asdict(e)
        d["type"] = str(e.type.value)
        out.append(d)
    return out
