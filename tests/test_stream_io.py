from __future__ import annotations

import json
from pathlib import Path

import pytest

from turnstile_sim.engine import simulate
from turnstile_sim.event_sink import InMemoryEventSink
from turnstile_sim.policy import RuleTable
from turnstile_sim.stream_io import (
    InputFormatError,
    dump_event_stream,
    format_result,
    load_scenario,
    load_text_input,
    parse_text_input,
)
from tests._support.people_helpers import E, X, make_people


def test_parse_text_input_happy_path() -> None:
    scenario = parse_text_input("4\n0 0 1 5\n0 1 1 0\n")

    assert scenario.times == [0, 0, 1, 5]
    assert scenario.directions == [0, 1, 1, 0]
    assert scenario.options.rule_table is RuleTable.EXIT_PRIORITY
    assert simulate(scenario.people()) == [2, 0, 1, 5]


def test_parse_text_input_ignores_blank_lines() -> None:
    scenario = parse_text_input("\n1\n\n5\n1\n\n")
    assert scenario.times == [5]
    assert scenario.directions == [1]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "3\n0 1 2\n",
        "3\n0 1\n0 1 1\n",
        "2\n0 1\n0 1 0\n",
        "x\n0\n0\n",
        "2\n0 a\n0 1\n",
        "2\n0 -1\n0 1\n",
        "2\n0 1\n0 2\n",
        "0\n\n\n",
        "1 2\n0\n0\n",
    ],
)
def test_parse_text_input_rejects_bad_shapes(text: str) -> None:
    with pytest.raises(InputFormatError):
        parse_text_input(text)


def test_load_text_input_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InputFormatError, match="file not found"):
        load_text_input(tmp_path / "nope.txt")


def test_load_scenario_with_options(tmp_path: Path) -> None:
    path = tmp_path / "scenario.json"
    path.write_text(
        json.dumps(
            {
                "times": [0, 1, 1, 3, 3],
                "directions": [0, 0, 1, 0, 1],
                "options": {"rule_table": "enter_continuity"},
            }
        ),
        encoding="utf-8",
    )

    scenario = load_scenario(path)

    assert scenario.options.rule_table is RuleTable.ENTER_CONTINUITY
    assert simulate(scenario.people(), rule_table=scenario.options.rule_table) == [0, 1, 2, 4, 3]


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"times": [0], "directions": []},
        {"times": [0, 1], "directions": [0]},
        {"times": [0, "1"], "directions": [0, 1]},
        {"times": [0], "directions": [3]},
        {"times": [0], "directions": [True]},
        {"times": [0], "directions": [0], "options": []},
        {"times": [0], "directions": [0], "options": {"rule_table": "fifo"}},
    ],
)
def test_load_scenario_rejects_bad_payloads(tmp_path: Path, payload: object) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(InputFormatError):
        load_scenario(path)


def test_load_scenario_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InputFormatError, match="invalid JSON"):
        load_scenario(path)


def test_format_result() -> None:
    assert format_result([2, 0, 1, 5]) == "2 0 1 5"


def test_dump_event_stream_is_json_serializable() -> None:
    sink = InMemoryEventSink()
    simulate(make_people([0, 0], [E, X]), event_sink=sink)

    dumped = dump_event_stream(sink.events)
    json.dumps(dumped)

    assert dumped[0]["type"] == "TICK_START"
    assert dumped[0]["tick"] == 0 and dumped[0]["seq"] == 1
    passages = [d for d in dumped if d["type"] == "PASSAGE_RECORDED"]
    assert [(d["person"], d["data"]["pass_time"]) for d in passages] == [(1, 0), (0, 1)]
