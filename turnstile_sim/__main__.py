from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from turnstile_sim.engine import simulate
from turnstile_sim.event_sink import InMemoryEventSink
from turnstile_sim.policy import RuleTable
from turnstile_sim.stream_io import (
    InputFormatError,
    Scenario,
    dump_event_stream,
    format_result,
    load_scenario,
    load_text_input,
    parse_text_input,
)
from turnstile_sim.trace import derive_idle_gaps, derive_passages, render_trace

log = logging.getLogger("turnstile_sim")


def _load(args: argparse.Namespace) -> Scenario:
    if args.scenario:
        return load_scenario(Path(str(args.scenario)))
    if args.input:
        return load_text_input(Path(str(args.input)))
    return parse_text_input(sys.stdin.read())


def _cmd_run(args: argparse.Namespace) -> int:
    if args.scenario and args.input:
        print("ERROR: choose at most one of --input or --scenario.", file=sys.stderr)
        return 2

    try:
        scenario = _load(args)
        people = scenario.people()
    except InputFormatError as e:
        print(f"ERROR: invalid input: {e}", file=sys.stderr)
        return 2

    # CLI flag wins over the scenario's options block.
    rule_table = RuleTable(args.rule_table) if args.rule_table else scenario.options.rule_table

    sink = InMemoryEventSink() if (args.events_out or args.trace) else None

    try:
        times = simulate(people, rule_table=rule_table, event_sink=sink)
    except InputFormatError as e:
        print(f"ERROR: invalid input: {e}", file=sys.stderr)
        return 2

    if sink is not None and args.trace:
        sys.stderr.write(render_trace(derive_passages(sink.events), derive_idle_gaps(sink.events)))

    if sink is not None and args.events_out:
        out_path = Path(str(args.events_out))
        out_path.write_text(json.dumps(dump_event_stream(sink.events), indent=2), encoding="utf-8")
        log.info("wrote %d events to %s", len(sink.events), out_path)

    sys.stdout.write(format_result(times) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="turnstile_sim",
        description=(
            "Turnstile Simulator: one passage per second, priority rules on contested ticks.\n"
            "\n"
            "Reads n, a line of arrival times and a line of direction codes (0=enter, 1=exit)\n"
            "and prints each person's pass time."
        ),
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Simulate and print pass times on one line.")
    run.add_argument("--input", type=str, help="Read the text format from a file instead of stdin.")
    run.add_argument("--scenario", type=str, help="Read a JSON scenario (times, directions, options).")
    run.add_argument(
        "--rule-table",
        type=str,
        choices=[t.value for t in RuleTable],
        default=None,
        help="Priority rule table (default: scenario option, else exit_priority).",
    )
    run.add_argument("--events-out", type=str, default=None, help="Write the structured event stream as JSON.")
    run.add_argument("--trace", action="store_true", help="Print a per-passage trace to stderr.")
    run.set_defaults(func=_cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
