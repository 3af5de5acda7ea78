"""
Turnstile Simulator

Core modules:
- engine: tick loop, input validation and passage bookkeeping
- policy: priority rules deciding who passes on a contested tick
- queue: waiting lanes of arrived, unprocessed people (ordered by index)
- models: core dataclasses and enums
- trace: helpers for producing human-readable passage traces (no behavior changes)
"""
