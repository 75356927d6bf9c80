"""Pure functions for computing statistics over parsed instruction logs."""

from __future__ import annotations

from collections import Counter

from .log_types import InstructionLogs


def count_styles(traces: list[InstructionLogs]) -> dict[str, int]:
    """Return a frequency map of log style names across all *traces*.

    Empty dict for an empty input list.
    """
    return dict(Counter(log.style.value for trace in traces for log in trace.logs))


def summarize_traces(traces: list[InstructionLogs]) -> dict:
    """Aggregate totals for a parsed transaction.

    Returns:
        A dict with the instruction count, total compute units, the
        indices of failed and truncated instructions, and per-style line counts.
    """
    return {
        "instructions": len(traces),
        "compute_units": sum(trace.compute_units for trace in traces),
        "failed": [i for i, trace in enumerate(traces) if trace.failed],
        "truncated": [i for i, trace in enumerate(traces) if trace.truncated],
        "styles": count_styles(traces),
    }
