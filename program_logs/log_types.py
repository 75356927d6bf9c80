"""Trace data types produced by the program log parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LogStyle(str, Enum):
    MUTED = "muted"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class LogMessage:
    """A single rendered log line.

    ``prefix`` encodes the nesting depth the line was emitted at.
    """

    text: str
    prefix: str
    style: LogStyle

    def to_dict(self) -> dict:
        return {"text": self.text, "prefix": self.prefix, "style": self.style.value}


@dataclass
class InstructionLogs:
    """Everything logged while one top-level instruction executed.

    Inner (CPI) invocations are folded into the logs of the top-level
    instruction that issued them. ``invoked_program`` is None for an entry
    synthesized from logs that had no explicit invoke marker.
    """

    invoked_program: str | None = None
    logs: list[LogMessage] = field(default_factory=list)
    compute_units: int = 0
    truncated: bool = False
    failed: bool = False

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "invokedProgram": self.invoked_program,
            "logs": [log.to_dict() for log in self.logs],
            "computeUnits": self.compute_units,
            "truncated": self.truncated,
            "failed": self.failed,
        }
        return d
