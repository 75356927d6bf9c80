"""Solana program log parser package."""

from .parser import parse_program_logs  # noqa: F401
from .api import (  # noqa: F401
    parse_with_config,
    parse_transaction,
    dump_traces,
)
from .cluster import Cluster  # noqa: F401
from .log_types import InstructionLogs, LogMessage, LogStyle  # noqa: F401
