"""Program log parser — rebuilds per-instruction traces from flat runtime logs.

The runtime emits one flat list of log lines per transaction. Invoke and
return markers delimit each program call, so replaying them against an
invocation stack recovers which top-level instruction (and at what CPI
depth) every line belongs to.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from . import constants
from .cluster import Cluster
from .decoders import DecoderRegistry, default_registry
from .log_types import InstructionLogs, LogMessage, LogStyle
from .program_err import get_transaction_instruction_error
from .program_names import AddressNameResolver, ProgramNameResolver
from .run_types import ProgramError

logger = logging.getLogger(__name__)


class LogPatterns:
    """Compiled regex patterns for runtime log lines."""

    PROGRAM_LOG_RE = re.compile(constants.PROGRAM_LOG_PATTERN)
    INVOKE_RE = re.compile(constants.INVOKE_PATTERN)
    CONSUMED_RE = re.compile(constants.CONSUMED_PATTERN)


def build_prefix(indent_level: int) -> str:
    """Visual prefix for a line nested *indent_level* deep (1 = top level)."""
    if indent_level <= 0:
        logger.warning(
            "Tried to build a prefix for a program log at indent level %d. "
            "Logs should only ever be built at indent level 1 or higher.",
            indent_level,
        )
        return constants.PREFIX_MARKER
    return constants.PREFIX_INDENT * (indent_level - 1) + constants.PREFIX_MARKER


class InvocationStack:
    """Addresses of the programs currently executing, innermost last."""

    def __init__(self) -> None:
        self._addresses: list[str] = []

    def push(self, address: str) -> None:
        self._addresses.append(address)

    def pop(self) -> str | None:
        """Remove and return the innermost program, or None if nothing is executing."""
        if not self._addresses:
            return None
        return self._addresses.pop()

    @property
    def top(self) -> str | None:
        return self._addresses[-1] if self._addresses else None

    def __len__(self) -> int:
        return len(self._addresses)


@dataclass
class ParserState:
    """Mutable state for a single parse; never shared between calls."""

    instructions: list[InstructionLogs] = field(default_factory=list)
    invocations: InvocationStack = field(default_factory=InvocationStack)
    depth: int = 0
    current_index: int | None = None

    @property
    def current(self) -> InstructionLogs:
        return self.instructions[self.current_index]

    def open_instruction(self, invoked_program: str | None) -> InstructionLogs:
        self.instructions.append(InstructionLogs(invoked_program=invoked_program))
        self.current_index = len(self.instructions) - 1
        return self.current

    def ensure_instruction(self) -> InstructionLogs:
        """Return the open instruction, synthesizing one if no instruction exists yet."""
        if self.current_index is None:
            self.open_instruction(None)
            self.depth = 1
        return self.current

    def emit(self, text: str, style: LogStyle, indent_level: int | None = None) -> None:
        level = self.depth if indent_level is None else indent_level
        self.current.logs.append(
            LogMessage(text=text, prefix=build_prefix(level), style=style)
        )

    def leave(self) -> None:
        self.depth = max(self.depth - 1, 0)


# ── Line handlers ────────────────────────────────────────────────


def _handle_program_log(state: ParserState, log: str) -> None:
    # Passive tense
    text = LogPatterns.PROGRAM_LOG_RE.sub(
        lambda m: constants.PROGRAM_LOGGED_TEMPLATE.format(message=m.group(1)), log
    )
    state.ensure_instruction()
    state.emit(text, LogStyle.MUTED)


def _handle_truncated(state: ParserState) -> None:
    state.ensure_instruction().truncated = True


def _handle_invoke(
    state: ParserState,
    program_address: str,
    name_resolver: ProgramNameResolver,
    cluster: Cluster,
) -> None:
    state.invocations.push(program_address)
    if state.depth == 0:
        state.open_instruction(program_address)
    else:
        name = name_resolver.resolve(program_address, cluster)
        state.emit(
            constants.PROGRAM_INVOKED_TEMPLATE.format(name=name), LogStyle.INFO
        )
    state.depth += 1


def _handle_success(state: ParserState) -> None:
    state.invocations.pop()
    state.ensure_instruction()
    state.emit(constants.PROGRAM_RETURNED_SUCCESS, LogStyle.SUCCESS)
    state.leave()


def _is_verification_failure(log: str) -> bool:
    """A bare ``failed ...`` line reports a failure for a program whose return
    was already logged, so its depth has already been closed."""
    return log.startswith(constants.FAILED_MARKER)


def _handle_failed(state: ParserState, log: str) -> None:
    state.invocations.pop()
    instruction = state.ensure_instruction()
    instruction.failed = True

    if _is_verification_failure(log):
        state.depth += 1
        text = log[:1].upper() + log[1:]
    else:
        text = constants.PROGRAM_RETURNED_ERROR_TEMPLATE.format(
            message=log[log.find(": ") + 2 :]
        )

    state.emit(text, LogStyle.WARNING)
    state.leave()


def _handle_other(state: ParserState, log: str, decoders: DecoderRegistry) -> None:
    if state.depth == 0:
        # Native programs and pre-invoke runtime logs have no invoke marker
        state.open_instruction(None)
        state.depth += 1

    def _consumed(m: re.Match) -> str:
        # Only top-level consumption is summed; it already includes inner calls
        if state.depth == 1:
            state.current.compute_units += int(m.group(1))
        return constants.PROGRAM_CONSUMED_TEMPLATE.format(units=m.group(1), rest=m.group(2))

    text = LogPatterns.CONSUMED_RE.sub(_consumed, log)
    state.emit(text, LogStyle.MUTED)

    program = state.invocations.top
    if text.startswith(constants.PROGRAM_DATA_PREFIX) and decoders.has_program(program):
        decoded = decoders.decode(program, text[len(constants.PROGRAM_DATA_PREFIX) :])
        if decoded is not None:
            state.emit(decoded, LogStyle.MUTED)


def _process_line(
    state: ParserState,
    log: str,
    cluster: Cluster,
    name_resolver: ProgramNameResolver,
    decoders: DecoderRegistry,
) -> None:
    if log.startswith(constants.PROGRAM_LOG_PREFIX):
        _handle_program_log(state, log)
        return
    if log.startswith(constants.LOG_TRUNCATED_PREFIX):
        _handle_truncated(state)
        return

    invoke = LogPatterns.INVOKE_RE.search(log)
    if invoke:
        _handle_invoke(state, invoke.group(1), name_resolver, cluster)
    elif constants.SUCCESS_MARKER in log:
        _handle_success(state)
    elif constants.FAILED_MARKER in log:
        _handle_failed(state, log)
    else:
        _handle_other(state, log, decoders)


def _attribute_error(state: ParserState, program_error: ProgramError | None) -> None:
    if program_error is None:
        return

    # Some programs fail before logging anything, e.g. an upgrade from a
    # buffer account that does not exist
    if not state.instructions:
        state.open_instruction(None).failed = True

    last_index = len(state.instructions) - 1
    if program_error.index != last_index:
        logger.debug(
            "Error for instruction %d not attributed (last instruction is %d)",
            program_error.index,
            last_index,
        )
        return

    failed_ix = state.instructions[last_index]
    if failed_ix.failed:
        return
    failed_ix.failed = True
    failed_ix.logs.append(
        LogMessage(
            text=constants.RUNTIME_ERROR_TEMPLATE.format(message=program_error.message),
            prefix=build_prefix(1),
            style=LogStyle.WARNING,
        )
    )


def parse_program_logs(
    logs: list[str],
    error: Any = None,
    cluster: Cluster = Cluster.MAINNET_BETA,
    *,
    name_resolver: ProgramNameResolver | None = None,
    decoders: DecoderRegistry | None = None,
    classify_error: Callable[[Any], ProgramError | None] = get_transaction_instruction_error,
) -> list[InstructionLogs]:
    """Group a transaction's runtime logs by top-level instruction.

    Args:
        logs: Log lines in emission order (``meta.logMessages``).
        error: The transaction error (``meta.err``), or None.
        cluster: Network the transaction ran on; only used for naming programs.
        name_resolver: Names invoked programs. Defaults to the raw address.
        decoders: Event decoders for ``Program data:`` lines. Defaults to
            the built-in registry.
        classify_error: Maps *error* to the failing instruction.

    Returns:
        One InstructionLogs per top-level instruction, in execution order.
        Unrecognized lines are kept verbatim; this never raises on bad input.
    """
    resolver = name_resolver if name_resolver is not None else AddressNameResolver()
    registry = decoders if decoders is not None else default_registry()

    state = ParserState()
    for log in logs:
        _process_line(state, log, cluster, resolver, registry)

    program_error = classify_error(error) if error else None
    _attribute_error(state, program_error)

    logger.info(
        "Parsed %d log lines into %d instructions", len(logs), len(state.instructions)
    )
    return state.instructions
