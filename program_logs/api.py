"""Composable API functions around the program log parser.

Each function corresponds to a CLI workflow but is callable
programmatically without argparse.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .cluster import Cluster
from .log_types import InstructionLogs
from .parser import parse_program_logs
from .run_types import InterpreterConfig

logger = logging.getLogger(__name__)


def parse_with_config(
    logs: list[str], error: Any = None, config: InterpreterConfig | None = None
) -> list[InstructionLogs]:
    """Parse *logs* using the collaborators grouped in *config*."""
    config = config or InterpreterConfig()
    return parse_program_logs(
        logs,
        error,
        config.cluster,
        name_resolver=config.name_resolver,
        decoders=config.decoders,
    )


def transaction_meta(tx: dict) -> dict:
    """Locate the ``meta`` object of a ``getTransaction`` payload.

    Accepts either the full JSON-RPC response (``{"result": {...}}``) or
    the bare transaction object. Returns an empty dict if there is none.
    """
    if "result" in tx and isinstance(tx["result"], dict):
        tx = tx["result"]
    meta = tx.get("meta")
    return meta if isinstance(meta, dict) else {}


def parse_transaction(
    tx: dict,
    cluster: Cluster = Cluster.MAINNET_BETA,
    config: InterpreterConfig | None = None,
    error: Any = None,
) -> list[InstructionLogs]:
    """Parse the logs and error of a ``getTransaction`` JSON payload.

    Args:
        tx: The decoded JSON-RPC payload.
        cluster: Network the transaction ran on; ignored if *config* is given.
        config: Explicit parser configuration.
        error: Transaction error to use instead of ``meta.err``.

    Returns:
        The per-instruction traces. A transaction without ``meta.logMessages``
        (logs disabled on the node) is treated as having no logs.
    """
    meta = transaction_meta(tx)
    logs = meta.get("logMessages") or []
    if error is None:
        error = meta.get("err")
    logger.info("Transaction has %d log lines, error=%s", len(logs), error)
    return parse_with_config(logs, error, config or InterpreterConfig(cluster=cluster))


def dump_traces(traces: list[InstructionLogs]) -> str:
    """Serialize *traces* as indented JSON."""
    return json.dumps([trace.to_dict() for trace in traces], indent=2)
