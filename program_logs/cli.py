"""Command-line entry point: group a transaction's program logs by instruction."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .api import dump_traces, parse_transaction
from .cluster import Cluster
from .log_stats import summarize_traces
from .parser import parse_program_logs

DEMO_LOGS = [
    "Program ComputeBudget111111111111111111111111111111 invoke [1]",
    "Program ComputeBudget111111111111111111111111111111 success",
    "Program TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA invoke [1]",
    "Program log: Instruction: Transfer",
    "Program TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA consumed 4645 of 200000 compute units",
    "Program TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA success",
]


def _load_input(path: str) -> tuple[list[str], dict | None]:
    """Read *path* as a JSON list of log lines, a getTransaction payload, or plain text.

    Returns (logs, transaction) where transaction is only set for a JSON
    object payload.
    """
    with open(path) as f:
        raw = f.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return raw.splitlines(), None
    if isinstance(data, list):
        return [str(line) for line in data], None
    if isinstance(data, dict):
        return [], data
    raise ValueError(f"Unsupported JSON input in {path}: expected a list or an object")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Group Solana program logs by top-level instruction"
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="JSON list of log lines, getTransaction JSON, or a text file with one log per line",
    )
    parser.add_argument(
        "--cluster",
        "-c",
        default=Cluster.MAINNET_BETA.value,
        choices=[c.value for c in Cluster],
        help="Cluster the transaction ran on (default: mainnet-beta)",
    )
    parser.add_argument(
        "--error",
        "-e",
        default=None,
        help='Transaction error as JSON (overrides meta.err of a transaction file), e.g. \'{"InstructionError": [0, "GenericError"]}\'',
    )
    parser.add_argument(
        "--stats", action="store_true", help="Print summary statistics instead of traces"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable INFO-level logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    cluster = Cluster.from_name(args.cluster)

    try:
        error = json.loads(args.error) if args.error else None
    except json.JSONDecodeError as exc:
        print(f"Invalid --error JSON: {exc}", file=sys.stderr)
        return 1

    if not args.file:
        print("No file provided. Using built-in demo logs.\n", file=sys.stderr)
        traces = parse_program_logs(DEMO_LOGS, error, cluster)
    else:
        try:
            logs, transaction = _load_input(args.file)
        except (OSError, ValueError) as exc:
            print(f"Could not read {args.file}: {exc}", file=sys.stderr)
            return 1
        if transaction is not None:
            traces = parse_transaction(transaction, cluster, error=error)
        else:
            traces = parse_program_logs(logs, error, cluster)

    if args.stats:
        print(json.dumps(summarize_traces(traces), indent=2))
    else:
        print(dump_traces(traces))
    return 0


if __name__ == "__main__":
    sys.exit(main())
