"""Solana cluster identifiers."""

from __future__ import annotations

from enum import Enum


class Cluster(Enum):
    """Network the transaction was executed on."""

    MAINNET_BETA = "mainnet-beta"
    TESTNET = "testnet"
    DEVNET = "devnet"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: str) -> Cluster:
        """Look up a cluster by its value (``"devnet"``) or member name (``"DEVNET"``).

        Raises ``ValueError`` for an unknown name.
        """
        for cluster in cls:
            if name in (cluster.value, cluster.name):
                return cluster
        raise ValueError(f"Unknown cluster: {name}")
