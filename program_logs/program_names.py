"""Program name resolution — pluggable lookup of human-readable program labels."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .cluster import Cluster


class ProgramNameResolver(ABC):
    """Strategy for turning a program address into a display name."""

    @abstractmethod
    def resolve(self, address: str, cluster: Cluster) -> str: ...


class AddressNameResolver(ProgramNameResolver):
    """Default resolver: every program is named by its address."""

    def resolve(self, address: str, cluster: Cluster) -> str:
        return address


class MappingNameResolver(ProgramNameResolver):
    """Resolves names from caller-supplied labels.

    ``labels`` maps address → name for every cluster. ``cluster_labels``
    holds per-cluster overrides, e.g. for programs deployed only on devnet.
    Unknown addresses fall back to the address itself.
    """

    def __init__(
        self,
        labels: dict[str, str] | None = None,
        cluster_labels: dict[Cluster, dict[str, str]] | None = None,
    ):
        self._labels = dict(labels or {})
        self._cluster_labels = {
            cluster: dict(names) for cluster, names in (cluster_labels or {}).items()
        }

    def resolve(self, address: str, cluster: Cluster) -> str:
        per_cluster = self._cluster_labels.get(cluster, {})
        if address in per_cluster:
            return per_cluster[address]
        return self._labels.get(address, address)
