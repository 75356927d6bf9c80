"""Parser configuration types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from .cluster import Cluster
from .decoders import DecoderRegistry, default_registry
from .program_names import AddressNameResolver, ProgramNameResolver


@dataclass(frozen=True)
class ProgramError:
    """An execution error attributed to one top-level instruction."""

    index: int
    message: str


@dataclass(frozen=True)
class InterpreterConfig:
    """Groups the collaborators handed to the log parser."""

    cluster: Cluster = Cluster.MAINNET_BETA
    name_resolver: ProgramNameResolver = field(default_factory=AddressNameResolver)
    decoders: DecoderRegistry = field(default_factory=default_registry)
