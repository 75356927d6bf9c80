"""Registry of ``Program data:`` event decoders, keyed by program id."""

from __future__ import annotations

import base64
import binascii
import importlib
import logging

from pydantic import ValidationError

from .. import constants
from ._base import EventDecoder

logger = logging.getLogger(__name__)

# Lazy imports so decoders are only loaded when a registry is built
_DEFAULT_DECODERS: tuple[str, ...] = ("manifest.ManifestFillLogDecoder",)


class DecoderRegistry:
    """Holds the event decoders the log parser consults for ``Program data:`` lines."""

    def __init__(self, decoders: list[EventDecoder] | None = None):
        self._decoders: dict[str, list[EventDecoder]] = {}
        for decoder in decoders or []:
            self.register(decoder)

    def register(self, decoder: EventDecoder) -> None:
        """Add *decoder* for its program id.

        Raises ``ValueError`` if the decoder's discriminator has the wrong length.
        """
        if len(decoder.discriminator) != constants.DISCRIMINATOR_LENGTH:
            raise ValueError(
                f"Discriminator for {type(decoder).__name__} must be "
                f"{constants.DISCRIMINATOR_LENGTH} bytes, got {len(decoder.discriminator)}"
            )
        self._decoders.setdefault(decoder.program_id, []).append(decoder)

    def has_program(self, program_id: str | None) -> bool:
        return program_id in self._decoders

    def decode(self, program_id: str | None, payload: str) -> str | None:
        """Best-effort decode of a base64 ``Program data:`` payload.

        Returns the first matching decoder's rendering, or None when no
        decoder matches or decoding fails.
        """
        decoders = self._decoders.get(program_id or "", [])
        if not decoders:
            return None
        try:
            data = base64.b64decode(payload)
        except (binascii.Error, ValueError):
            logger.debug("Undecodable base64 payload from %s", program_id)
            return None

        for decoder in decoders:
            if not decoder.matches(data):
                continue
            try:
                return decoder.decode(data[constants.DISCRIMINATOR_LENGTH :])
            except (ValueError, ValidationError) as exc:
                logger.debug(
                    "%s failed on payload from %s: %s", type(decoder).__name__, program_id, exc
                )
        return None

    def __len__(self) -> int:
        return sum(len(decoders) for decoders in self._decoders.values())


def default_registry() -> DecoderRegistry:
    """Build a registry holding every built-in decoder."""
    registry = DecoderRegistry()
    for spec in _DEFAULT_DECODERS:
        module_name, class_name = spec.split(".")
        mod = importlib.import_module(f".{module_name}", package=__package__)
        registry.register(getattr(mod, class_name)())
    return registry


__all__ = [
    "DecoderRegistry",
    "EventDecoder",
    "default_registry",
]
