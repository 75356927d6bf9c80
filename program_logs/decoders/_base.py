"""Base class for program event decoders."""

from __future__ import annotations

from abc import ABC, abstractmethod


class EventDecoder(ABC):
    """Decodes one binary event type emitted by one program via ``Program data:``.

    Subclasses set ``program_id`` and an 8-byte ``discriminator`` and
    implement ``decode`` for the bytes that follow the discriminator.
    """

    program_id: str = ""
    discriminator: bytes = b""

    def matches(self, data: bytes) -> bool:
        return data[: len(self.discriminator)] == self.discriminator

    @abstractmethod
    def decode(self, payload: bytes) -> str:
        """Render *payload* (discriminator stripped) as display text.

        Raises ``ValueError`` if the payload does not fit the record layout.
        """
        ...
