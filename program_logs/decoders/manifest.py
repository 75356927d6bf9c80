"""Manifest DEX fill log decoder."""

from __future__ import annotations

import json
import struct

import base58
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .. import constants
from ._base import EventDecoder

# market, maker, taker, price (u128), base atoms, quote atoms, taker_is_buy, padding
_FILL_LOG_LAYOUT = struct.Struct("<32s32s32s16sQQ?15s")


class QuoteAtomsPerBaseAtom(BaseModel):
    inner: int


class BaseAtoms(BaseModel):
    inner: int


class QuoteAtoms(BaseModel):
    inner: int


class FillLog(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    market: str
    maker: str
    taker: str
    price: QuoteAtomsPerBaseAtom
    base_atoms: BaseAtoms
    quote_atoms: QuoteAtoms
    taker_is_buy: bool
    padding: bytes = b""

    @classmethod
    def deserialize(cls, payload: bytes) -> FillLog:
        if len(payload) < _FILL_LOG_LAYOUT.size:
            raise ValueError(
                f"FillLog needs {_FILL_LOG_LAYOUT.size} bytes, got {len(payload)}"
            )
        market, maker, taker, price, base, quote, taker_is_buy, padding = (
            _FILL_LOG_LAYOUT.unpack_from(payload)
        )
        return cls(
            market=_pubkey(market),
            maker=_pubkey(maker),
            taker=_pubkey(taker),
            price=QuoteAtomsPerBaseAtom(inner=int.from_bytes(price, "little")),
            base_atoms=BaseAtoms(inner=base),
            quote_atoms=QuoteAtoms(inner=quote),
            taker_is_buy=taker_is_buy,
            padding=padding,
        )

    def pretty(self) -> dict:
        """Display form: wrapped integers flattened, padding dropped."""
        d = self.model_dump(by_alias=True, exclude={"padding"})
        for key in ("price", "baseAtoms", "quoteAtoms"):
            d[key] = d[key]["inner"]
        return d


def _pubkey(raw: bytes) -> str:
    return base58.b58encode(raw).decode("ascii")


class ManifestFillLogDecoder(EventDecoder):
    program_id = constants.MANIFEST_PROGRAM_ID
    discriminator = constants.MANIFEST_FILL_LOG_DISCRIMINATOR

    def decode(self, payload: bytes) -> str:
        fill = FillLog.deserialize(payload)
        return constants.MANIFEST_FILL_LOG_TITLE + json.dumps(fill.pretty(), indent=2)
