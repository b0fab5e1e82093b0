"""
Frequency table: symbol -> weight counts, plus the header codec

Header rows are big-endian (uint16 symbol, uint32 weight) and the list is
closed by a (0, 0) row. Symbol 256 is the end-of-stream marker, so every
byte value 0..255 stays an ordinary symbol.
"""

from __future__ import annotations

import io
import struct
from collections import Counter
from typing import BinaryIO

from errors import MalformedHeader

EOF = 256  # end-of-stream sentinel, never a real byte
MAX_SYMBOL = EOF
MAX_WEIGHT = 0xFFFFFFFF

HEADER_ROW = struct.Struct(">HI")


class FrequencyTable(dict):
    """Mapping of SymbolId -> weight (occurrence count)."""

    @classmethod
    def count(cls, data: bytes) -> "FrequencyTable":
        table = cls(Counter(data))
        table[EOF] = 1  # always present, even for empty input
        return table

    def serialize(self) -> bytes:
        out = bytearray()
        for symbol in sorted(self):  # sorted so the header is deterministic
            weight = self[symbol]
            if not 0 <= symbol <= MAX_SYMBOL:
                raise ValueError(f"symbol {symbol} out of range")
            if not 0 < weight <= MAX_WEIGHT:
                raise ValueError(f"weight {weight} for symbol {symbol} does not fit in uint32")
            out += HEADER_ROW.pack(symbol, weight)

        out += HEADER_ROW.pack(0, 0)  # terminator
        return bytes(out)

    @classmethod
    def deserialize(cls, stream: BinaryIO) -> "FrequencyTable":
        table = cls()
        while True:
            row = stream.read(HEADER_ROW.size)
            if len(row) < HEADER_ROW.size:
                raise MalformedHeader("header ended before terminator row")

            symbol, weight = HEADER_ROW.unpack(row)
            if weight == 0:
                break
            if symbol > MAX_SYMBOL:
                raise MalformedHeader(f"symbol {symbol} out of range")
            if symbol in table:
                raise MalformedHeader(f"duplicate symbol {symbol} in header")
            table[symbol] = weight

        if EOF not in table:
            raise MalformedHeader("header has no end-of-stream entry")
        return table

    @classmethod
    def from_bytes(cls, data: bytes) -> "FrequencyTable":
        return cls.deserialize(io.BytesIO(data))

    def total_weight(self) -> int:
        return sum(self.values())
