"""
Bit-granular writer/reader over binary streams.

Bits are packed MSB-first. The writer pads the final byte with zeros on close.
"""

from typing import BinaryIO, Iterator, Optional

CHUNK_SIZE = 64 * 1024


class BitWriter:
    def __init__(self, sink: BinaryIO):
        self.sink = sink
        self._out = bytearray()
        self._acc = 0
        self._acc_bits = 0
        self.bits_written = 0
        self.pad_bits = 0
        self.closed = False

    def write_bit(self, bit: int):
        self._acc = (self._acc << 1) | (1 if bit else 0)
        self._acc_bits += 1
        self.bits_written += 1
        if self._acc_bits == 8:
            self._out.append(self._acc)
            self._acc = 0
            self._acc_bits = 0
            if len(self._out) >= CHUNK_SIZE:
                self._drain()

    def write_code(self, code: str):
        for ch in code:
            self.write_bit(ch == '1')

    def _drain(self):
        self.sink.write(bytes(self._out))
        self._out.clear()

    def close(self):
        """Flush the partial last byte. The sink itself is left open."""
        if self.closed:
            return
        if self._acc_bits != 0:
            self.pad_bits = 8 - self._acc_bits
            self._out.append((self._acc << self.pad_bits) & 0xFF)
            self._acc = 0
            self._acc_bits = 0
        self._drain()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()


class BitReader:
    def __init__(self, source: BinaryIO, chunk_size: int = CHUNK_SIZE):
        self.source = source
        self.chunk_size = chunk_size
        self._buf = b''
        self._pos = 0
        self._bit = 8  # next bit index within the current byte, 8 = need a new byte
        self._byte = 0

    def read_bit(self) -> Optional[int]:
        """Next bit, or None once the source is exhausted."""
        if self._bit == 8:
            if self._pos >= len(self._buf):
                self._buf = self.source.read(self.chunk_size)
                self._pos = 0
                if not self._buf:
                    return None
            self._byte = self._buf[self._pos]
            self._pos += 1
            self._bit = 0

        bit = (self._byte >> (7 - self._bit)) & 1
        self._bit += 1
        return bit

    def __iter__(self) -> Iterator[int]:
        while True:
            bit = self.read_bit()
            if bit is None:
                return
            yield bit
