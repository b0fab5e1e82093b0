"""
Compress / decompress pipelines.

Compressed layout: FrequencyTable header (see freqtable) followed by the
bit-packed codes of every input byte and then of EOF, zero padded to a byte.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import BinaryIO, Callable

from bitio import BitReader, BitWriter
from errors import IoFailure, TruncatedPayload
from freqtable import EOF, HEADER_ROW, FrequencyTable
from huffman import HuffmanDecoder, HuffmanTree

logger = logging.getLogger(__name__)

FLUSH_SIZE = 64 * 1024


@dataclass
class CodecStats:
    original_bytes: int
    compressed_bytes: int
    header_bytes: int
    pad_bits: int
    unique_symbols: int  # including EOF

    @property
    def payload_bytes(self) -> int:
        return self.compressed_bytes - self.header_bytes

    @property
    def ratio(self) -> float:
        return self.compressed_bytes / max(1, self.original_bytes)


def compress_stream(src: BinaryIO, dst: BinaryIO) -> CodecStats:
    data = src.read()

    table = FrequencyTable.count(data)
    tree = HuffmanTree(table)
    logger.debug("built tree: %d symbols, depth %d", len(tree), tree.depth())

    header = table.serialize()
    dst.write(header)

    code_map = {symbol: tree.code_for(symbol) for symbol in table}
    writer = BitWriter(dst)
    for b in data:
        writer.write_code(code_map[b])
    writer.write_code(code_map[EOF])
    writer.close()

    return CodecStats(
        original_bytes=len(data),
        compressed_bytes=len(header) + (writer.bits_written + writer.pad_bits) // 8,
        header_bytes=len(header),
        pad_bits=writer.pad_bits,
        unique_symbols=len(table),
    )


def decompress_stream(src: BinaryIO, dst: BinaryIO) -> CodecStats:
    table = FrequencyTable.deserialize(src)
    tree = HuffmanTree(table)
    logger.debug("rebuilt tree: %d symbols, depth %d", len(tree), tree.depth())

    header_bytes = (len(table) + 1) * HEADER_ROW.size
    reader = BitReader(src)
    out = bytearray()
    written = 0
    bits_read = 0

    # a lone leaf can only be EOF (deserialize guarantees it is present)
    if tree.root_symbol() is None:
        decoder = HuffmanDecoder(tree)
        while True:
            bit = reader.read_bit()
            if bit is None:
                raise TruncatedPayload(
                    f"payload ended after {bits_read} bits before the end-of-stream code"
                )
            bits_read += 1

            symbol = decoder.step(bit)
            if symbol is None:
                continue
            if symbol == EOF:
                break

            out.append(symbol)
            if len(out) >= FLUSH_SIZE:
                dst.write(out)
                written += len(out)
                out.clear()

    dst.write(out)
    written += len(out)

    return CodecStats(
        original_bytes=written,
        compressed_bytes=header_bytes + (bits_read + 7) // 8,
        header_bytes=header_bytes,
        pad_bits=(8 - bits_read % 8) % 8,
        unique_symbols=len(table),
    )


def compress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    compress_stream(io.BytesIO(data), out)
    return out.getvalue()


def decompress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    decompress_stream(io.BytesIO(data), out)
    return out.getvalue()


def _run_file_op(
    op: Callable[[BinaryIO, BinaryIO], CodecStats], input_path, output_path
) -> CodecStats:
    """Run ``op`` into a temp file beside ``output_path`` and move it into place on success."""
    out_dir = os.path.dirname(os.path.abspath(output_path))
    tmp_path = None
    try:
        with open(input_path, 'rb') as src:
            with tempfile.NamedTemporaryFile(
                'wb', dir=out_dir, prefix='.huff-', suffix='.tmp', delete=False
            ) as dst:
                tmp_path = dst.name
                stats = op(src, dst)
        os.replace(tmp_path, output_path)
        tmp_path = None
    except OSError as e:
        raise IoFailure(f"{input_path} -> {output_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
    return stats


def compress(input_path, output_path) -> CodecStats:
    stats = _run_file_op(compress_stream, input_path, output_path)
    logger.info(
        "compressed %s: %d -> %d bytes (%.1f%%)",
        input_path, stats.original_bytes, stats.compressed_bytes, stats.ratio * 100,
    )
    return stats


def decompress(input_path, output_path) -> CodecStats:
    stats = _run_file_op(decompress_stream, input_path, output_path)
    logger.info(
        "decompressed %s: %d -> %d bytes",
        input_path, stats.compressed_bytes, stats.original_bytes,
    )
    return stats
