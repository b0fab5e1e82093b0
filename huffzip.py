"""
Command line front end for the Huffman compressor.

How to run:
  python huffzip.py compress original.txt compressed.huf --dot huffman_tree.dot
  python huffzip.py decompress compressed.huf decompressed.txt
  python huffzip.py inspect compressed.huf
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import codec
from dot_export import symbol_label, write_dot
from errors import HuffmanError, IoFailure
from freqtable import FrequencyTable
from huffman import HuffmanTree

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose > 1:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def cmd_compress(args) -> None:
    stats = codec.compress(args.input, args.output)
    if args.dot:
        try:
            with open(args.input, "rb") as f:
                tree = HuffmanTree(FrequencyTable.count(f.read()))
            write_dot(tree, args.dot)
        except OSError as e:
            raise IoFailure(f"cannot write {args.dot}: {e}") from e
    print(f"{args.input}: {stats.original_bytes} -> {stats.compressed_bytes} bytes ({stats.ratio * 100:.1f}%)")


def cmd_decompress(args) -> None:
    stats = codec.decompress(args.input, args.output)
    print(f"{args.input}: {stats.compressed_bytes} -> {stats.original_bytes} bytes")


def cmd_inspect(args) -> None:
    try:
        with open(args.input, "rb") as f:
            table = FrequencyTable.deserialize(f)
    except OSError as e:
        raise IoFailure(f"cannot read {args.input}: {e}") from e

    tree = HuffmanTree(table)
    codes = tree.codes()
    print(f"{'Symbol':<10} {'Weight':>10}  Code")
    print("-" * 40)
    for symbol in sorted(table, key=lambda s: (len(codes[s]), s)):
        print(f"{symbol_label(symbol):<10} {table[symbol]:>10}  {codes[symbol] or '-'}")
    print("-" * 40)
    print(f"{len(table)} symbols, {table.total_weight()} total weight, "
          f"avg code length {tree.average_code_length():.3f} bits")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffzip", description="Static Huffman file compressor")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    sub = ap.add_subparsers(dest="command")

    p = sub.add_parser("compress", help="Compress a file")
    p.add_argument("input", help="File to compress")
    p.add_argument("output", help="Compressed output path")
    p.add_argument("--dot", default=None, help="Also write the Huffman tree as a DOT file")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="Decompress a file")
    p.add_argument("input", help="Compressed file")
    p.add_argument("output", help="Decompressed output path")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("inspect", help="Show the header table and codes of a compressed file")
    p.add_argument("input", help="Compressed file")
    p.set_defaults(func=cmd_inspect)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not args.command:
        ap.print_help()
        return 2

    configure_logging(args.verbose, args.quiet)

    try:
        args.func(args)
    except HuffmanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
