#!/usr/bin/env python3
import argparse
import sys

from huffarch.codec import (archive_name, compress_file, decompress_file,
                            restored_name)
from huffarch.errors import FormatError


def request_file_name(prompt: str = "Please, enter file name: ") -> str:
    """Keep asking until the user names a file that can be opened."""
    while True:
        name = input(prompt).strip()
        try:
            with open(name, 'rb'):
                return name
        except OSError:
            print("The file can not be found. Check the correctness of the file name.")


def run_compress(src: str, dst: str):
    _, stats = compress_file(src, dst)
    print(f"Compressed {src} -> {dst}")
    print(f"Original Size: {stats['original_bytes']} bytes")
    print(f"Compressed Size: {stats['compressed_bytes']} bytes")
    print(f"Unique symbols: {stats['unique_symbols']}, padding bits: {stats['pad_count']}")
    if stats["space_saved_percent"] is None:
        print("Compression ratio: N/A (empty file)")
    else:
        print(f"Compression achieved: {stats['space_saved_percent']:.2f}% reduction.")


def run_decompress(src: str, dst: str):
    stats = decompress_file(src, dst)
    print(f"Decompressed {src} -> {dst}")
    print(f"Restored Size: {stats['restored_size']} bytes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="huffarch", description="Huffman file archiver")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (("compress", "pack a file into an archive"),
                            ("decompress", "restore a file from an archive")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file", nargs="?",
                       help="input file (prompted for when omitted)")
        p.add_argument("-o", "--output", help="output file name")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    src = args.file or request_file_name()
    try:
        if args.command == "compress":
            run_compress(src, args.output or archive_name(src))
        else:
            run_decompress(src, args.output or restored_name(src))
    except FormatError as e:
        print(f"Error: corrupt archive: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
