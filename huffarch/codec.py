import os
import time
from typing import Optional, Dict, Tuple

from huffarch.archive import read_table, write_table
from huffarch.bitio import pack_payload, unpack_payload
from huffarch.tree import (Node, build_freq_map, build_tree, heap_from_freq,
                           make_codes, rebuild_tree)

ARCHIVE_MARKER = "Arch"
RESTORED_SUFFIX = "_restored"


# -------------------------
# Core: bytes <-> archive
# -------------------------
def compress(data: bytes) -> bytes:
    freq = build_freq_map(data)
    codes = make_codes(build_tree(heap_from_freq(freq)))
    payload, _ = pack_payload(data, codes)
    return write_table(len(data), codes) + payload


def decompress(archive: bytes) -> bytes:
    header, offset = read_table(archive)
    root = rebuild_tree(header.codes)
    return unpack_payload(archive[offset:], root, header.total)


# -------------------------
# Output file names
# -------------------------
def archive_name(path: str) -> str:
    # notes.txt -> notesArch.txt
    stem, ext = os.path.splitext(path)
    return stem + ARCHIVE_MARKER + ext


def restored_name(path: str) -> str:
    stem, ext = os.path.splitext(path)
    if stem.endswith(ARCHIVE_MARKER) and len(os.path.basename(stem)) > len(ARCHIVE_MARKER):
        return stem[:-len(ARCHIVE_MARKER)] + ext
    return stem + RESTORED_SUFFIX + ext


# -------------------------
# File compressor
# -------------------------
def read_file_bytes(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def compress_file(src: str, dst: str) -> Tuple[Optional[Node], Dict[str, object]]:
    """
    Compress `src` into `dst`. Returns (root, stats); root is None for an
    empty input.
    """
    t0 = time.perf_counter()
    raw = read_file_bytes(src)
    t_read = time.perf_counter()

    freq = build_freq_map(raw)
    root = build_tree(heap_from_freq(freq))
    t_tree = time.perf_counter()

    codes = make_codes(root)
    t_codes = time.perf_counter()

    table = write_table(len(raw), codes)
    payload, pad_count = pack_payload(raw, codes)
    t_pack = time.perf_counter()

    with open(dst, 'wb') as out:
        out.write(table)
        out.write(payload)
    t_write = time.perf_counter()

    original_bytes = len(raw)
    compressed_bytes = len(table) + len(payload)
    if original_bytes > 0:
        compression_ratio = compressed_bytes / original_bytes
        space_saved_percent = ((original_bytes - compressed_bytes) / original_bytes) * 100.0
    else:
        compression_ratio = None
        space_saved_percent = None

    stats = {
        "input": src,
        "output": dst,
        "original_bytes": original_bytes,
        "compressed_bytes": compressed_bytes,
        "table_bytes": len(table),
        "unique_symbols": len(codes),
        "pad_count": pad_count,
        "compression_ratio": compression_ratio,
        "space_saved_percent": space_saved_percent,
        "time_read": t_read - t0,
        "time_tree_build": t_tree - t_read,
        "time_codes": t_codes - t_tree,
        "time_pack": t_pack - t_codes,
        "time_write": t_write - t_pack,
        "time_total": t_write - t0,
    }
    return root, stats


# -------------------------
# File decompressor
# -------------------------
def decompress_file(src: str, dst: str) -> Dict[str, object]:
    t0 = time.perf_counter()
    raw = read_file_bytes(src)
    t_read = time.perf_counter()

    header, offset = read_table(raw)
    root = rebuild_tree(header.codes)
    t_tree = time.perf_counter()

    decoded = unpack_payload(raw[offset:], root, header.total)
    t_decode = time.perf_counter()

    # only write once the whole archive decoded cleanly
    with open(dst, 'wb') as f:
        f.write(decoded)
    t_write = time.perf_counter()

    return {
        "input_archive": src,
        "output": dst,
        "compressed_size": len(raw),
        "restored_size": len(decoded),
        "unique_symbols": len(header.codes),
        "time_read": t_read - t0,
        "time_tree": t_tree - t_read,
        "time_decode": t_decode - t_tree,
        "time_write": t_write - t_decode,
        "time_total": t_write - t0,
    }
