import os
import random

import pytest

from huffarch import FormatError, compress, decompress
from huffarch.archive import HEADER_SIZE, MAGIC, read_table
from huffarch.codec import (archive_name, compress_file, decompress_file,
                            restored_name)


def test_roundtrip_random_10kb():
    data = bytes(random.Random(42).getrandbits(8) for _ in range(10 * 1024))
    assert decompress(compress(data)) == data


def test_roundtrip_all_bytes_once():
    data = bytes(range(256))
    archive = compress(data)
    header, _ = read_table(archive)
    assert len(header.codes) == 256
    assert all(len(code) == 8 for code in header.codes.values())
    assert decompress(archive) == data


def test_roundtrip_skewed_text():
    data = b"This is a test of the Huffman archiver. " * 200 + b"\x00\xff\x80\x7f"
    archive = compress(data)
    assert len(archive) < len(data)
    assert decompress(archive) == data


def test_small_inputs():
    rng = random.Random(3)
    for n in (1, 2, 3, 7, 8, 9):
        data = bytes(rng.getrandbits(8) for _ in range(n))
        assert decompress(compress(data)) == data


def test_empty_input():
    archive = compress(b"")
    assert archive == MAGIC + b"\x00" * 6
    header, offset = read_table(archive)
    assert header.total == 0
    assert header.codes == {}
    assert offset == len(archive)
    assert decompress(archive) == b""


def test_single_symbol():
    archive = compress(b"aaaa")
    header, offset = read_table(archive)
    assert header.total == 4
    assert list(header.codes) == [ord("a")]
    assert len(header.codes[ord("a")]) >= 1
    assert archive[offset:] == b"\x00"
    assert decompress(archive) == b"aaaa"


def test_single_byte_repeated_large():
    data = b"A" * (1024 * 10)
    assert decompress(compress(data)) == data


def test_compress_is_deterministic():
    data = b"abcabcabd" * 31
    assert compress(data) == compress(data)


def test_known_archive_bytes():
    assert compress(b"aab") == MAGIC + b"\x00\x00\x00\x03\x00\x02" \
        + b"\x61\x01\x80\x62\x01\x00" + b"\xc0"


def test_code_lengths_within_bounds():
    # fibonacci weights give the deepest possible tree
    fib = [1, 1]
    while len(fib) < 20:
        fib.append(fib[-1] + fib[-2])
    data = b"".join(bytes([sym]) * count for sym, count in enumerate(fib))
    header, _ = read_table(compress(data))
    assert len(header.codes) <= 256
    assert max(len(c) for c in header.codes.values()) <= len(header.codes)
    assert decompress(compress(data)) == data


def test_truncated_payload_raises():
    archive = compress(b"This is a test" * 100)
    with pytest.raises(FormatError):
        decompress(archive[:-1])


def test_truncated_anywhere_raises():
    archive = compress(b"Hello World")
    for cut in range(len(archive)):
        with pytest.raises(FormatError):
            decompress(archive[:cut])


def test_trailing_garbage_raises():
    archive = compress(b"Hello World" * 50)
    with pytest.raises(FormatError):
        decompress(archive + b"\x00")


def test_corrupted_header_raises():
    archive = bytearray(compress(b"Hello World" * 50))
    archive[0] ^= 0xFF
    with pytest.raises(FormatError):
        decompress(bytes(archive))


def test_format_error_is_value_error():
    with pytest.raises(ValueError):
        decompress(b"nope")


def test_archive_name():
    assert archive_name("notes.txt") == "notesArch.txt"
    assert archive_name(os.path.join("dir", "data")) == os.path.join("dir", "dataArch")


def test_restored_name():
    assert restored_name("notesArch.txt") == "notes.txt"
    assert restored_name(archive_name("report.pdf")) == "report.pdf"
    assert restored_name("notes.txt") == "notes_restored.txt"
    assert restored_name("Arch.txt") == "Arch_restored.txt"


def test_file_roundtrip(tmp_path):
    src = tmp_path / "sample.txt"
    src.write_bytes(b"hello huffman " * 64)
    dst = tmp_path / "sampleArch.txt"
    out = tmp_path / "restored.txt"

    root, stats = compress_file(str(src), str(dst))
    assert root is not None
    assert stats["original_bytes"] == src.stat().st_size
    assert stats["compressed_bytes"] == dst.stat().st_size
    assert stats["unique_symbols"] == len(set(b"hello huffman "))
    assert 0 <= stats["pad_count"] <= 7
    assert stats["compression_ratio"] < 1
    assert stats["time_total"] >= 0

    dstats = decompress_file(str(dst), str(out))
    assert out.read_bytes() == src.read_bytes()
    assert dstats["restored_size"] == stats["original_bytes"]
    assert dstats["compressed_size"] == stats["compressed_bytes"]


def test_file_empty(tmp_path):
    src = tmp_path / "empty.bin"
    src.write_bytes(b"")
    dst = tmp_path / "emptyArch.bin"
    root, stats = compress_file(str(src), str(dst))
    assert root is None
    assert stats["compression_ratio"] is None
    assert dst.stat().st_size == HEADER_SIZE
    decompress_file(str(dst), str(tmp_path / "out.bin"))
    assert (tmp_path / "out.bin").read_bytes() == b""


def test_decompress_file_corrupt_writes_nothing(tmp_path):
    bad = tmp_path / "badArch.bin"
    bad.write_bytes(compress(b"some data here")[:-1])
    out = tmp_path / "out.bin"
    with pytest.raises(FormatError):
        decompress_file(str(bad), str(out))
    assert not out.exists()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        compress_file(str(tmp_path / "nope.txt"), str(tmp_path / "x"))
