"""
Archive table section.

Layout (big-endian):

    MAGIC            4 bytes  b'HUFF'
    total            >I       bytes in the original input
    distinct         >H       number of entries that follow (0..256)
    entry * distinct:
        symbol       B
        code_length  B        1..255
        code bits    ceil(code_length / 8) bytes, MSB-first, zero-padded

Every variable-length field carries its own length, so no byte value is
reserved as a delimiter. The packed payload follows the last entry.
"""
import struct
from typing import Dict, NamedTuple, Tuple

from huffarch.errors import FormatError

MAGIC = b'HUFF'  # file signature
TOTAL_FMT = ">I"
DISTINCT_FMT = ">H"
ENTRY_FMT = "BB"

MAX_TOTAL = 0xFFFFFFFF
MAX_SYMBOLS = 256
MAX_CODE_LENGTH = 255

HEADER_SIZE = len(MAGIC) + struct.calcsize(TOTAL_FMT) + struct.calcsize(DISTINCT_FMT)


class ArchiveHeader(NamedTuple):
    total: int
    codes: Dict[int, str]


def write_table(total: int, codes: Dict[int, str]) -> bytes:
    if total > MAX_TOTAL:
        raise ValueError(f"Input of {total} bytes is too large for a {TOTAL_FMT} symbol count")
    if len(codes) > MAX_SYMBOLS:
        raise ValueError(f"{len(codes)} codes exceed the byte alphabet")

    out = bytearray(MAGIC)
    out += struct.pack(TOTAL_FMT, total)
    out += struct.pack(DISTINCT_FMT, len(codes))
    for sym in sorted(codes):
        code = codes[sym]
        if not 1 <= len(code) <= MAX_CODE_LENGTH:
            raise ValueError(f"Code length {len(code)} for symbol {sym} out of range")
        out += struct.pack(ENTRY_FMT, sym, len(code))
        out += code_to_bytes(code)
    return bytes(out)


def read_table(blob: bytes) -> Tuple[ArchiveHeader, int]:
    """Parse the table section; return the header and the payload offset."""
    if len(blob) < HEADER_SIZE:
        raise FormatError("Not a valid archive (too small)")
    if blob[:len(MAGIC)] != MAGIC:
        raise FormatError("Not an archive (magic mismatch)")

    cursor = len(MAGIC)
    total = struct.unpack_from(TOTAL_FMT, blob, cursor)[0]
    cursor += struct.calcsize(TOTAL_FMT)
    distinct = struct.unpack_from(DISTINCT_FMT, blob, cursor)[0]
    cursor += struct.calcsize(DISTINCT_FMT)

    if distinct > MAX_SYMBOLS:
        raise FormatError(f"Symbol count {distinct} exceeds {MAX_SYMBOLS}")
    if (total == 0) != (distinct == 0):
        raise FormatError(f"Inconsistent header: {total} symbols but {distinct} codes")

    codes: Dict[int, str] = {}
    entry_size = struct.calcsize(ENTRY_FMT)
    for i in range(distinct):
        if cursor + entry_size > len(blob):
            raise FormatError(f"Table truncated at entry {i}")
        sym, length = struct.unpack_from(ENTRY_FMT, blob, cursor)
        cursor += entry_size
        if length == 0:
            raise FormatError(f"Zero-length code for symbol {sym}")
        if sym in codes:
            raise FormatError(f"Symbol {sym} listed twice")
        nbytes = (length + 7) // 8
        if cursor + nbytes > len(blob):
            raise FormatError(f"Code bits for symbol {sym} truncated")
        codes[sym] = bytes_to_code(blob[cursor:cursor + nbytes], length)
        cursor += nbytes

    return ArchiveHeader(total, codes), cursor


def code_to_bytes(code: str) -> bytes:
    # left-align the bits so the pad zeros sit at the end
    extra = (8 - len(code) % 8) % 8
    return (int(code, 2) << extra).to_bytes((len(code) + 7) // 8, "big")


def bytes_to_code(raw: bytes, length: int) -> str:
    return "".join(f"{x:08b}" for x in raw)[:length]
