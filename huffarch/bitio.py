from typing import Dict, Optional, Tuple

from huffarch.errors import FormatError
from huffarch.tree import Node


class BitWriter:
    """Collects bits MSB-first and flushes every full byte."""

    def __init__(self):
        self.out = bytearray()
        self.buffer = 0
        self.bit_count = 0

    def write_bits(self, value: int, count: int):
        # value holds `count` bits, most significant first
        self.buffer = (self.buffer << count) | value
        self.bit_count += count
        while self.bit_count >= 8:
            self.bit_count -= 8
            self.out.append((self.buffer >> self.bit_count) & 0xFF)
        self.buffer &= (1 << self.bit_count) - 1

    def write_code(self, code: str):
        self.write_bits(int(code, 2), len(code))

    def finish(self) -> Tuple[bytes, int]:
        """Zero-pad the last partial byte; return (data, pad_count)."""
        pad_count = 0
        if self.bit_count > 0:
            pad_count = 8 - self.bit_count
            self.out.append((self.buffer << pad_count) & 0xFF)
            self.buffer = 0
            self.bit_count = 0
        return bytes(self.out), pad_count


class BitReader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0          # index of the byte being read
        self.bit = 0          # bits already taken from data[pos]

    def read_bit(self) -> int:
        if self.pos >= len(self.data):
            raise FormatError("Unexpected end of bit stream")
        b = (self.data[self.pos] >> (7 - self.bit)) & 1
        self.bit += 1
        if self.bit == 8:
            self.bit = 0
            self.pos += 1
        return b

    def bytes_touched(self) -> int:
        # bytes consumed so far, counting a partly read one
        return self.pos + (1 if self.bit else 0)


# ----------------------------------------------
# Payload: bytes <-> packed Huffman codes
# ----------------------------------------------
def pack_payload(data: bytes, codes: Dict[int, str]) -> Tuple[bytes, int]:
    table = {sym: (int(code, 2), len(code)) for sym, code in codes.items()}
    w = BitWriter()
    for b in data:
        value, count = table[b]
        w.write_bits(value, count)
    return w.finish()


def unpack_payload(payload: bytes, root: Optional[Node], total: int) -> bytes:
    """
    Decode exactly `total` symbols by walking the tree one bit at a time.

    Decoding stops as soon as the counter hits zero, so the zero padding in
    the last byte is never walked. Running out of bits first, or having whole
    bytes left over afterwards, means the payload doesn't match the header.
    """
    if total == 0:
        if payload:
            raise FormatError("Payload present in an archive with no symbols")
        return b""
    if root is None:
        raise FormatError("Archive has symbols but no code table")

    out = bytearray()
    reader = BitReader(payload)
    remaining = total
    node = root
    while remaining:
        bit = reader.read_bit()
        node = node.left if bit == 0 else node.right
        if node is None:
            raise FormatError("Corrupt bitstream (walked to None)")
        if node.sym is not None:
            out.append(node.sym)
            remaining -= 1
            node = root

    if reader.bytes_touched() != len(payload):
        raise FormatError(
            f"Trailing data: {len(payload) - reader.bytes_touched()} unused payload bytes")
    return bytes(out)
