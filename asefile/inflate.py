# DEFLATE (RFC 1951) and zlib (RFC 1950) decompression for cel pixel data

import zlib
from typing import List, Optional, Sequence


class InflateError(Exception):
    pass


FAST_BITS = 9  # codes up to this length resolve with one table lookup
FAST_MASK = (1 << FAST_BITS) - 1
MAX_CODE_BITS = 15

_LENGTH_BASE = [
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31,
    35, 43, 51, 59, 67, 83, 99, 115, 131, 163, 195, 227, 258,
]  # fmt: skip
_LENGTH_EXTRA = [
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2,
    3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5, 0,
]  # fmt: skip
_DIST_BASE = [
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193,
    257, 385, 513, 769, 1025, 1537, 2049, 3073, 4097, 6145,
    8193, 12289, 16385, 24577,
]  # fmt: skip
_DIST_EXTRA = [
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6,
    7, 7, 8, 8, 9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
]  # fmt: skip

# Order in which code length code lengths are stored in a dynamic block
_CODE_LENGTH_ORDER = [16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15]


def _bit_reverse(value: int, bits: int) -> int:
    out = 0
    for _ in range(bits):
        out = (out << 1) | (value & 1)
        value >>= 1
    return out


# LSB-first. Refills past the end of input push zero bytes so decode can
# always peek 16 bits; consuming any of them raises InflateError.
class BitReader:
    def __init__(self, data: bytes, pos: int = 0):
        self.data = data
        self.pos = pos
        self.bits = 0
        self.num_bits = 0

    def _fill(self, need: int):
        data, pos, bits, num_bits = self.data, self.pos, self.bits, self.num_bits
        while num_bits < need:
            if pos < len(data):
                bits |= data[pos] << num_bits
            pos += 1
            num_bits += 8
        self.pos, self.bits, self.num_bits = pos, bits, num_bits

    def _check_overrun(self):
        if self.pos * 8 - self.num_bits > len(self.data) * 8:
            raise InflateError("Unexpected end of compressed data")

    def peek16(self) -> int:
        if self.num_bits < 16:
            self._fill(16)
        return self.bits & 0xFFFF

    def consume(self, count: int):
        self.bits >>= count
        self.num_bits -= count
        self._check_overrun()

    def receive(self, count: int) -> int:
        if count == 0:
            return 0
        if self.num_bits < count:
            self._fill(count)
        value = self.bits & ((1 << count) - 1)
        self.consume(count)
        return value

    def align_to_byte(self):
        self.consume(self.num_bits & 7)

    def take_bytes(self, count: int) -> bytes:
        assert self.num_bits % 8 == 0
        out = bytearray()
        while self.num_bits > 0 and len(out) < count:
            out.append(self.bits & 0xFF)
            self.consume(8)
        rest = count - len(out)
        if rest:
            chunk = self.data[self.pos : self.pos + rest]
            if len(chunk) < rest:
                raise InflateError("Stored block runs past end of data")
            self.pos += rest
            out += chunk
        return bytes(out)


# Codes up to FAST_BITS long resolve with one lookup in `fast`; longer ones
# compare against `max_code` (first code *not* of each length, left-aligned
# to 16 bits).
class HuffmanTable:
    def __init__(self, lengths: Sequence[int]):
        counts = [0] * (MAX_CODE_BITS + 2)
        for length in lengths:
            if not 0 <= length <= MAX_CODE_BITS:
                raise InflateError(f"Bad code length {length}")
            counts[length] += 1
        counts[0] = 0
        for bits in range(1, MAX_CODE_BITS + 1):
            if counts[bits] > (1 << bits):
                raise InflateError("Bad code length counts")

        self.fast: List[int] = [0] * (1 << FAST_BITS)
        self.first_code = [0] * (MAX_CODE_BITS + 1)
        self.first_symbol = [0] * (MAX_CODE_BITS + 1)
        self.max_code = [0] * (MAX_CODE_BITS + 2)
        next_code = [0] * (MAX_CODE_BITS + 1)

        code, index = 0, 0
        for bits in range(1, MAX_CODE_BITS + 1):
            next_code[bits] = code
            self.first_code[bits] = code
            self.first_symbol[bits] = index
            code += counts[bits]
            if counts[bits] and code - 1 >= (1 << bits):
                raise InflateError("Over-subscribed code lengths")
            self.max_code[bits] = code << (16 - bits)
            code <<= 1
            index += counts[bits]
        self.max_code[MAX_CODE_BITS + 1] = 0x10000  # sentinel

        self.symbols = [0] * index
        for symbol, bits in enumerate(lengths):
            if not bits:
                continue
            slot = next_code[bits] - self.first_code[bits] + self.first_symbol[bits]
            self.symbols[slot] = symbol
            if bits <= FAST_BITS:
                entry = (bits << 9) | symbol
                reversed_code = _bit_reverse(next_code[bits], bits)
                for j in range(reversed_code, 1 << FAST_BITS, 1 << bits):
                    self.fast[j] = entry
            next_code[bits] += 1

    def decode(self, reader: BitReader) -> int:
        bits = reader.peek16()
        entry = self.fast[bits & FAST_MASK]
        if entry:
            reader.consume(entry >> 9)
            return entry & 0x1FF

        key = _bit_reverse(bits, 16)
        for length in range(FAST_BITS + 1, MAX_CODE_BITS + 2):
            if key < self.max_code[length]:
                break
        if length > MAX_CODE_BITS:
            raise InflateError("Bad huffman code")
        slot = (
            (key >> (16 - length))
            - self.first_code[length]
            + self.first_symbol[length]
        )
        if not 0 <= slot < len(self.symbols):
            raise InflateError("Bad huffman code")
        reader.consume(length)
        return self.symbols[slot]


# Fixed-code tables (btype 1), built once at import and never mutated
FIXED_LITERAL_TABLE = HuffmanTable([8] * 144 + [9] * 112 + [7] * 24 + [8] * 8)
FIXED_DISTANCE_TABLE = HuffmanTable([5] * 32)


class _Inflater:
    def __init__(self, reader: BitReader, limit: Optional[int]):
        self.reader = reader
        self.limit = limit
        self.out = bytearray()

    def _reserve(self, count: int):
        if self.limit is not None and len(self.out) + count > self.limit:
            raise InflateError(f"Output exceeds {self.limit} bytes")

    def run(self):
        while True:
            final = self.reader.receive(1)
            block_type = self.reader.receive(2)
            if block_type == 0:
                self._stored_block()
            elif block_type == 1:
                self._huffman_block(FIXED_LITERAL_TABLE, FIXED_DISTANCE_TABLE)
            elif block_type == 2:
                self._huffman_block(*self._dynamic_tables())
            else:
                raise InflateError("Reserved block type")
            if final:
                return

    def _stored_block(self):
        self.reader.align_to_byte()
        header = self.reader.take_bytes(4)
        size = header[0] | (header[1] << 8)
        inverse = header[2] | (header[3] << 8)
        if inverse != size ^ 0xFFFF:
            raise InflateError("Stored block length check failed")
        self._reserve(size)
        self.out += self.reader.take_bytes(size)

    def _dynamic_tables(self):
        reader = self.reader
        num_literal = reader.receive(5) + 257
        num_distance = reader.receive(5) + 1
        num_code_length = reader.receive(4) + 4

        code_length_lengths = [0] * 19
        for i in range(num_code_length):
            code_length_lengths[_CODE_LENGTH_ORDER[i]] = reader.receive(3)
        code_length_table = HuffmanTable(code_length_lengths)

        total = num_literal + num_distance
        lengths: List[int] = []
        while len(lengths) < total:
            symbol = code_length_table.decode(reader)
            if symbol < 16:
                lengths.append(symbol)
            elif symbol == 16:
                if not lengths:
                    raise InflateError("Repeat code with no previous length")
                lengths.extend([lengths[-1]] * (reader.receive(2) + 3))
            elif symbol == 17:
                lengths.extend([0] * (reader.receive(3) + 3))
            elif symbol == 18:
                lengths.extend([0] * (reader.receive(7) + 11))
            else:
                raise InflateError("Bad code length symbol")
        if len(lengths) != total:
            raise InflateError("Code lengths overrun table size")

        return (
            HuffmanTable(lengths[:num_literal]),
            HuffmanTable(lengths[num_literal:]),
        )

    def _huffman_block(self, literals: HuffmanTable, distances: HuffmanTable):
        reader, out = self.reader, self.out
        while True:
            symbol = literals.decode(reader)
            if symbol < 256:
                self._reserve(1)
                out.append(symbol)
                continue
            if symbol == 256:
                return

            symbol -= 257
            if symbol >= len(_LENGTH_BASE):
                raise InflateError(f"Bad length symbol {symbol + 257}")
            length = _LENGTH_BASE[symbol] + reader.receive(_LENGTH_EXTRA[symbol])

            symbol = distances.decode(reader)
            if symbol >= len(_DIST_BASE):
                raise InflateError(f"Bad distance symbol {symbol}")
            distance = _DIST_BASE[symbol] + reader.receive(_DIST_EXTRA[symbol])
            if distance > len(out):
                raise InflateError(f"Distance {distance} before start of output")

            self._reserve(length)
            start = len(out) - distance
            if distance >= length:
                out += out[start : start + length]
            else:
                # Overlapping copy repeats the last `distance` bytes
                pattern = out[start:]
                repeats, remainder = divmod(length, distance)
                out += pattern * repeats + pattern[:remainder]


def inflate(data: bytes, *, limit: Optional[int] = None) -> bytes:
    inflater = _Inflater(BitReader(data), limit)
    inflater.run()
    return bytes(inflater.out)


def decompress(
    data: bytes, *, limit: Optional[int] = None, verify_checksum: bool = False
) -> bytes:
    # Output past `limit` is an error, shorter output is returned as is
    if len(data) < 2:
        raise InflateError("Missing zlib header")
    cmf, flg = data[0], data[1]
    if (cmf * 256 + flg) % 31 != 0:
        raise InflateError("Bad zlib header check bits")
    if flg & 0x20:
        raise InflateError("Preset dictionary not supported")
    if cmf & 0x0F != 8:
        raise InflateError(f"Compression method {cmf & 0x0F} is not DEFLATE")

    reader = BitReader(data, pos=2)
    inflater = _Inflater(reader, limit)
    inflater.run()
    out = bytes(inflater.out)

    if verify_checksum:
        reader.align_to_byte()
        expected = int.from_bytes(reader.take_bytes(4), "big")
        actual = zlib.adler32(out)
        if actual != expected:
            raise InflateError(f"Adler-32 {actual:08x} != {expected:08x}")

    return out
