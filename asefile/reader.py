# Little-endian field reads on top of a ByteSource

import struct
from typing import Optional, Tuple

from asefile.sources import ByteSource

_u8 = struct.Struct("<B")
_u16 = struct.Struct("<H")
_s16 = struct.Struct("<h")
_u32 = struct.Struct("<I")

_PIECE_SIZE = 1 << 16


# Short reads never raise: `unpack` returns None, the typed helpers return
# zero and `short_reads` counts them.
class Reader:
    def __init__(self, source: ByteSource):
        self.source = source
        self.short_reads = 0

    def read_bytes(self, size: int) -> Optional[bytes]:
        data = self.source.read(size) if size > 0 else b""
        if len(data) != max(size, 0):
            self.short_reads += 1
            return None
        return data

    # Zero-fills whatever the source can't supply
    def padded(self, size: int) -> bytes:
        data = self.source.read(size) if size > 0 else b""
        if len(data) < size:
            self.short_reads += 1
            data += bytes(size - len(data))
        return data

    # Reads at most `size` bytes, in pieces so a bogus size never preallocates
    def up_to(self, size: int) -> bytes:
        data = bytearray()
        while len(data) < size:
            piece = self.source.read(min(size - len(data), _PIECE_SIZE))
            if not piece:
                self.short_reads += 1
                break
            data += piece
        return bytes(data)

    def unpack(self, st: struct.Struct) -> Optional[Tuple]:
        data = self.read_bytes(st.size)
        return None if data is None else st.unpack(data)

    def _int(self, st: struct.Struct) -> int:
        value = self.unpack(st)
        return value[0] if value else 0

    def u8(self) -> int:
        return self._int(_u8)

    def u16(self) -> int:
        return self._int(_u16)

    def s16(self) -> int:
        return self._int(_s16)

    def u32(self) -> int:
        return self._int(_u32)

    def string(self) -> str:
        size = self.u16()
        data = self.read_bytes(size)
        if data is None:
            return ""
        return data.decode("utf-8", errors="replace")

    def skip(self, size: int):
        self.source.skip(size)

    def seek(self, pos: int):
        self.source.seek(pos)

    def tell(self) -> int:
        return self.source.tell()

    def at_eof(self) -> bool:
        return self.source.at_eof()
