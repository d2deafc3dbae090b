# Byte sources the decoder reads from (memory, file object, callbacks)

import io
from typing import IO, Callable, Protocol


class ByteSource(Protocol):
    def read(self, size: int) -> bytes:
        ...

    def skip(self, size: int) -> None:
        ...

    def seek(self, pos: int) -> None:
        ...

    def tell(self) -> int:
        ...

    def at_eof(self) -> bool:
        ...


class MemorySource:
    def __init__(self, data: bytes):
        self._data = memoryview(data)
        self._pos = 0

    def read(self, size: int) -> bytes:
        start = min(self._pos, len(self._data))
        out = self._data[start : start + max(size, 0)].tobytes()
        self._pos = start + len(out)
        return out

    def skip(self, size: int):
        self._pos = min(self._pos + max(size, 0), len(self._data))

    def seek(self, pos: int):
        self._pos = max(pos, 0)

    def tell(self) -> int:
        return self._pos

    def at_eof(self) -> bool:
        return self._pos >= len(self._data)


# Seekable binary file object, left just past the last read
class FileSource:
    def __init__(self, fp: IO[bytes]):
        self._fp = fp

    def read(self, size: int) -> bytes:
        return self._fp.read(max(size, 0))

    def skip(self, size: int):
        self._fp.seek(size, io.SEEK_CUR)

    def seek(self, pos: int):
        self._fp.seek(pos, io.SEEK_SET)

    def tell(self) -> int:
        return self._fp.tell()

    def at_eof(self) -> bool:
        here = self._fp.tell()
        if self._fp.read(1):
            self._fp.seek(here, io.SEEK_SET)
            return False
        return True


class CallbackSource:
    def __init__(
        self,
        *,
        read: Callable[[int], bytes],
        skip: Callable[[int], None],
        seek: Callable[[int], None],
        tell: Callable[[], int],
        at_eof: Callable[[], bool],
    ):
        self.read = read
        self.skip = skip
        self.seek = seek
        self.tell = tell
        self.at_eof = at_eof
