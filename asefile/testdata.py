# Builders for synthetic Aseprite byte streams, used by the *_test.py modules

import struct
import zlib
from typing import Iterable, List, Optional, Sequence, Tuple

from asefile import decoder

_header_struct = struct.Struct("<IHHHHHIHIIB3xHBB92x")
_frame_struct = struct.Struct("<IHHH6x")
_chunk_struct = struct.Struct("<IH")


def string(text: str) -> bytes:
    data = text.encode()
    return struct.pack("<H", len(data)) + data


def chunk(chunk_type: int, body: bytes, *, size: Optional[int] = None) -> bytes:
    declared = _chunk_struct.size + len(body) if size is None else size
    return _chunk_struct.pack(declared, chunk_type) + body


def layer_chunk(
    name: str,
    *,
    level: int = 0,
    kind: int = 0,
    flags: int = 1 | 2,
    blend_mode: int = 0,
    opacity: int = 255,
) -> bytes:
    body = struct.pack("<HHHHHHB3x", flags, kind, level, 0, 0, blend_mode, opacity)
    return chunk(decoder.CHUNK_LAYER, body + string(name))


def _cel_header(layer: int, cel_type: int, x: int, y: int, opacity: int) -> bytes:
    return struct.pack("<HhhBH7x", layer, x, y, opacity, cel_type)


def raw_cel_chunk(
    layer: int,
    width: int,
    height: int,
    data: bytes,
    *,
    x: int = 0,
    y: int = 0,
    opacity: int = 255,
) -> bytes:
    body = _cel_header(layer, 0, x, y, opacity) + struct.pack("<HH", width, height)
    return chunk(decoder.CHUNK_CEL, body + data)


def linked_cel_chunk(layer: int, frame: int, *, x: int = 0, y: int = 0) -> bytes:
    body = _cel_header(layer, 1, x, y, 255) + struct.pack("<H", frame)
    return chunk(decoder.CHUNK_CEL, body)


def compressed_cel_chunk(
    layer: int,
    width: int,
    height: int,
    data: bytes,
    *,
    x: int = 0,
    y: int = 0,
    level: int = 6,
    stream: Optional[bytes] = None,
) -> bytes:
    # `stream` replaces the compressed data (e.g. with broken bytes)
    compressed = zlib.compress(data, level) if stream is None else stream
    body = _cel_header(layer, 2, x, y, 255) + struct.pack("<HH", width, height)
    return chunk(decoder.CHUNK_CEL, body + compressed)


def palette_chunk(
    first: int,
    colors: Sequence[Tuple[int, int, int, int]],
    *,
    names: Optional[Sequence[Optional[str]]] = None,
) -> bytes:
    # colors in stored byte order R, G, B, A
    last = first + len(colors) - 1
    body = struct.pack("<III8x", first + len(colors), first, last)
    for i, rgba in enumerate(colors):
        name = names[i] if names else None
        body += struct.pack("<H4B", 1 if name is not None else 0, *rgba)
        if name is not None:
            body += string(name)
    return chunk(decoder.CHUNK_PALETTE, body)


def tags_chunk(tags: Iterable[Tuple[int, int, int, str]]) -> bytes:
    tags = list(tags)
    body = struct.pack("<H8x", len(tags))
    for from_frame, to_frame, direction, name in tags:
        body += struct.pack("<hhB8x4x", from_frame, to_frame, direction)
        body += string(name)
    return chunk(decoder.CHUNK_TAGS, body)


def frame(
    chunks: Sequence[bytes],
    *,
    duration: int = 100,
    magic: int = decoder.FRAME_MAGIC,
    padding: bytes = b"",
) -> bytes:
    # `padding` is trailing data the frame size covers
    body = b"".join(chunks) + padding
    size = _frame_struct.size + len(body)
    return _frame_struct.pack(size, magic, len(chunks), duration) + body


def document(
    frames: List[bytes],
    *,
    width: int = 4,
    height: int = 4,
    depth: int = 32,
    num_colors: int = 0,
    transparent_index: int = 0,
    pixel_width: int = 1,
    pixel_height: int = 1,
    magic: int = decoder.FILE_MAGIC,
    num_frames: Optional[int] = None,
) -> bytes:
    body = b"".join(frames)
    header = _header_struct.pack(
        _header_struct.size + len(body),
        magic,
        len(frames) if num_frames is None else num_frames,
        width,
        height,
        depth,
        1,
        100,
        0,
        0,
        transparent_index,
        num_colors,
        pixel_width,
        pixel_height,
    )
    return header + body
