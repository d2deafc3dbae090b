# Cel chunks (0x2005): raw, linked and zlib-compressed pixel data

import logging
from typing import Optional

from asefile import inflate
from asefile.config import DecoderOptions
from asefile.document import Cel, Document, LayerKind, Link, Pixels
from asefile.reader import Reader

logger = logging.getLogger(__name__)

RAW_CEL = 0
LINKED_CEL = 1
COMPRESSED_CEL = 2


def read_cel_chunk(
    reader: Reader,
    doc: Document,
    *,
    frame_index: int,
    chunk_end: int,
    options: DecoderOptions,
) -> Optional[Cel]:
    layer_index = reader.u16()
    x = reader.s16()
    y = reader.s16()
    opacity = reader.u8()
    cel_type = reader.u16()
    reader.skip(7)

    if not 0 <= layer_index < len(doc.layers):
        logger.warning(f"F{frame_index}: Cel for missing layer L{layer_index}")
        return None
    if doc.layers[layer_index].kind != LayerKind.IMAGE:
        logger.warning(
            f"F{frame_index}: Cel for L{layer_index}"
            f' ("{doc.layers[layer_index].name}") which is not an image layer'
        )
        return None

    cel = Cel(layer=layer_index, frame=frame_index, x=x, y=y, opacity=opacity)

    if cel_type == RAW_CEL:
        cel.width = reader.u16()
        cel.height = reader.u16()
        size = cel.width * cel.height * doc.bytes_per_pixel
        if not size:
            logger.debug(f"F{frame_index}: L{layer_index} cel has no area")
        cel.payload = Pixels(reader.padded(size) if size else None)

    elif cel_type == LINKED_CEL:
        cel.payload = Link(frame=reader.u16())

    elif cel_type == COMPRESSED_CEL:
        cel.width = reader.u16()
        cel.height = reader.u16()
        size = cel.width * cel.height * doc.bytes_per_pixel
        if size:
            # No stored length, the stream runs to the end of the chunk
            compressed = reader.up_to(chunk_end - reader.tell())
            cel.payload = Pixels(_decompress(compressed, size, cel, options))
        else:
            logger.debug(f"F{frame_index}: L{layer_index} cel has no area")

    else:
        logger.debug(f"F{frame_index}: L{layer_index} cel type {cel_type} ignored")

    return cel


def _decompress(
    compressed: bytes, size: int, cel: Cel, options: DecoderOptions
) -> Optional[bytes]:
    where = f"F{cel.frame}: L{cel.layer}"
    try:
        data = inflate.decompress(
            compressed, limit=size, verify_checksum=options.verify_checksum
        )
    except inflate.InflateError as exc:
        logger.warning(f"{where} compressed cel failed: {exc}")
        return None

    if len(data) < size:
        if not options.pad_short_cels:
            logger.warning(f"{where} compressed cel short ({len(data)}/{size}b)")
            return None
        logger.debug(f"{where} compressed cel short ({len(data)}/{size}b), padding")
        data += bytes(size - len(data))

    return data
