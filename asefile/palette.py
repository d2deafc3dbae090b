# Palette chunks (0x2019), merged into one fixed-size color table

import logging

from asefile.document import PALETTE_SIZE, Color, Palette
from asefile.reader import Reader

logger = logging.getLogger(__name__)

HAS_NAME = 1


def read_palette_chunk(reader: Reader, palette: Palette):
    reader.u32()  # new palette size, the table is always PALETTE_SIZE
    first = reader.u32()
    last = reader.u32()
    reader.skip(8)
    logger.debug(f"Palette entries {first}-{last}")

    for index in range(first, last + 1):
        flags = reader.u16()
        stored = reader.padded(4)
        # Stored red and blue come out exchanged; swap them back
        color = Color(red=stored[2], green=stored[1], blue=stored[0], alpha=stored[3])
        if flags & HAS_NAME:
            reader.string()  # names are not kept

        if index < PALETTE_SIZE:
            palette.colors[index] = color
            palette.count = max(palette.count, index + 1)
        elif reader.at_eof():
            break
