# Conversion of decoded cel pixels to PIL images (no compositing)

from typing import List, Optional

import PIL.Image  # type: ignore

from asefile.document import Cel, ColorDepth, Document, Palette

PIL_MODES = {
    ColorDepth.INDEXED: "P",
    ColorDepth.GRAYSCALE: "LA",
    ColorDepth.RGBA: "RGBA",
}


def palette_data(palette: Palette) -> List[int]:
    return [v for color in palette.colors for v in color]


def cel_image(doc: Document, cel: Cel) -> Optional[PIL.Image.Image]:
    source = doc.linked_cel(cel)
    if source is None or source.data is None:
        return None

    image = PIL.Image.frombytes(
        mode=PIL_MODES[doc.depth],
        size=(source.width, source.height),
        data=source.data,
    )
    if image.mode == "P":
        image.putpalette(palette_data(doc.palette), rawmode="RGBA")
        image.info["transparency"] = doc.header.transparent_index
    return image
