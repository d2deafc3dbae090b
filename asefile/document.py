# In-memory representation of a decoded Aseprite document

import enum
from typing import List, Optional, Union

import attr

PALETTE_SIZE = 256


class ColorDepth(enum.IntEnum):
    INDEXED = 8
    GRAYSCALE = 16
    RGBA = 32


class LayerKind(enum.IntEnum):
    IMAGE = 0
    GROUP = 1


class LayerFlags(enum.IntFlag):
    VISIBLE = 1
    EDITABLE = 2
    LOCK_MOVEMENT = 4
    BACKGROUND = 8
    PREFER_LINKED = 16
    COLLAPSED = 32
    REFERENCE = 64


class BlendMode(enum.IntEnum):
    NORMAL = 0
    MULTIPLY = 1
    SCREEN = 2
    OVERLAY = 3
    DARKEN = 4
    LIGHTEN = 5
    COLOR_DODGE = 6
    COLOR_BURN = 7
    HARD_LIGHT = 8
    SOFT_LIGHT = 9
    DIFFERENCE = 10
    EXCLUSION = 11
    HUE = 12
    SATURATION = 13
    COLOR = 14
    LUMINOSITY = 15
    ADDITION = 16
    SUBTRACT = 17
    DIVIDE = 18


class LoopDirection(enum.IntEnum):
    FORWARD = 0
    REVERSE = 1
    PING_PONG = 2


def bytes_per_pixel(depth: ColorDepth) -> int:
    return {
        ColorDepth.INDEXED: 1,
        ColorDepth.GRAYSCALE: 2,
        ColorDepth.RGBA: 4,
    }[depth]


@attr.frozen
class Header:
    file_size: int
    num_frames: int
    width: int
    height: int
    depth: ColorDepth
    flags: int = 0
    speed: int = 0  # deprecated, frames carry their own duration
    transparent_index: int = 0
    num_colors: int = 256
    pixel_width: int = 1
    pixel_height: int = 1


@attr.frozen
class Color:
    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 0

    def __iter__(self):
        return iter((self.red, self.green, self.blue, self.alpha))


@attr.define
class Palette:
    colors: List[Color] = attr.Factory(lambda: [Color()] * PALETTE_SIZE)
    count: int = 0  # entries written by palette chunks (highest index + 1)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]


@attr.define
class Layer:
    index: int
    name: str
    flags: LayerFlags
    kind: LayerKind
    child_level: int
    parent: int = -1
    blend_mode: BlendMode = BlendMode.NORMAL
    opacity: int = 255

    @property
    def visible(self) -> bool:
        return bool(self.flags & LayerFlags.VISIBLE)

    @property
    def is_group(self) -> bool:
        return self.kind == LayerKind.GROUP


def _size_repr(data: Optional[bytes]) -> str:
    return "None" if data is None else f"<{len(data)}b>"


@attr.frozen
class Pixels:
    data: Optional[bytes] = attr.ib(default=None, repr=_size_repr)


@attr.frozen
class Link:
    frame: int


@attr.define
class Cel:
    layer: int
    frame: int
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    opacity: int = 255
    payload: Union[Pixels, Link] = attr.Factory(Pixels)

    @property
    def is_linked(self) -> bool:
        return isinstance(self.payload, Link)

    @property
    def data(self) -> Optional[bytes]:
        return self.payload.data if isinstance(self.payload, Pixels) else None


@attr.define
class Frame:
    duration: int
    cels: List[Cel] = attr.Factory(list)

    def cel_for_layer(self, layer: int) -> Optional[Cel]:
        return next((c for c in self.cels if c.layer == layer), None)


@attr.define
class Tag:
    from_frame: int
    to_frame: int
    direction: LoopDirection
    name: str

    @property
    def frames(self) -> range:
        return range(self.from_frame, self.to_frame + 1)


@attr.define
class Document:
    header: Header
    palette: Palette = attr.Factory(Palette)
    layers: List[Layer] = attr.Factory(list)
    frames: List[Frame] = attr.Factory(list)
    tags: List[Tag] = attr.Factory(list)

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def depth(self) -> ColorDepth:
        return self.header.depth

    @property
    def bytes_per_pixel(self) -> int:
        return bytes_per_pixel(self.depth)

    def layer_by_name(self, name: str) -> Optional[Layer]:
        return next((l for l in self.layers if l.name == name), None)

    def tag_by_name(self, name: str) -> Optional[Tag]:
        return next((t for t in self.tags if t.name == name), None)

    def children(self, parent: int) -> List[Layer]:
        return [l for l in self.layers if l.parent == parent]

    def is_cel_visible(self, cel: Cel) -> bool:
        return self.layers[cel.layer].visible

    def linked_cel(self, cel: Cel) -> Optional[Cel]:
        # The cel itself if not linked, None for a dangling link
        if not isinstance(cel.payload, Link):
            return cel
        if not 0 <= cel.payload.frame < len(self.frames):
            return None
        return self.frames[cel.payload.frame].cel_for_layer(cel.layer)

    def close(self):
        self.layers.clear()
        self.frames.clear()
        self.tags.clear()
        self.palette = Palette()
