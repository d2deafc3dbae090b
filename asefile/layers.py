# Layer chunks (0x2004) and reconstruction of the layer group tree

import logging
from typing import List, Optional

import attr

from asefile.document import BlendMode, Layer, LayerFlags, LayerKind
from asefile.reader import Reader

logger = logging.getLogger(__name__)


@attr.frozen
class LayerRecord:
    flags: int
    kind: int
    child_level: int
    default_width: int
    default_height: int
    blend_mode: int
    opacity: int
    name: str


def read_layer_record(reader: Reader) -> LayerRecord:
    flags = reader.u16()
    kind = reader.u16()
    child_level = reader.u16()
    default_width = reader.u16()
    default_height = reader.u16()
    blend_mode = reader.u16()
    opacity = reader.u8()
    reader.skip(3)
    return LayerRecord(
        flags=flags,
        kind=kind,
        child_level=child_level,
        default_width=default_width,
        default_height=default_height,
        blend_mode=blend_mode,
        opacity=opacity,
        name=reader.string(),
    )


def resolve_parent(
    layers: List[Layer], previous: Optional[Layer], previous_level: int, level: int
) -> int:
    # Layers are stored depth-first with only a nesting level each
    if level == 0 or previous is None:
        return -1
    if level == previous_level:
        return previous.parent
    if level > previous_level:
        return previous.index

    parent = previous.parent
    if parent >= 0:
        for _ in range(previous_level - level):
            grandparent = layers[parent].parent
            if grandparent == -1:
                break
            parent = grandparent
    return parent


class LayerTreeBuilder:
    def __init__(self, layers: List[Layer]):
        self.layers = layers
        self.previous: Optional[Layer] = None
        self.previous_level = -1

    def add(self, record: LayerRecord) -> Optional[Layer]:
        if record.kind not in (LayerKind.IMAGE, LayerKind.GROUP):
            logger.debug(f'Dropping layer "{record.name}" of type {record.kind}')
            return None

        layer = Layer(
            index=len(self.layers),
            name=record.name,
            flags=LayerFlags(record.flags),
            kind=LayerKind(record.kind),
            child_level=record.child_level,
        )

        # Background layers have no meaningful blend mode or opacity
        if layer.kind == LayerKind.IMAGE and not (
            layer.flags & LayerFlags.BACKGROUND
        ):
            layer.blend_mode = _blend_mode(record.blend_mode)
            layer.opacity = record.opacity

        layer.parent = resolve_parent(
            self.layers, self.previous, self.previous_level, record.child_level
        )

        self.layers.append(layer)
        self.previous = layer
        self.previous_level = record.child_level
        logger.debug(
            f"L{layer.index}: {layer.kind.name.lower()} "
            f'"{layer.name}" level={layer.child_level} parent={layer.parent}'
        )
        return layer

    def read(self, reader: Reader) -> Optional[Layer]:
        return self.add(read_layer_record(reader))


def _blend_mode(value: int) -> BlendMode:
    try:
        return BlendMode(value)
    except ValueError:
        logger.debug(f"Unknown blend mode {value}, using normal")
        return BlendMode.NORMAL
