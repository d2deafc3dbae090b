from typing import List

from asefile import decoder, testdata
from asefile.document import BlendMode, Layer, LayerFlags, LayerKind
from asefile.layers import LayerRecord, LayerTreeBuilder


def _record(level: int, kind: int = 0, name: str = "", **kwargs) -> LayerRecord:
    fields = dict(
        flags=1,
        kind=kind,
        child_level=level,
        default_width=0,
        default_height=0,
        blend_mode=0,
        opacity=255,
        name=name,
    )
    fields.update(kwargs)
    return LayerRecord(**fields)  # type: ignore


def _parents(levels: List[int], kinds: List[int]) -> List[int]:
    layers: List[Layer] = []
    builder = LayerTreeBuilder(layers)
    for level, kind in zip(levels, kinds):
        builder.add(_record(level, kind))
    return [layer.parent for layer in layers]


def test_siblings_and_children():
    # G0 { G1 {}, G2 { I3 }, I4 }, I5
    assert _parents([0, 1, 1, 2, 1, 0], [1, 1, 1, 0, 0, 0]) == [-1, 0, 0, 2, 0, -1]


def test_walk_up_several_levels():
    # G0 { G1 { G2 { I3 } }, I4 }
    levels = [0, 1, 2, 3, 1]
    assert _parents(levels, [1, 1, 1, 0, 0]) == [-1, 0, 1, 2, 0]

    # G0 { G1 { G2 { I3 }, I4 } }
    levels = [0, 1, 2, 3, 2]
    assert _parents(levels, [1, 1, 1, 0, 0]) == [-1, 0, 1, 2, 1]


def test_walk_up_writes_parent():
    # without the walk result the level-1 layer after a level-3 one would
    # keep the default root parent
    parents = _parents([0, 1, 2, 3, 1], [1, 1, 1, 0, 0])
    assert parents[-1] == 0


def test_flat_layers_are_all_root():
    assert _parents([0, 0, 0], [0, 0, 0]) == [-1, -1, -1]


def test_first_layer_nested_has_root_parent():
    assert _parents([1, 1], [0, 0]) == [-1, -1]


def test_unknown_kinds_are_dropped():
    layers: List[Layer] = []
    builder = LayerTreeBuilder(layers)
    assert builder.add(_record(0, kind=1, name="group"))
    assert builder.add(_record(1, kind=2, name="tilemap")) is None
    assert builder.add(_record(1, kind=0, name="image"))
    assert [l.name for l in layers] == ["group", "image"]
    assert [l.index for l in layers] == [0, 1]
    assert layers[1].parent == 0


def test_background_layers_ignore_blending():
    layers: List[Layer] = []
    builder = LayerTreeBuilder(layers)
    builder.add(_record(0, name="bg", flags=1 | 8, blend_mode=2, opacity=10))
    builder.add(_record(0, name="top", blend_mode=2, opacity=10))
    builder.add(_record(0, name="odd", blend_mode=99, opacity=10))

    assert layers[0].flags & LayerFlags.BACKGROUND
    assert layers[0].blend_mode == BlendMode.NORMAL
    assert layers[0].opacity == 255
    assert layers[1].blend_mode == BlendMode.SCREEN
    assert layers[1].opacity == 10
    assert layers[2].blend_mode == BlendMode.NORMAL


def test_layers_from_file():
    data = testdata.document(
        [
            testdata.frame(
                [
                    testdata.layer_chunk("Body", kind=1),
                    testdata.layer_chunk("Arm", level=1, flags=0),
                    testdata.layer_chunk("Leg", level=1, blend_mode=1, opacity=128),
                    testdata.layer_chunk("Hat"),
                ]
            )
        ]
    )
    doc = decoder.load_bytes(data)
    assert [(l.name, l.kind, l.parent) for l in doc.layers] == [
        ("Body", LayerKind.GROUP, -1),
        ("Arm", LayerKind.IMAGE, 0),
        ("Leg", LayerKind.IMAGE, 0),
        ("Hat", LayerKind.IMAGE, -1),
    ]
    assert doc.layers[0].is_group
    assert not doc.layers[1].is_group
    assert not doc.layers[1].visible
    assert doc.layers[2].visible
    assert doc.layers[2].blend_mode == BlendMode.MULTIPLY
    assert doc.layers[2].opacity == 128
    assert [l.name for l in doc.children(0)] == ["Arm", "Leg"]
    assert doc.layer_by_name("Hat") is doc.layers[3]
    assert doc.layer_by_name("Tail") is None
