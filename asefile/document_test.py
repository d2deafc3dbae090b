from asefile import decoder, testdata
from asefile.document import (
    Cel,
    ColorDepth,
    Document,
    Header,
    Link,
    Pixels,
    bytes_per_pixel,
)


def test_bytes_per_pixel():
    assert bytes_per_pixel(ColorDepth.INDEXED) == 1
    assert bytes_per_pixel(ColorDepth.GRAYSCALE) == 2
    assert bytes_per_pixel(ColorDepth.RGBA) == 4


def test_pixels_repr_shows_size():
    assert repr(Pixels(bytes(10))) == "Pixels(data=<10b>)"
    assert repr(Pixels()) == "Pixels(data=None)"


def test_cel_payload_accessors():
    cel = Cel(layer=0, frame=0, payload=Pixels(b"ab"))
    assert cel.data == b"ab"
    assert not cel.is_linked

    cel = Cel(layer=0, frame=1, payload=Link(frame=0))
    assert cel.data is None
    assert cel.is_linked


def test_close_releases_everything():
    data = testdata.document(
        [
            testdata.frame(
                [
                    testdata.palette_chunk(0, [(9, 9, 9, 9)]),
                    testdata.layer_chunk("A"),
                    testdata.raw_cel_chunk(0, 1, 1, b"abcd"),
                    testdata.tags_chunk([(0, 0, 0, "t")]),
                ]
            )
        ]
    )
    doc = decoder.load_bytes(data)
    assert doc.layers and doc.frames and doc.tags and doc.palette.count

    doc.close()
    assert doc.layers == []
    assert doc.frames == []
    assert doc.tags == []
    assert doc.palette.count == 0
    assert doc.width == 4


def test_empty_document():
    doc = Document(
        header=Header(file_size=0, num_frames=0, width=1, height=1, depth=ColorDepth(8))
    )
    assert doc.bytes_per_pixel == 1
    assert doc.children(-1) == []
    assert len(doc.palette.colors) == 256
