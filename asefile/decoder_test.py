import io

import pytest

from asefile import decoder, testdata
from asefile.config import DecoderOptions
from asefile.document import ColorDepth


def _sprite() -> bytes:
    pixels = bytes(range(16))
    return testdata.document(
        [
            testdata.frame(
                [
                    testdata.palette_chunk(0, [(1, 2, 3, 255)] * 3),
                    testdata.layer_chunk("Body", kind=1),
                    testdata.layer_chunk("Head", level=1),
                    testdata.compressed_cel_chunk(1, 2, 2, pixels, x=1, y=2),
                    testdata.tags_chunk([(0, 1, 2, "loop")]),
                ],
                duration=80,
            ),
            testdata.frame([testdata.linked_cel_chunk(1, 0)], duration=120),
        ],
        width=32,
        height=24,
        transparent_index=3,
        pixel_width=2,
        pixel_height=3,
    )


def test_header_fields():
    doc = decoder.load_bytes(_sprite())
    header = doc.header
    assert (doc.width, doc.height, doc.depth) == (32, 24, ColorDepth.RGBA)
    assert doc.bytes_per_pixel == 4
    assert header.num_frames == 2
    assert header.transparent_index == 3
    assert header.num_colors == 256
    assert (header.pixel_width, header.pixel_height) == (2, 3)
    assert header.file_size == len(_sprite())


def test_pixel_ratio_defaults_to_square():
    data = testdata.document([testdata.frame([])], pixel_width=0, pixel_height=5)
    header = decoder.load_bytes(data).header
    assert (header.pixel_width, header.pixel_height) == (1, 1)


def test_frames_and_durations():
    doc = decoder.load_bytes(_sprite())
    assert [f.duration for f in doc.frames] == [80, 120]
    assert [len(f.cels) for f in doc.frames] == [1, 1]
    assert doc.frames[0].cels[0].data == bytes(range(16))


def test_decode_is_repeatable():
    data = _sprite()
    assert decoder.load_bytes(data) == decoder.load_bytes(data)


def test_bad_file_magic():
    with pytest.raises(decoder.MagicError):
        decoder.load_bytes(testdata.document([], magic=0x1234))
    with pytest.raises(decoder.MagicError):
        decoder.load_bytes(b"\x89PNG\r\n\x1a\n" + bytes(200))


def test_bad_depth():
    with pytest.raises(decoder.DepthError):
        decoder.load_bytes(testdata.document([], depth=24))


def test_truncated_header():
    with pytest.raises(decoder.TruncatedError):
        decoder.load_bytes(b"")
    with pytest.raises(decoder.TruncatedError):
        decoder.load_bytes(_sprite()[:40])


def test_missing_frames_are_fatal():
    data = testdata.document([testdata.frame([])], num_frames=2)
    with pytest.raises(decoder.TruncatedError):
        decoder.load_bytes(data)


def test_truncated_chunk_header_is_fatal():
    frame = testdata.frame([testdata.layer_chunk("A"), b"\x10\x00"])
    with pytest.raises(decoder.TruncatedError):
        decoder.load_bytes(testdata.document([frame]))


def test_bad_frame_magic():
    data = testdata.document(
        [
            testdata.frame([testdata.layer_chunk("A")], magic=0xBEEF),
            testdata.frame([testdata.layer_chunk("B")]),
        ]
    )
    with pytest.raises(decoder.MagicError):
        decoder.load_bytes(data)

    options = DecoderOptions(strict_frame_magic=False)
    doc = decoder.load_bytes(data, options)
    assert [l.name for l in doc.layers] == ["A", "B"]


def test_frame_padding_is_skipped():
    data = testdata.document(
        [
            testdata.frame([testdata.layer_chunk("A")], padding=b"\xee" * 13),
            testdata.frame([testdata.layer_chunk("B")]),
        ]
    )
    assert [l.name for l in decoder.load_bytes(data).layers] == ["A", "B"]


def test_chunk_trailing_data_is_skipped():
    layer = testdata.layer_chunk("A")
    oversized = testdata.chunk(decoder.CHUNK_LAYER, layer[6:] + b"\x00" * 9)
    frame = testdata.frame([oversized, testdata.layer_chunk("B")])
    doc = decoder.load_bytes(testdata.document([frame]))
    assert [l.name for l in doc.layers] == ["A", "B"]


def test_undersized_chunk_ends_frame():
    bad = testdata.chunk(decoder.CHUNK_LAYER, b"", size=3)
    data = testdata.document(
        [
            testdata.frame([testdata.layer_chunk("A"), bad, testdata.layer_chunk("X")]),
            testdata.frame([testdata.layer_chunk("B")]),
        ]
    )
    doc = decoder.load_bytes(data)
    assert [l.name for l in doc.layers] == ["A", "B"]
    assert len(doc.frames) == 2


def test_ignored_and_unknown_chunks():
    frame = testdata.frame(
        [
            testdata.chunk(chunk_type, b"\x01\x02\x03\x04\x05")
            for chunk_type in list(decoder.IGNORED_CHUNKS) + [0x7777, 0x2023]
        ]
        + [testdata.layer_chunk("A")]
    )
    doc = decoder.load_bytes(testdata.document([frame]))
    assert [l.name for l in doc.layers] == ["A"]
    assert doc.frames[0].cels == []


def test_load_file_and_path(tmp_path):
    data = _sprite()
    expected = decoder.load_bytes(data)
    assert decoder.load_file(io.BytesIO(data)) == expected

    path = tmp_path / "sprite.aseprite"
    path.write_bytes(data)
    assert decoder.load_path(path) == expected
    assert decoder.load_path(str(path)) == expected


def test_load_from_offset():
    data = b"junk" + _sprite()
    fp = io.BytesIO(data)
    fp.seek(4)
    doc = decoder.load_file(fp)
    assert [l.name for l in doc.layers] == ["Body", "Head"]
