from asefile import decoder, testdata
from asefile.document import Color, Palette
from asefile.palette import read_palette_chunk
from asefile.reader import Reader
from asefile.sources import MemorySource


def _read(chunk: bytes, palette: Palette):
    reader = Reader(MemorySource(chunk))
    reader.skip(6)  # chunk header
    read_palette_chunk(reader, palette)


def test_red_and_blue_are_swapped():
    palette = Palette()
    _read(testdata.palette_chunk(0, [(10, 20, 30, 255)]), palette)
    color = palette[0]
    assert color == Color(red=30, green=20, blue=10, alpha=255)
    assert palette.count == 1


def test_names_are_skipped():
    palette = Palette()
    chunk = testdata.palette_chunk(
        0, [(1, 2, 3, 4), (5, 6, 7, 8), (9, 10, 11, 12)], names=[None, "skin", None]
    )
    _read(chunk, palette)
    assert [tuple(palette[i]) for i in range(3)] == [
        (3, 2, 1, 4),
        (7, 6, 5, 8),
        (11, 10, 9, 12),
    ]


def test_chunks_merge_by_index():
    palette = Palette()
    _read(testdata.palette_chunk(0, [(1, 1, 1, 255)] * 4), palette)
    _read(testdata.palette_chunk(2, [(0, 0, 9, 255)] * 3), palette)
    assert palette.count == 5
    assert palette[1] == Color(1, 1, 1, 255)
    assert palette[2] == Color(9, 0, 0, 255)
    assert palette[4] == Color(9, 0, 0, 255)

    # a later, smaller range never shrinks the table
    _read(testdata.palette_chunk(0, [(0, 0, 0, 0)]), palette)
    assert palette.count == 5
    assert palette[0] == Color()


def test_palette_from_file_with_legacy_chunk():
    data = testdata.document(
        [
            testdata.frame(
                [
                    testdata.chunk(decoder.CHUNK_OLD_PALETTE_256, b"\x01\x00\x00\x03"),
                    testdata.palette_chunk(0, [(255, 0, 0, 255), (0, 0, 255, 128)]),
                    testdata.chunk(decoder.CHUNK_OLD_PALETTE_64, b"junk"),
                ]
            )
        ],
        depth=8,
    )
    doc = decoder.load_bytes(data)
    assert doc.palette.count == 2
    assert doc.palette[0] == Color(red=0, green=0, blue=255, alpha=255)
    assert doc.palette[1] == Color(red=255, green=0, blue=0, alpha=128)
    assert doc.palette[2] == Color()
