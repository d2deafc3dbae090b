# Aseprite (.ase/.aseprite) document decoder: header, frames, chunk dispatch

import logging
import struct
from pathlib import Path
from typing import IO, Optional, Union

import attr

from asefile import cels, palette, tags
from asefile.config import DecoderOptions
from asefile.document import ColorDepth, Document, Frame, Header
from asefile.layers import LayerTreeBuilder
from asefile.reader import Reader
from asefile.sources import ByteSource, FileSource, MemorySource

logger = logging.getLogger(__name__)

FILE_MAGIC = 0xA5E0
FRAME_MAGIC = 0xF1FA
HEADER_SIZE = 128
CHUNK_HEADER_SIZE = 6

CHUNK_OLD_PALETTE_256 = 0x0004
CHUNK_OLD_PALETTE_64 = 0x000B
CHUNK_LAYER = 0x2004
CHUNK_CEL = 0x2005
CHUNK_CEL_EXTRA = 0x2006
CHUNK_MASK = 0x2016
CHUNK_PATH = 0x2017
CHUNK_TAGS = 0x2018
CHUNK_PALETTE = 0x2019
CHUNK_USER_DATA = 0x2020
CHUNK_SLICES = 0x2021
CHUNK_SLICE = 0x2022

IGNORED_CHUNKS = {
    CHUNK_CEL_EXTRA: "cel extra",
    CHUNK_MASK: "mask",
    CHUNK_PATH: "path",
    CHUNK_USER_DATA: "user data",
    CHUNK_SLICES: "slices",
    CHUNK_SLICE: "slice",
}


class AseError(Exception):
    pass


class MagicError(AseError):
    pass


class DepthError(AseError):
    pass


class TruncatedError(AseError):
    pass


@attr.frozen
class FrameHeader:
    size: int
    magic: int
    num_chunks: int
    duration: int


@attr.frozen
class ChunkHeader:
    start: int
    size: int
    type: int

    @property
    def end(self) -> int:
        return self.start + self.size


def read_header(reader: Reader) -> Header:
    start = reader.tell()
    file_size = reader.u32()
    magic = reader.u16()
    num_frames = reader.u16()
    width = reader.u16()
    height = reader.u16()
    depth = reader.u16()
    flags = reader.u32()
    speed = reader.u16()
    reader.u32()
    reader.u32()
    transparent_index = reader.u8()
    reader.skip(3)
    num_colors = reader.u16()
    pixel_width = reader.u8()
    pixel_height = reader.u8()

    if reader.short_reads:
        raise TruncatedError(f"File header truncated ({reader.tell() - start}b)")
    if magic != FILE_MAGIC:
        raise MagicError(f"Bad file magic 0x{magic:04X} (not an Aseprite file?)")
    if depth not in {d.value for d in ColorDepth}:
        raise DepthError(f"Bad color depth {depth}")

    if not pixel_width or not pixel_height:
        pixel_width = pixel_height = 1

    # The header is a fixed-size record with reserved space at the end
    reader.seek(start + HEADER_SIZE)

    return Header(
        file_size=file_size,
        num_frames=num_frames,
        width=width,
        height=height,
        depth=ColorDepth(depth),
        flags=flags,
        speed=speed,
        transparent_index=transparent_index,
        num_colors=num_colors or 256,  # 0 in older files
        pixel_width=pixel_width,
        pixel_height=pixel_height,
    )


def read_frame_header(reader: Reader) -> Optional[FrameHeader]:
    fields = reader.unpack(_frame_struct)
    if fields is None:
        return None
    size, magic, num_chunks, duration = fields
    return FrameHeader(size=size, magic=magic, num_chunks=num_chunks, duration=duration)


def read_chunk_header(reader: Reader) -> Optional[ChunkHeader]:
    start = reader.tell()
    fields = reader.unpack(_chunk_struct)
    if fields is None:
        return None
    size, chunk_type = fields
    return ChunkHeader(start=start, size=size, type=chunk_type)


class _Decoder:
    def __init__(self, reader: Reader, options: DecoderOptions):
        self.reader = reader
        self.options = options
        self.doc = Document(header=read_header(reader))
        self.layer_builder = LayerTreeBuilder(self.doc.layers)
        self.seen_palette_chunk = False

        h = self.doc.header
        logger.debug(
            f"Header: {h.width}x{h.height}px {h.depth}bpp"
            f" {h.num_frames}fr {h.num_colors}col tr=#{h.transparent_index}"
        )

    def run(self) -> Document:
        for frame_index in range(self.doc.header.num_frames):
            self.read_frame(frame_index)
        return self.doc

    def read_frame(self, frame_index: int):
        start = self.reader.tell()
        header = read_frame_header(self.reader)
        if header is None:
            raise TruncatedError(f"F{frame_index}: Frame header truncated at {start}")
        if header.magic != FRAME_MAGIC:
            message = f"F{frame_index}: Bad frame magic 0x{header.magic:04X}"
            if self.options.strict_frame_magic:
                raise MagicError(message)
            logger.warning(message)

        frame = Frame(duration=header.duration)
        self.doc.frames.append(frame)
        logger.debug(
            f"F{frame_index}: {header.duration}msec"
            f" chunks={header.num_chunks} ({header.size}b)"
        )

        for _ in range(header.num_chunks):
            if not self.read_chunk(frame_index, frame):
                break

        self.reader.seek(start + header.size)

    def read_chunk(self, frame_index: int, frame: Frame) -> bool:
        chunk = read_chunk_header(self.reader)
        if chunk is None:
            raise TruncatedError(f"F{frame_index}: Chunk header truncated")
        if chunk.size < CHUNK_HEADER_SIZE:
            logger.warning(
                f"F{frame_index}: Chunk 0x{chunk.type:04X} size {chunk.size}b"
                f" at {chunk.start} is smaller than its header, skipping frame"
            )
            return False

        if chunk.type == CHUNK_PALETTE:
            palette.read_palette_chunk(self.reader, self.doc.palette)
            self.seen_palette_chunk = True

        elif chunk.type == CHUNK_LAYER:
            self.layer_builder.read(self.reader)

        elif chunk.type == CHUNK_CEL:
            cel = cels.read_cel_chunk(
                self.reader,
                self.doc,
                frame_index=frame_index,
                chunk_end=chunk.end,
                options=self.options,
            )
            if cel:
                frame.cels.append(cel)

        elif chunk.type == CHUNK_TAGS:
            self.doc.tags.extend(tags.read_tags_chunk(self.reader))

        elif chunk.type in (CHUNK_OLD_PALETTE_256, CHUNK_OLD_PALETTE_64):
            if not self.seen_palette_chunk:
                logger.debug(f"F{frame_index}: Legacy palette chunk not supported")

        elif chunk.type in IGNORED_CHUNKS:
            logger.debug(f"F{frame_index}: Skipping {IGNORED_CHUNKS[chunk.type]}")

        else:
            logger.debug(f"F{frame_index}: Unknown chunk type 0x{chunk.type:04X}")

        # Handlers needn't consume exactly the declared size
        self.reader.seek(chunk.end)
        return True


def load(source: ByteSource, options: Optional[DecoderOptions] = None) -> Document:
    reader = Reader(source)
    doc = _Decoder(reader, options or DecoderOptions()).run()
    if reader.short_reads:
        logger.debug(f"{reader.short_reads} short reads (truncated data?)")
    return doc


def load_bytes(data: bytes, options: Optional[DecoderOptions] = None) -> Document:
    return load(MemorySource(data), options)


def load_file(fp: IO[bytes], options: Optional[DecoderOptions] = None) -> Document:
    return load(FileSource(fp), options)


def load_path(
    path: Union[str, Path], options: Optional[DecoderOptions] = None
) -> Document:
    with open(path, "rb") as fp:
        return load_file(fp, options)


_frame_struct = struct.Struct("<IHHH6x")
_chunk_struct = struct.Struct("<IH")
