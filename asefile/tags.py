# Frame tag chunks (0x2018) and tag playback

import logging
from typing import Iterator, List

from asefile.document import LoopDirection, Tag
from asefile.reader import Reader

logger = logging.getLogger(__name__)

_DIRECTIONS = {d.value for d in LoopDirection}


def read_tags_chunk(reader: Reader) -> List[Tag]:
    count = reader.u16()
    reader.skip(8)

    tags = []
    for _ in range(count):
        from_frame = reader.s16()
        to_frame = reader.s16()
        direction = reader.u8()
        reader.skip(8)
        reader.skip(4)  # tag color, editor only
        name = reader.string()

        if direction not in _DIRECTIONS:
            logger.debug(f'Tag "{name}" direction {direction}, using forward')
            direction = LoopDirection.FORWARD

        tag = Tag(
            from_frame=from_frame,
            to_frame=to_frame,
            direction=LoopDirection(direction),
            name=name,
        )
        logger.debug(f"Tag: {tag}")
        tags.append(tag)

        if reader.at_eof():
            break

    return tags


def next_frame(tag: Tag, cursor: int) -> int:
    # Ping-pong reports its backward half as a negative offset from to_frame
    if tag.direction == LoopDirection.REVERSE:
        cursor -= 1
        if cursor < tag.from_frame:
            cursor = tag.to_frame

    elif tag.direction == LoopDirection.PING_PONG:
        if cursor >= 0:
            cursor += 1
            if cursor > tag.to_frame:
                cursor = 0 if tag.from_frame == tag.to_frame else -1
        else:
            cursor -= 1
            if tag.to_frame + cursor < tag.from_frame:
                cursor = 0

    else:
        cursor += 1
        if cursor > tag.to_frame:
            cursor = tag.from_frame

    return cursor


def resolve_frame(tag: Tag, cursor: int) -> int:
    return tag.to_frame + cursor if cursor < 0 else cursor


def play(tag: Tag, start: int, steps: int) -> Iterator[int]:
    cursor = start
    for _ in range(steps):
        cursor = next_frame(tag, cursor)
        yield resolve_frame(tag, cursor)
