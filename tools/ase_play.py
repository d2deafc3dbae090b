#!/usr/bin/env python3

import argparse
import sys
import time
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from asefile import config, decoder, logging_setup, tags  # isort: skip

parser = argparse.ArgumentParser()
parser.add_argument("ase_file", help="File to play")
parser.add_argument("tag", help="Name of the tag to play")
parser.add_argument("--steps", type=int, default=20, help="Frames to advance")
parser.add_argument("--realtime", action="store_true", help="Wait frame times")
parser.add_argument("--config", help="TOML file with a [decoder] table")
parser.add_argument("--debug", action="store_true", help="Log chunk details")
args = parser.parse_args()

if args.debug:
    logging_setup.enable_debug()

doc = decoder.load_path(args.ase_file, config.load_options(args.config))
tag = doc.tag_by_name(args.tag)
if tag is None:
    names = ", ".join(f'"{t.name}"' for t in doc.tags) or "none"
    raise SystemExit(f'No tag "{args.tag}" (tags: {names})')

print(f"=== {tag.direction.name.lower()} F{tag.from_frame}-F{tag.to_frame}")
cursor = tag.from_frame
for step in range(args.steps):
    cursor = tags.next_frame(tag, cursor)
    frame_index = tags.resolve_frame(tag, cursor)
    if not 0 <= frame_index < len(doc.frames):
        print(f"{step:3d}: cursor={cursor} F{frame_index} (no such frame)")
        continue

    frame = doc.frames[frame_index]
    print(f"{step:3d}: cursor={cursor} F{frame_index} t={frame.duration}msec")
    if args.realtime:
        time.sleep(frame.duration / 1000)
