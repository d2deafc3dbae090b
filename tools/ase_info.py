#!/usr/bin/env python3

import argparse
import sys
from pathlib import Path
from typing import Dict

sys.path.append(str(Path(__file__).parent.parent))
from asefile import config, decoder, logging_setup, tags  # isort: skip
from asefile.document import Document, Layer, Link, Pixels  # isort: skip

parser = argparse.ArgumentParser()
parser.add_argument("ase_file", help="File to describe")
parser.add_argument("--config", help="TOML file with a [decoder] table")
parser.add_argument("--debug", action="store_true", help="Log chunk details")
parser.add_argument("--play", type=int, default=0, help="Tag steps to show")
args = parser.parse_args()

if args.debug:
    logging_setup.enable_debug()

print(f"=== Loading: {args.ase_file}")
doc = decoder.load_path(args.ase_file, config.load_options(args.config))
print()


def decode_flags(flags: int, names: Dict[int, str]):
    found = [name for f, name in names.items() if flags & f]
    leftover = flags & ~sum(names.keys())
    return ",".join(found + ([f"0x{leftover:x}"] if leftover else []))


header_flags = {1: "opacity-valid"}
layer_flags = {
    1: "vis",
    2: "edit",
    4: "!move",
    8: "bg",
    16: "linkcel",
    32: "collapse",
    64: "ref",
}

h = doc.header
print(
    f"=== File:"
    f" {h.width}x{h.height}px"
    f" (px={h.pixel_width}x{h.pixel_height})"
    f" {h.depth.value}bpp"
    f" ({h.num_colors}col palette={doc.palette.count}"
    f" tr=#{h.transparent_index})"
    f" [{decode_flags(h.flags, header_flags)}]"
    f" {h.num_frames}fr {h.file_size}b"
)
print()


def print_layer(layer: Layer, depth: int):
    print(
        f"   {' ->' * depth}"
        f" L{layer.index}: {layer.kind.name.title()}"
        f" blend={layer.blend_mode.name.lower()}"
        f" opacity={layer.opacity}"
        f" [{decode_flags(layer.flags, layer_flags)}]"
        f' "{layer.name}"'
    )
    if layer.is_group:
        for child in doc.children(layer.index):
            print_layer(child, depth + 1)


print(f"--- Layers: {len(doc.layers)}")
for root in doc.children(-1):
    print_layer(root, 0)
print()

for fi, frame in enumerate(doc.frames):
    print(f"--- Frame F{fi}: t={frame.duration}msec cels={len(frame.cels)}")
    for cel in frame.cels:
        hidden = "" if doc.is_cel_visible(cel) else " (hidden)"
        print(
            f"    L{cel.layer}{hidden}:"
            f" pos=({cel.x},{cel.y}) opacity={cel.opacity}"
        )
        if isinstance(cel.payload, Link):
            print(f"    Link: F{cel.payload.frame}")
        elif isinstance(cel.payload, Pixels) and cel.payload.data is not None:
            print(f"    Data: {cel.width}x{cel.height} ({len(cel.payload.data)}b)")
        else:
            print(f"    Data: {cel.width}x{cel.height} (none)")
    print()

if doc.tags:
    print(f"--- Tags: {len(doc.tags)}")
    for tag in doc.tags:
        line = (
            f"    F{tag.from_frame}-F{tag.to_frame}"
            f" {tag.direction.name.lower()} \"{tag.name}\""
        )
        if args.play:
            frames = tags.play(tag, tag.from_frame, args.play)
            line += f": {' '.join(f'F{f}' for f in frames)}"
        print(line)
    print()
