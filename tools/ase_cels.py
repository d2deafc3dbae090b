#!/usr/bin/env python3

import argparse
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from asefile import config, decoder, imaging, logging_setup  # isort: skip

parser = argparse.ArgumentParser()
parser.add_argument("ase_file", help="File to convert")
parser.add_argument("out_dir", nargs="?", help="Directory for cel PNGs")
parser.add_argument("--config", help="TOML file with a [decoder] table")
parser.add_argument("--debug", action="store_true", help="Log chunk details")
parser.add_argument("--hidden", action="store_true", help="Include hidden layers")
args = parser.parse_args()

if args.debug:
    logging_setup.enable_debug()

print(f"Reading: {args.ase_file}")
ase_path = Path(args.ase_file)
doc = decoder.load_path(ase_path, config.load_options(args.config))

out_dir = Path(args.out_dir) if args.out_dir else ase_path.with_suffix("")
out_dir.mkdir(parents=True, exist_ok=True)

for fi, frame in enumerate(doc.frames):
    for cel in frame.cels:
        if not (args.hidden or doc.is_cel_visible(cel)):
            continue
        image = imaging.cel_image(doc, cel)
        if image is None:
            logging.warning(f"F{fi}: L{cel.layer} cel has no pixels, skipped")
            continue

        out_file = out_dir / f"F{fi:03d}_L{cel.layer:02d}.png"
        print(f"Writing: {out_file} ({cel.width}x{cel.height} @{cel.x},{cel.y})")
        image.save(out_file)
