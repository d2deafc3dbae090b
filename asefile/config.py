# Decoder options and their TOML file representation

from typing import Optional

import attr
import cattr
import cattr.preconf.tomlkit
import tomlkit


@attr.frozen
class DecoderOptions:
    verify_checksum: bool = False  # check the zlib Adler-32 trailer of cels
    pad_short_cels: bool = True  # zero-pad compressed cels that inflate short
    strict_frame_magic: bool = True  # bad frame magic aborts the decode


def load_options(filename: Optional[str] = None) -> DecoderOptions:
    if not filename:
        return DecoderOptions()
    toml_converter = cattr.preconf.tomlkit.make_converter()
    with open(filename) as file:
        toml_data = tomlkit.load(file)
    return toml_converter.structure(
        dict(toml_data.get("decoder", {})), DecoderOptions
    )
