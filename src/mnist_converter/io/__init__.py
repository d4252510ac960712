"""IDX readers and the PGM writer."""

from mnist_converter.io.pgm import ensure_directory, write_image
from mnist_converter.io.reader import (
    parse_image_file,
    parse_label_file,
    read_big_endian_u32,
)

__all__ = [
    "ensure_directory",
    "parse_image_file",
    "parse_label_file",
    "read_big_endian_u32",
    "write_image",
]
