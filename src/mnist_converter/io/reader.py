"""Readers for the big-endian IDX label and image files.

Both formats start with a 32-bit magic number followed by a small header of
32-bit counts and a raw ``uint8`` payload::

    labels: [magic=2049][count][count x u8]
    images: [magic=2051][num_images][height][width][num_images*height*width x u8]

Trailing bytes after the declared payload are ignored.
"""

from __future__ import annotations

import io
import os
import stat
import struct
from pathlib import Path
from typing import BinaryIO

import numpy as np
from loguru import logger

from mnist_converter.errors import (
    BadMagicError,
    FileOpenError,
    InvalidHeaderError,
    TruncatedReadError,
)
from mnist_converter.types import Dimensions, ImageSet, LabelSet

__all__ = [
    "IMAGE_MAGIC",
    "LABEL_MAGIC",
    "parse_image_file",
    "parse_label_file",
    "read_big_endian_u32",
]

LABEL_MAGIC = 2049
IMAGE_MAGIC = 2051

_U32 = struct.Struct(">I")
_CHUNK_SIZE = 1 << 20


def read_big_endian_u32(stream: BinaryIO) -> int:
    """Read one big-endian unsigned 32-bit integer from ``stream``."""
    data = stream.read(_U32.size)
    if len(data) < _U32.size:
        raise TruncatedReadError(
            f"Error reading int from file: got {len(data)} of {_U32.size} bytes"
        )
    value: int = _U32.unpack(data)[0]
    return value


def _remaining_bytes(stream: BinaryIO) -> int | None:
    """Bytes left between the current position and end of file, if knowable.

    Only regular files have a meaningful size; pipes and other streams
    return None and are read without the precheck.
    """
    try:
        st = os.fstat(stream.fileno())
        if not stat.S_ISREG(st.st_mode):
            return None
        position = stream.tell()
    except (OSError, io.UnsupportedOperation):
        return None
    return max(0, st.st_size - position)


def _read_chunked(stream: BinaryIO, num_bytes: int) -> bytes:
    """Read up to ``num_bytes`` from a stream of unknown length, stopping at EOF."""
    buf = bytearray()
    while len(buf) < num_bytes:
        chunk = stream.read(min(_CHUNK_SIZE, num_bytes - len(buf)))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def _read_payload(stream: BinaryIO, num_bytes: int, what: str) -> bytes:
    """Read exactly ``num_bytes`` or raise TruncatedReadError.

    Regular files are checked against their size first so a corrupt header
    cannot trigger a huge allocation. Pipes and other streams of unknown size
    are read in chunks until EOF.
    """
    available = _remaining_bytes(stream)
    if available is not None and available < num_bytes:
        raise TruncatedReadError(
            f"Error reading {what}: {available} bytes available, expected {num_bytes}"
        )
    if available is None:
        data = _read_chunked(stream, num_bytes)
    else:
        data = stream.read(num_bytes)
    if len(data) != num_bytes:
        raise TruncatedReadError(
            f"Error reading {what}: read {len(data)} bytes, expected {num_bytes}"
        )
    return data


def _open(path: Path, kind: str) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise FileOpenError(f"Unable to read {kind} file {path}: {exc.strerror}") from exc


def parse_label_file(path: str | Path) -> LabelSet:
    """Decode an IDX label file.

    Args:
        path: Path to a file with magic number 2049.

    Returns:
        LabelSet holding one label per sample. An empty set is valid here;
        the orchestrator enforces the count against the image file.

    Raises:
        FileOpenError: The file cannot be opened.
        BadMagicError: The magic number is not 2049.
        TruncatedReadError: The header or payload is shorter than declared.
    """
    path = Path(path)
    with _open(path, "labels") as f:
        magic = read_big_endian_u32(f)
        if magic != LABEL_MAGIC:
            raise BadMagicError(
                f"{path} is not a label file -- magic number {magic} "
                f"does not match {LABEL_MAGIC}"
            )
        num_labels = read_big_endian_u32(f)
        data = _read_payload(f, num_labels, "label file")

    labels = LabelSet(labels=np.frombuffer(data, dtype=np.uint8))
    logger.debug(f"Decoded {len(labels)} labels from {path}")
    return labels


def parse_image_file(path: str | Path) -> tuple[ImageSet, Dimensions]:
    """Decode an IDX image file.

    Args:
        path: Path to a file with magic number 2051.

    Returns:
        Tuple of (ImageSet, Dimensions). The ImageSet buffer holds exactly
        ``num_images * height * width`` bytes in sample order.

    Raises:
        FileOpenError: The file cannot be opened.
        BadMagicError: The magic number is not 2051.
        InvalidHeaderError: The image count, height or width is zero.
        TruncatedReadError: The header or payload is shorter than declared.
    """
    path = Path(path)
    with _open(path, "images") as f:
        magic = read_big_endian_u32(f)
        if magic != IMAGE_MAGIC:
            raise BadMagicError(
                f"{path} is not an image file -- magic number {magic} "
                f"does not match {IMAGE_MAGIC}"
            )
        num_images = read_big_endian_u32(f)
        height = read_big_endian_u32(f)
        width = read_big_endian_u32(f)
        if num_images <= 0 or height <= 0 or width <= 0:
            raise InvalidHeaderError(
                f"Error reading image data: num_images={num_images}, "
                f"height={height}, width={width}"
            )
        data = _read_payload(f, num_images * height * width, "image file")

    dims = Dimensions(width=width, height=height)
    images = ImageSet(
        pixels=np.frombuffer(data, dtype=np.uint8),
        num_images=num_images,
        dimensions=dims,
    )
    logger.debug(f"Decoded {num_images} images of {width}x{height} from {path}")
    return images, dims
