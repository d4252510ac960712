"""Binary PGM (P5) writer and the directory handling around it."""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
from loguru import logger

from mnist_converter.errors import (
    DirectoryCreateError,
    FileOpenError,
    ImageWriteError,
    PathTooLongError,
)

__all__ = [
    "DEFAULT_DIR_MODE",
    "MAX_GRAY",
    "MAX_PATH_LENGTH",
    "PGM_MAGIC",
    "check_path_length",
    "compose_path",
    "ensure_directory",
    "write_image",
]

PGM_MAGIC = "P5"
MAX_GRAY = 255
MAX_PATH_LENGTH = 255
DEFAULT_DIR_MODE = 0o755


def check_path_length(path: str | os.PathLike[str], max_length: int) -> None:
    """Raise PathTooLongError if the encoded path is longer than ``max_length`` bytes."""
    length = len(os.fsencode(path))
    if length > max_length:
        raise PathTooLongError(
            f"Path too long ({length} > {max_length} bytes): {os.fspath(path)}"
        )


def compose_path(
    directory: str | Path, filename: str, max_length: int = MAX_PATH_LENGTH
) -> Path:
    """Join ``directory`` and ``filename``, enforcing the path length limit."""
    path = Path(directory) / filename
    check_path_length(path, max_length)
    return path


def ensure_directory(path: str | Path, mode: int = DEFAULT_DIR_MODE) -> None:
    """Create a single directory level unless it already exists as a directory.

    The parent must already exist. An existing entry at ``path`` that is not a
    directory is an error.
    """
    path = Path(path)
    if path.is_dir():
        return
    if path.exists():
        raise DirectoryCreateError(f"{path} exists and is not a directory")
    try:
        path.mkdir(mode=mode)
    except FileExistsError as exc:
        # Created concurrently; only a directory is acceptable.
        if not path.is_dir():
            raise DirectoryCreateError(f"{path} exists and is not a directory") from exc
    except OSError as exc:
        raise DirectoryCreateError(
            f"Unable to create directory {path}: {exc.strerror}"
        ) from exc
    else:
        logger.debug(f"Created directory {path}")


def write_image(
    directory: str | Path,
    filename: str,
    pixels: bytes | bytearray | memoryview | np.ndarray,
    width: int,
    height: int,
    *,
    max_path_length: int = MAX_PATH_LENGTH,
    dir_mode: int = DEFAULT_DIR_MODE,
) -> Path:
    """Write one grayscale image as ``<directory>/<filename>`` in binary PGM.

    The file is a ``P5 <width> <height> 255`` header line followed by the raw
    ``width * height`` pixel bytes.

    Args:
        directory: Destination directory, created (one level) if missing.
        filename: File name inside ``directory``.
        pixels: C-contiguous single-byte buffer of ``width * height`` pixels,
            e.g. a uint8 numpy view. It is written without copying.
        width: Image width in pixels.
        height: Image height in pixels.
        max_path_length: Upper bound on the encoded length of the output path.
        dir_mode: Permission bits for a newly created directory.

    Returns:
        Path of the written file.
    """
    ensure_directory(directory, mode=dir_mode)
    path = compose_path(directory, filename, max_path_length)

    try:
        view = memoryview(pixels)
        if view.itemsize != 1 or view.format not in ("B", "b", "c"):
            raise ImageWriteError(
                f"Image for {path} must be single-byte pixels, "
                f"got format {view.format!r}"
            )
        view = view.cast("B")
    except TypeError as exc:
        raise ImageWriteError(
            f"Image for {path} is not a contiguous buffer: {exc}"
        ) from exc
    num_pixels = width * height
    if view.nbytes != num_pixels:
        raise ImageWriteError(
            f"Image for {path} has {view.nbytes} bytes, expected {num_pixels}"
        )

    header = f"{PGM_MAGIC} {width} {height} {MAX_GRAY}\n".encode("ascii")
    try:
        outfile = open(path, "wb")
    except OSError as exc:
        raise FileOpenError(
            f"Unable to open image file {path} for writing: {exc.strerror}"
        ) from exc

    try:
        with outfile:
            outfile.write(header)
            written = outfile.write(view)
    except OSError as exc:
        raise ImageWriteError(
            f"Unable to write to image file {path}: {exc.strerror}"
        ) from exc
    if written != num_pixels:
        raise ImageWriteError(f"Wrote {written} of {num_pixels} pixel bytes to {path}")
    return path
