"""Shared pytest fixtures for mnist_converter tests."""

import struct
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest


def _idx_bytes(magic: int, header: Sequence[int], payload: Sequence[int]) -> bytes:
    return struct.pack(f">{1 + len(header)}I", magic, *header) + bytes(payload)


@pytest.fixture()
def make_label_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an IDX label file into tmp_path.

    ``count`` overrides the header count so truncated files can be built.
    """

    def _make(
        labels: Sequence[int],
        *,
        magic: int = 2049,
        count: int | None = None,
        name: str = "labels-idx1-ubyte",
    ) -> Path:
        path = tmp_path / name
        header = [len(labels) if count is None else count]
        path.write_bytes(_idx_bytes(magic, header, labels))
        return path

    return _make


@pytest.fixture()
def make_image_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an IDX image file (num_images, height, width header)."""

    def _make(
        pixels: Sequence[int],
        num_images: int,
        height: int,
        width: int,
        *,
        magic: int = 2051,
        name: str = "images-idx3-ubyte",
    ) -> Path:
        path = tmp_path / name
        path.write_bytes(_idx_bytes(magic, [num_images, height, width], pixels))
        return path

    return _make


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "outdir"
    out.mkdir()
    return out


@pytest.fixture()
def example_dataset(
    make_label_file: Callable[..., Path],
    make_image_file: Callable[..., Path],
    output_dir: Path,
) -> tuple[Path, Path, Path]:
    """Two 2x2 samples labeled 3 and 7.

    Returns:
        (labels_path, images_path, output_dir)
    """
    labels = make_label_file([3, 7])
    images = make_image_file([10, 20, 30, 40, 50, 60, 70, 80], 2, 2, 2)
    return labels, images, output_dir
