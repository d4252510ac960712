"""Drive a full IDX to labeled-directory conversion.

Reads both input files, checks they describe the same samples, then writes
``<output_dir>/<label>/image<i>.pgm`` for every sample in input order. The
first error aborts the run.
"""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path

from loguru import logger
from tqdm import tqdm

from mnist_converter.config import ConverterConfig
from mnist_converter.errors import ConsistencyError, MissingOutputDirectoryError
from mnist_converter.io.pgm import MAX_PATH_LENGTH, check_path_length, write_image
from mnist_converter.io.reader import parse_image_file, parse_label_file
from mnist_converter.types import ConversionSummary, ImageSet, LabelSet

__all__ = [
    "check_consistency",
    "check_output_dir",
    "convert",
    "image_filename",
    "label_directory",
    "write_samples",
]


def check_consistency(labels: LabelSet, images: ImageSet) -> None:
    """Raise ConsistencyError unless there is one label per image."""
    if len(labels) != images.num_images:
        raise ConsistencyError(
            f"Number of labels ({len(labels)}) and number of images "
            f"({images.num_images}) do not match, stopping."
        )


def check_output_dir(output_dir: str | Path) -> None:
    """Raise MissingOutputDirectoryError unless ``output_dir`` is an existing directory."""
    if not Path(output_dir).is_dir():
        raise MissingOutputDirectoryError(
            f"Directory {output_dir} does not exist, please create it and try again."
        )


def label_directory(
    output_dir: str | Path, label: int, max_path_length: int = MAX_PATH_LENGTH
) -> Path:
    """Subdirectory for ``label`` under ``output_dir``.

    The string ``<output_dir>/<label>/``, trailing separator included, must
    fit within ``max_path_length`` bytes.
    """
    check_path_length(f"{os.fspath(output_dir)}{os.sep}{label}{os.sep}", max_path_length)
    return Path(output_dir) / str(label)


def image_filename(index: int) -> str:
    return f"image{index}.pgm"


def write_samples(
    labels: LabelSet,
    images: ImageSet,
    output_dir: str | Path,
    config: ConverterConfig | None = None,
) -> ConversionSummary:
    """Write every sample as a PGM file under its label directory.

    Validates its own input: a label/image count mismatch raises
    ConsistencyError before anything is written, even though ``convert``
    has already checked it.

    Args:
        labels: One label per sample.
        images: Pixel buffer and dimensions of all samples.
        output_dir: Existing root directory for the label subdirectories.
        config: Path length limit, directory mode and progress display.

    Returns:
        ConversionSummary with per-label file counts.
    """
    config = config or ConverterConfig()
    check_consistency(labels, images)
    dims = images.dimensions
    label_counts: Counter[int] = Counter()

    for i in tqdm(
        range(images.num_images),
        total=images.num_images,
        desc="Writing",
        unit="img",
        disable=not config.show_progress,
    ):
        label = labels[i]
        directory = label_directory(output_dir, label, config.max_path_length)
        write_image(
            directory,
            image_filename(i),
            images.image(i),
            dims.width,
            dims.height,
            max_path_length=config.max_path_length,
            dir_mode=config.dir_mode,
        )
        label_counts[label] += 1

    return ConversionSummary(
        output_dir=Path(output_dir),
        num_written=sum(label_counts.values()),
        label_counts=dict(sorted(label_counts.items())),
    )


def convert(
    labels_file: str | Path,
    images_file: str | Path,
    output_dir: str | Path,
    config: ConverterConfig | None = None,
) -> ConversionSummary:
    """Convert an IDX label/image pair into ``<output_dir>/<label>/image<i>.pgm`` files.

    Prints the number of labels and images read to standard output. Nothing
    is written until both files have parsed, their counts agree and
    ``output_dir`` is known to exist.

    Raises:
        ConversionError: Any subclass, on the first failure.
    """
    config = config or ConverterConfig()

    labels = parse_label_file(labels_file)
    print(f"Read {len(labels)} labels from: {labels_file}")

    images, dims = parse_image_file(images_file)
    print(f"Read {images.num_images} images from: {images_file}")

    check_consistency(labels, images)
    check_output_dir(output_dir)

    logger.info(
        f"Writing {images.num_images} images of {dims.width}x{dims.height} "
        f"to {output_dir}"
    )
    summary = write_samples(labels, images, output_dir, config)
    logger.info(
        f"Wrote {summary.num_written} images into "
        f"{len(summary.label_counts)} label directories under {output_dir}"
    )
    for label, count in summary.label_counts.items():
        logger.debug(f"  {label}: {count}")
    return summary
