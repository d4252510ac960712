"""Command-line entry point.

Usage::

    convert <labels_file> <images_file> <output_dir>
    convert train-labels-idx1-ubyte train-images-idx3-ubyte out/ --progress
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn, get_args

from loguru import logger
from pydantic import ValidationError

from mnist_converter.config import ConverterConfig, LogLevel
from mnist_converter.converter import convert
from mnist_converter.errors import ConversionError


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="convert",
        description=(
            "Convert MNIST IDX label/image files into one PGM file per sample, "
            "grouped into per-label subdirectories of an existing output directory"
        ),
    )
    parser.add_argument("labels_file", type=Path, help="IDX label file (magic 2049)")
    parser.add_argument("images_file", type=Path, help="IDX image file (magic 2051)")
    parser.add_argument(
        "output_dir", type=Path, help="Existing directory to write into"
    )
    parser.add_argument(
        "--max-path-length",
        type=int,
        default=255,
        help="Maximum length in bytes of any output path (default: 255)",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while writing images",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=get_args(LogLevel),
        help="Log level for messages on stderr (default: INFO)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ConverterConfig(
            max_path_length=args.max_path_length,
            show_progress=args.progress,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        parser.error(f"invalid option: {exc.errors()[0]['msg']}")

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    try:
        convert(args.labels_file, args.images_file, args.output_dir, config)
    except ConversionError as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
