"""Data models passed between the reader, the materializer and the orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import numpy as np
from pydantic import BaseModel, BeforeValidator, Field, model_validator


def _read_only_u8(value: object) -> np.ndarray:
    """Coerce to a 1-D uint8 array that cannot be written through."""
    arr = np.asarray(value)
    if arr.dtype != np.uint8 or arr.ndim != 1:
        raise ValueError(f"expected a 1-D uint8 array, got {arr.dtype} {arr.shape}")
    if arr.flags.writeable:
        arr = arr.copy()
        arr.flags.writeable = False
    return arr


ReadOnlyU8 = Annotated[np.ndarray, BeforeValidator(_read_only_u8)]


class Dimensions(BaseModel, frozen=True):
    """Uniform size of every image in an ImageSet."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def pixels_per_image(self) -> int:
        return self.width * self.height


class LabelSet(BaseModel, frozen=True, arbitrary_types_allowed=True):
    """Ordered, read-only sequence of uint8 labels, one per sample."""

    labels: ReadOnlyU8

    def __len__(self) -> int:
        return int(self.labels.size)

    def __getitem__(self, index: int) -> int:
        return int(self.labels[index])

    @property
    def num_labels(self) -> int:
        return len(self)


class ImageSet(BaseModel, frozen=True, arbitrary_types_allowed=True):
    """Contiguous read-only pixel buffer holding ``num_images`` equally sized blocks.

    ``image(i)`` hands out a view into the shared buffer, never a copy.
    """

    pixels: ReadOnlyU8
    num_images: int = Field(gt=0)
    dimensions: Dimensions

    @model_validator(mode="after")
    def _buffer_matches_header(self) -> ImageSet:
        expected = self.num_images * self.dimensions.pixels_per_image
        if self.pixels.size != expected:
            raise ValueError(
                f"pixel buffer holds {self.pixels.size} bytes, expected {expected}"
            )
        return self

    def __len__(self) -> int:
        return self.num_images

    def image(self, index: int) -> np.ndarray:
        """Return a read-only view of the pixels of sample ``index``."""
        if not 0 <= index < self.num_images:
            raise IndexError(
                f"image index {index} out of range for {self.num_images} images"
            )
        size = self.dimensions.pixels_per_image
        return self.pixels[index * size : (index + 1) * size]


class ConversionSummary(BaseModel, frozen=True):
    """Outcome of a successful conversion run."""

    output_dir: Path
    num_written: int
    label_counts: dict[int, int]
