"""Convert MNIST IDX label/image files into per-label PGM directories."""

from mnist_converter.config import ConverterConfig
from mnist_converter.converter import convert
from mnist_converter.errors import ConversionError

__version__ = "0.0.1"

__all__ = ["ConversionError", "ConverterConfig", "__version__", "convert"]
