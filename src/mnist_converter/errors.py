"""Exception hierarchy for mnist_converter.

Every error is fatal to a conversion run. Library code raises, and only
``mnist_converter.cli`` turns an error into an exit status.
"""


class ConversionError(Exception):
    """Base class for all conversion failures."""


class FileOpenError(ConversionError):
    """An input or output file could not be opened."""


class BadMagicError(ConversionError):
    """The leading magic number does not identify the expected format."""


class TruncatedReadError(ConversionError):
    """The file ended before the declared number of bytes could be read."""


class InvalidHeaderError(ConversionError):
    """An image header declares a zero count or dimension."""


class DirectoryCreateError(ConversionError):
    """A label subdirectory could not be created."""


class PathTooLongError(ConversionError):
    """A composed output path exceeds the configured maximum length."""


class ImageWriteError(ConversionError):
    """Pixel data could not be written in full."""


class ConsistencyError(ConversionError):
    """The label and image files describe a different number of samples."""


class MissingOutputDirectoryError(ConversionError):
    """The output directory does not exist or is not a directory."""
