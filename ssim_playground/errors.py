"""
Failure signals raised by the comparison engine.
Every error is scoped to a single comparison request.
"""


class ComparisonError(Exception):
    """Base class for all comparison failures."""


class DimensionMismatchError(ComparisonError, ValueError):
    """The two images cannot be brought to the same width and height."""


class UnsupportedBandCountError(ComparisonError, ValueError):
    """An image has a band count outside {1, 2, 3, 4}."""


class InvalidThresholdError(ComparisonError, ValueError):
    """The threshold is not a number in [0, 1]."""


class ComparisonCancelledError(ComparisonError):
    """The caller cancelled the comparison before it finished."""


class ComparisonTimeoutError(ComparisonCancelledError, TimeoutError):
    """The comparison ran past its deadline."""


class ImageDecodeError(ComparisonError, ValueError):
    """Uploaded bytes or a file on disk could not be decoded as an image."""
