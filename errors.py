"""
Error types raised by the cartoon headshot app.
Every error is turned into a single message string by the controller.
"""


class HeadshotError(Exception):
    """Base class for all app errors."""


class ValidationError(HeadshotError, ValueError):
    """Bad file type, missing source image or malformed image data."""


class ImageReadError(HeadshotError, OSError):
    """The uploaded file could not be read."""


class GenerationFailedError(HeadshotError):
    """The image generation request failed in transport or at the service."""


class NoImageInResponseError(GenerationFailedError):
    """The service answered without any inline image data."""
