"""
Image payload helpers
Converts uploaded files to data URLs and data URLs to base64 image payloads.
"""

import asyncio
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from errors import ImageReadError, ValidationError

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(image/\w+);base64,(.*)$", re.DOTALL)
MEDIA_TYPE_PATTERN = re.compile(r"^image/[\w.+-]+$")


@dataclass(frozen=True)
class ImageBytes:
    """An image as a media type plus a base64-encoded payload."""
    media_type: str
    data: str

    def __post_init__(self):
        if not MEDIA_TYPE_PATTERN.match(self.media_type or ""):
            raise ValidationError(f"Unsupported media type: {self.media_type!r}")
        try:
            base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise ValidationError(f"Image data is not valid base64: {e}") from e

    @classmethod
    def from_bytes(cls, raw: bytes, media_type: str) -> "ImageBytes":
        return cls(media_type=media_type, data=base64.b64encode(raw).decode("ascii"))

    @classmethod
    def from_data_url(cls, data_url: str) -> "ImageBytes":
        """
        Split a data URL into media type and payload.

        Only `data:image/<word>;base64,...` URLs are accepted, so types such as
        image/svg+xml are reported as invalid here.
        """
        match = DATA_URL_PATTERN.match(data_url or "")
        if not match:
            raise ValidationError("Invalid image data format.")
        try:
            return cls(media_type=match.group(1), data=match.group(2))
        except ValidationError as e:
            raise ValidationError("Invalid image data format.") from e

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_data_url(self) -> str:
        return to_data_url(self.media_type, self.data)


def to_data_url(media_type: str, b64_data: str) -> str:
    return f"data:{media_type};base64,{b64_data}"


def data_url_bytes(data_url: Optional[str]) -> Optional[bytes]:
    """Decoded payload of an image data URL, or None if it is not one."""
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        return None
    try:
        return base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        return None


def is_image_type(declared_type: str) -> bool:
    """Check the declared type only; file contents are never sniffed."""
    return bool(declared_type) and declared_type.startswith("image/")


async def read_upload(upload: Any) -> str:
    """
    Read an uploaded file into a base64 data URL.

    Args:
        upload: Object exposing `type`, `name` and `getvalue()`, such as a
            Streamlit UploadedFile

    Returns:
        `data:<type>;base64,<payload>` for the whole file

    Raises:
        ValidationError: The declared type is not an image type
        ImageReadError: The file contents could not be read
    """
    declared_type = getattr(upload, "type", "") or ""
    if not is_image_type(declared_type):
        logger.info(f"Rejected upload {getattr(upload, 'name', '?')} with type {declared_type!r}")
        raise ValidationError("Please upload a valid image file (PNG, JPG, etc.).")

    try:
        raw = await asyncio.to_thread(upload.getvalue)
    except Exception as e:
        logger.error(f"Error reading upload {getattr(upload, 'name', '?')}: {str(e)}")
        raise ImageReadError("Failed to read the image file.") from e

    if raw is None:
        raise ImageReadError("Failed to read the image file.")

    logger.info(f"Read upload {getattr(upload, 'name', '?')} ({len(raw)} bytes, {declared_type})")
    return to_data_url(declared_type, base64.b64encode(raw).decode("ascii"))
