"""
Gemini image generation client
Turns a source photo and an optional style instruction into a cartoon headshot
"""

import os
import base64
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from google import genai
from google.genai import types

from errors import GenerationFailedError, NoImageInResponseError
from image_data import ImageBytes

# Load environment variables
load_dotenv()

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
MODEL_ENV_VAR = "GEMINI_IMAGE_MODEL"
DEFAULT_MODEL = "gemini-2.5-flash-image"

BASE_INSTRUCTION = (
    "Generate a cartoon-style headshot based on the provided image. "
    "The style should be vibrant, friendly, and suitable for a profile picture."
)
FALLBACK_INSTRUCTION = (
    "No specific instructions were provided, so create a standard, "
    "high-quality cartoon version."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while generating the image."

# Friendly names accepted in GEMINI_IMAGE_MODEL
MODEL_MAPPINGS = {
    "nano-banana": "gemini-2.5-flash-image",
    "gemini-flash-image": "gemini-2.5-flash-image",
    "nano-banana-pro": "gemini-3-pro-image-preview",
}


def get_model_name(requested_model: Optional[str] = None) -> str:
    """
    Get the actual model name to use based on the requested model.

    Args:
        requested_model: Model id or alias; falls back to GEMINI_IMAGE_MODEL
            and then to the default image model

    Returns:
        The actual model name to use with the API
    """
    requested = requested_model or os.getenv(MODEL_ENV_VAR) or DEFAULT_MODEL
    actual = MODEL_MAPPINGS.get(requested.lower(), requested)
    if actual != requested:
        logger.info(f"Model '{requested}' mapped to '{actual}'")
    return actual


def get_api_key() -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def build_prompt(style_text: str) -> str:
    """Compose the instruction sent alongside the source photo."""
    if style_text and style_text.strip():
        return f'{BASE_INSTRUCTION} Apply the following user instructions: "{style_text}".'
    return f"{BASE_INSTRUCTION} {FALLBACK_INSTRUCTION}"


def _create_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def _first_inline_image(response: Any) -> Optional[Any]:
    """Return the inline data of the first part carrying an image, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and getattr(inline_data, "data", None):
            return inline_data
    return None


async def generate_cartoon_image(
    image: ImageBytes,
    style_text: str,
    model: Optional[str] = None,
    api_key: Optional[str] = None
) -> ImageBytes:
    """
    Ask Gemini for a cartoon version of the source photo.

    One request, no retry. The first response part holding inline image data
    is returned; later parts are ignored.

    Raises:
        NoImageInResponseError: The response held no inline image
        GenerationFailedError: Any other transport or service failure,
            including a missing API key
    """
    try:
        api_key = api_key or get_api_key()

        if not api_key:
            raise ValueError(
                f"No API key provided. Set {API_KEY_ENV_VARS[0]} environment variable or pass api_key parameter."
            )

        model_name = get_model_name(model)
        client = _create_client(api_key)

        contents = types.Content(
            role="user",
            parts=[
                types.Part.from_bytes(data=image.raw_bytes(), mime_type=image.media_type),
                types.Part.from_text(text=build_prompt(style_text)),
            ],
        )

        logger.debug(f"Calling Gemini with model: {model_name}")
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=contents,
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.IMAGE],
            ),
        )

        inline_data = _first_inline_image(response)
        if inline_data is None:
            raise NoImageInResponseError(
                "Failed to generate image: No image data found in the API response."
            )

        media_type = getattr(inline_data, "mime_type", None) or "image/png"
        logger.debug(f"Received {len(inline_data.data)} bytes of {media_type}")
        return ImageBytes(
            media_type=media_type,
            data=base64.b64encode(inline_data.data).decode("ascii"),
        )

    except NoImageInResponseError as e:
        logger.error(f"Error calling Gemini API: {str(e)}")
        raise
    except Exception as e:
        logger.error(f"Error calling Gemini API: {str(e)}")
        message = str(e)
        if message:
            raise GenerationFailedError(f"Failed to generate image: {message}") from e
        raise GenerationFailedError(UNKNOWN_ERROR_MESSAGE) from e
