"""
Event handlers for the headshot page.
Each handler runs the slow operation and folds the outcome into a new state.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from errors import HeadshotError, ValidationError
from gemini_service import generate_cartoon_image
from headshot_state import (
    ErrorRaised,
    GenerationFailed,
    GenerationFinished,
    GenerationStarted,
    GenerationSucceeded,
    HeadshotState,
    ImageLoaded,
    ImageRejected,
    reduce,
)
from image_data import ImageBytes, data_url_bytes, read_upload, to_data_url

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "cartoon-headshot.png"
RESULT_MEDIA_TYPE = "image/png"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

Generator = Callable[[ImageBytes, str], Awaitable[ImageBytes]]


async def handle_file_change(state: HeadshotState, upload: Any) -> HeadshotState:
    """Decode a newly selected file. Nothing changes when the picker is cleared."""
    if upload is None:
        return state
    try:
        data_url = await read_upload(upload)
    except HeadshotError as e:
        return reduce(state, ImageRejected(str(e)))
    return reduce(state, ImageLoaded(data_url))


def begin_generate(state: HeadshotState) -> HeadshotState:
    """
    Validate the source image and switch loading on.

    The returned state is only loading when a request should follow;
    otherwise it carries the error message.
    """
    if not state.original_image:
        return reduce(state, ErrorRaised("Please upload an image first."))

    try:
        ImageBytes.from_data_url(state.original_image)
    except ValidationError as e:
        return reduce(state, ErrorRaised(str(e)))

    return reduce(state, GenerationStarted())


async def finish_generate(
    state: HeadshotState,
    generate: Generator = generate_cartoon_image
) -> HeadshotState:
    """
    Send the request for a state produced by begin_generate.

    Whatever happens, the returned state has loading switched off.
    """
    try:
        image = ImageBytes.from_data_url(state.original_image)
        result = await generate(image, state.prompt)
        state = reduce(state, GenerationSucceeded(to_data_url(RESULT_MEDIA_TYPE, result.data)))
    except Exception as e:
        logger.error(f"Generation failed: {str(e)}")
        state = reduce(state, GenerationFailed(str(e) or UNEXPECTED_ERROR_MESSAGE))
    finally:
        state = reduce(state, GenerationFinished())
    return state


async def handle_generate(
    state: HeadshotState,
    generate: Generator = generate_cartoon_image
) -> HeadshotState:
    """Run one generation for the current source image and prompt."""
    state = begin_generate(state)
    if not state.is_loading:
        return state
    return await finish_generate(state, generate)


def download_payload(state: HeadshotState) -> Optional[bytes]:
    """Raw bytes of the generated image, or None when there is nothing to save."""
    if not state.generated_image:
        return None
    return data_url_bytes(state.generated_image)
