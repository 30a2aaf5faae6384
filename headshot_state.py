"""
UI state for the headshot page and the pure reducer that moves it between states.
"""

from dataclasses import dataclass, replace
from typing import Optional

IDLE = "idle"
READY = "ready"
GENERATING = "generating"

MODE_LOADING = "loading"
MODE_ERROR = "error"
MODE_RESULT = "result"
MODE_EMPTY = "empty"


@dataclass(frozen=True)
class HeadshotState:
    """Everything the page shows. Lives only for the browser session."""
    original_image: Optional[str] = None
    generated_image: Optional[str] = None
    prompt: str = ""
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def phase(self) -> str:
        if self.is_loading:
            return GENERATING
        if self.original_image is None:
            return IDLE
        return READY

    @property
    def display_mode(self) -> str:
        if self.is_loading:
            return MODE_LOADING
        if self.error:
            return MODE_ERROR
        if self.generated_image:
            return MODE_RESULT
        return MODE_EMPTY

    @property
    def can_generate(self) -> bool:
        return self.original_image is not None and not self.is_loading


@dataclass(frozen=True)
class ImageLoaded:
    data_url: str


@dataclass(frozen=True)
class ImageRejected:
    message: str


@dataclass(frozen=True)
class PromptChanged:
    text: str


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class GenerationStarted:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    data_url: str


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class GenerationFinished:
    pass


def reduce(state: HeadshotState, event) -> HeadshotState:
    """
    Apply one event to the state and return the new state.

    A new source image drops any previous result. Rejections and plain errors
    only touch the error message. Loading is switched off by
    GenerationFinished alone, so callers send it from a finally block.
    """
    if isinstance(event, ImageLoaded):
        return replace(state, original_image=event.data_url, generated_image=None, error=None)
    if isinstance(event, (ImageRejected, ErrorRaised)):
        return replace(state, error=event.message)
    if isinstance(event, PromptChanged):
        return replace(state, prompt=event.text)
    if isinstance(event, GenerationStarted):
        return replace(state, is_loading=True, error=None, generated_image=None)
    if isinstance(event, GenerationSucceeded):
        return replace(state, generated_image=event.data_url, error=None)
    if isinstance(event, GenerationFailed):
        return replace(state, error=event.message, generated_image=None)
    if isinstance(event, GenerationFinished):
        return replace(state, is_loading=False)
    raise TypeError(f"Unknown event: {event!r}")
