"""
Chart functional core - parameter bag, URL assembly and error extraction.

Key behaviors:
- Parameters are write-once; a second write raises DuplicateParameterError
- URLs serialise parameters in insertion order
- The data URI format is gif when the animation key is set, png otherwise
- Error extraction never raises; it degrades to a status-code message
"""

from __future__ import annotations

import base64
import json
from collections.abc import Iterator, Mapping
from urllib.parse import urlencode

from .models import DuplicateParameterError, ImageChartSettings, ImageFormat

# --- Constants ---

ANIMATION_KEY = "chan"

VALIDATION_HEADER = "x-ic-error-validation"

USER_AGENT = "python-imagecharts"


# --- Parameter Bag ---


class ParameterBag(Mapping[str, str]):
    """
    Insertion-ordered, write-once parameter store.

    Reads go through the Mapping interface; the only write is add().
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def add(self, key: str, value: str) -> None:
        if key in self._items:
            raise DuplicateParameterError(key, self._items[key], value)
        self._items[key] = value

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ParameterBag({self._items!r})"


# --- Pure Functions ---


def build_url(settings: ImageChartSettings, parameters: Mapping[str, str]) -> str:
    """
    Build a GET url for the chart.

    Args:
        settings: Target service settings
        parameters: Chart parameters, serialised in iteration order

    Returns:
        Base URI followed by the url-encoded query string
    """
    return f"{settings.get_uri()}?{urlencode(list(parameters.items()))}"


def detect_format(parameters: Mapping[str, str]) -> ImageFormat:
    return "gif" if ANIMATION_KEY in parameters else "png"


def encode_data_uri(image: bytes, image_format: ImageFormat) -> str:
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:image/{image_format};base64,{encoded}"


def default_error_message(status_code: int, reason: str) -> str:
    return (
        f'Chart generation failed with HTTP response code "{status_code}: {reason}". '
        "No further information provided"
    )


def extract_error_message(
    status_code: int, reason: str, validation_header: str | None
) -> str:
    """
    Turn a failed response into one human readable message.

    The service describes rejected parameters in the x-ic-error-validation
    header as a JSON array of objects carrying a "message" field. Every
    non-empty message is collected and joined with " and ".

    Args:
        status_code: HTTP status code of the response
        reason: HTTP reason phrase
        validation_header: First value of the validation header, if any

    Returns:
        Joined validation messages, or the default status-code message
    """
    fallback = default_error_message(status_code, reason)
    if not validation_header:
        return fallback

    try:
        payload = json.loads(validation_header)
    except ValueError:
        return fallback

    if not isinstance(payload, list):
        return fallback

    messages = [
        entry["message"]
        for entry in payload
        if isinstance(entry, dict)
        and isinstance(entry.get("message"), str)
        and entry["message"]
    ]
    if not messages:
        return fallback
    return " and ".join(messages)
