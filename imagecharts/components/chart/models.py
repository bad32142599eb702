"""
Chart component models.

Holds the immutable service settings and the error taxonomy shared by the
builder and the transport.

Invariants:
- ImageChartSettings never changes after construction
- A parameter key is written at most once per chart
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# --- Types ---

ImageFormat = Literal["png", "gif"]

DEFAULT_SCHEME = "https"
DEFAULT_HOST = "image-charts.com"
DEFAULT_PORT = 443
DEFAULT_PATH = "chart"
DEFAULT_TIMEOUT_MS = 8000

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}


# --- Settings ---


@dataclass(frozen=True)
class ImageChartSettings:
    """
    Connection settings for the Image-Charts service.

    The defaults target the public hosted service at
    https://image-charts.com/chart with an 8 second timeout. Pass a custom
    instance to ImageChart to talk to a different deployment; one instance
    may be shared by any number of charts.
    """

    host: str = DEFAULT_HOST
    scheme: str = DEFAULT_SCHEME
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    def get_uri(self) -> str:
        """
        Compose the fully qualified endpoint URI.

        The port is left out when it is the scheme's default port.
        """
        netloc = self.host
        if DEFAULT_PORTS.get(self.scheme.lower()) != self.port:
            netloc = f"{self.host}:{self.port}"
        return f"{self.scheme}://{netloc}/{self.path.lstrip('/')}"


# --- Errors ---


class ImageChartError(Exception):
    """Base class for chart errors."""


class DuplicateParameterError(ImageChartError):
    """Raised when a parameter key is set twice on the same chart."""

    def __init__(self, key: str, value: str, new_value: str) -> None:
        self.key = key
        self.value = value
        self.new_value = new_value
        super().__init__(f'The key {key} has already been set with value "{value}"')


class UnknownParameterError(ImageChartError):
    """Raised when a key outside the supported parameter set is used."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown chart parameter: {key}")


class ChartRenderError(ImageChartError):
    """
    Raised when the service does not return a rendered chart.

    status_code is None when the request never got a response
    (timeout, refused connection, DNS failure).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
