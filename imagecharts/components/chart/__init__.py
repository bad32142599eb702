"""
Chart component - fluent Image-Charts request builder and renderer.
"""

from ._impl import (
    ANIMATION_KEY,
    USER_AGENT,
    VALIDATION_HEADER,
    ParameterBag,
    build_url,
    default_error_message,
    detect_format,
    encode_data_uri,
    extract_error_message,
)
from .component import PARAMETER_KEYS, ImageChart
from .models import (
    ChartRenderError,
    DuplicateParameterError,
    ImageChartError,
    ImageChartSettings,
    ImageFormat,
    UnknownParameterError,
)
from .ports import ChartTransportPort

__all__ = [
    # Builder
    "ImageChart",
    "PARAMETER_KEYS",
    # Settings
    "ImageChartSettings",
    "ImageFormat",
    # Errors
    "ImageChartError",
    "DuplicateParameterError",
    "UnknownParameterError",
    "ChartRenderError",
    # Functional core
    "ParameterBag",
    "build_url",
    "detect_format",
    "encode_data_uri",
    "default_error_message",
    "extract_error_message",
    "ANIMATION_KEY",
    "USER_AGENT",
    "VALIDATION_HEADER",
    # Ports
    "ChartTransportPort",
]
