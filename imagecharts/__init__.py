"""
imagecharts - Python client for the Image-Charts rendering service.
"""

from imagecharts.app_shell.chart import ImageChart
from imagecharts.components.chart import (
    PARAMETER_KEYS,
    ChartRenderError,
    DuplicateParameterError,
    ImageChartError,
    ImageChartSettings,
    UnknownParameterError,
)

__version__ = "0.1.0"

__all__ = [
    "ImageChart",
    "ImageChartSettings",
    "PARAMETER_KEYS",
    "ImageChartError",
    "DuplicateParameterError",
    "UnknownParameterError",
    "ChartRenderError",
]
