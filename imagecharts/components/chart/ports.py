"""
Chart component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from .models import ImageChartSettings


class ChartTransportPort(Protocol):
    """Port for the network round trip that renders a chart."""

    async def fetch(
        self, settings: ImageChartSettings, parameters: Mapping[str, str]
    ) -> bytes:
        """
        POST the parameters to the service and return the image bytes.

        Raises:
            ChartRenderError: On a non-2xx response or a transport failure
        """
        ...
