"""
Default wiring of the chart component to the httpx transport.
"""

from __future__ import annotations

from imagecharts.adapters.http.client import HttpxChartTransport
from imagecharts.components.chart import ChartTransportPort, ImageChartSettings
from imagecharts.components.chart import ImageChart as ChartComponent


class ImageChart(ChartComponent):
    """ImageChart that talks to the service over httpx unless given another transport."""

    def __init__(
        self,
        settings: ImageChartSettings | None = None,
        transport: ChartTransportPort | None = None,
    ) -> None:
        super().__init__(settings, transport or HttpxChartTransport())
