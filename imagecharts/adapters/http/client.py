"""
Image-Charts HTTP Adapter.

Implements ChartTransportPort on top of httpx.AsyncClient.

Key behaviors:
- One form-encoded POST per render; the settings timeout caps the whole call
- 2xx returns the raw body; anything else raises ChartRenderError with the
  service's validation messages when it sent any
- Transport failures are wrapped in ChartRenderError, never retried
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

import httpx

from imagecharts.components.chart._impl import (
    USER_AGENT,
    VALIDATION_HEADER,
    extract_error_message,
)
from imagecharts.components.chart.models import ChartRenderError, ImageChartSettings

logger = logging.getLogger(__name__)


def error_from_response(response: httpx.Response) -> ChartRenderError:
    """Build a ChartRenderError from a non-2xx response."""
    header_values = response.headers.get_list(VALIDATION_HEADER)
    message = extract_error_message(
        response.status_code,
        response.reason_phrase,
        header_values[0] if header_values else None,
    )
    return ChartRenderError(message, status_code=response.status_code)


class HttpxChartTransport:
    """
    httpx implementation of ChartTransportPort.

    A fresh AsyncClient is opened per request. Pass transport to route
    requests through a custom httpx transport (MockTransport, ASGITransport,
    a proxy mount).
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.transport = transport
        self.user_agent = user_agent

    async def fetch(
        self, settings: ImageChartSettings, parameters: Mapping[str, str]
    ) -> bytes:
        uri = settings.get_uri()
        logger.debug("POST %s with %d parameters", uri, len(parameters))

        # httpx applies its timeout per phase; asyncio.timeout caps the whole call
        try:
            async with asyncio.timeout(settings.timeout_seconds):
                async with httpx.AsyncClient(
                    transport=self.transport,
                    timeout=settings.timeout_seconds,
                    headers={"User-Agent": self.user_agent},
                ) as client:
                    response = await client.post(uri, data=dict(parameters))
        except TimeoutError as e:
            logger.warning("Chart request to %s timed out after %d ms", uri, settings.timeout)
            raise ChartRenderError(
                f"Chart request to {uri} timed out after {settings.timeout} ms"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Chart request to %s failed: %r", uri, e)
            raise ChartRenderError(f"Chart request to {uri} failed: {e!r}") from e

        if not response.is_success:
            error = error_from_response(response)
            logger.warning(
                "Chart generation rejected (%s): %s", response.status_code, error.message
            )
            raise error

        return response.content
