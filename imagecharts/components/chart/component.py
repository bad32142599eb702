"""
Chart component - fluent Image-Charts request builder.

Accumulates chart parameters and renders them either as a GET url
(no network) or through one POST round trip to the service.

Invariants:
- Each parameter key is set at most once per chart
- Values are passed through verbatim
- Every network render performs exactly one request
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from ._impl import ParameterBag, build_url, detect_format, encode_data_uri
from .models import ImageChartError, ImageChartSettings, UnknownParameterError
from .ports import ChartTransportPort

# Wire keys, spelt exactly as the service expects them.
PARAMETER_KEYS: frozenset[str] = frozenset(
    {
        "cht",
        "chd",
        "chds",
        "choe",
        "chld",
        "chxr",
        "chof",
        "chs",
        "chdl",
        "chdls",
        "chg",
        "chco",
        "chtt",
        "chts",
        "chxt",
        "chxl",
        "chxs",
        "chm",
        "chls",
        "chl",
        "chlps",
        "chma",
        "chdlp",
        "chf",
        "chbr",
        "chan",
        "chli",
        "icac",
        "ichm",
        "icff",
        "icfs",
        "iclocale",
        "icretina",
        "icqrb",
        "icqrf",
    }
)


class ImageChart:
    """
    Builder for one Image-Charts chart.

    Rendering needs a transport; imagecharts.ImageChart wires httpx by default.

    Example:
        chart = ImageChart().cht("bvs").chd("t:10,40,60").chs("700x125")
        url = chart.to_url()
        png = await chart.to_buffer()
    """

    def __init__(
        self,
        settings: ImageChartSettings | None = None,
        transport: ChartTransportPort | None = None,
    ) -> None:
        self.settings = settings or ImageChartSettings()
        self._transport = transport
        self._parameters = ParameterBag()

    @property
    def parameters(self) -> Mapping[str, str]:
        """Read-only view of the parameters set so far."""
        return MappingProxyType(dict(self._parameters))

    def _add_key(self, key: str, value: str) -> ImageChart:
        self._parameters.add(key, value)
        return self

    def set(self, key: str, value: str) -> ImageChart:
        """
        Set a parameter by its wire key.

        Raises:
            UnknownParameterError: If key is not a supported parameter
            DuplicateParameterError: If key was already set
        """
        if key not in PARAMETER_KEYS:
            raise UnknownParameterError(key)
        return self._add_key(key, value)

    # --- Rendering ---

    def to_url(self) -> str:
        """
        Build a url pointing at the rendered chart.

        No request is made. Browsers and markdown renderers cap url length,
        so prefer to_buffer() for large data sets.
        """
        return build_url(self.settings, self._parameters)

    async def to_buffer(self) -> bytes:
        """
        Render the chart on the service and return the image bytes.

        Raises:
            ChartRenderError: On a non-2xx response or a transport failure
        """
        if self._transport is None:
            raise ImageChartError("No transport configured; pass one to ImageChart")
        return await self._transport.fetch(self.settings, self._parameters)

    async def to_file(self, path: str | os.PathLike[str]) -> None:
        """Render the chart and write it to path, replacing any existing file."""
        image = await self.to_buffer()
        await asyncio.to_thread(Path(path).write_bytes, image)

    async def to_data_uri(self) -> str:
        """Render the chart as a base64 data URI (gif when animated, png otherwise)."""
        image = await self.to_buffer()
        return encode_data_uri(image, detect_format(self._parameters))

    # --- Parameters ---

    def cht(self, cht: str) -> ImageChart:
        """Chart type."""
        return self._add_key("cht", cht)

    def chd(self, chd: str) -> ImageChart:
        """Chart data, e.g. "t:10,40,60"."""
        return self._add_key("chd", chd)

    def chds(self, chds: str) -> ImageChart:
        """Data scaling."""
        return self._add_key("chds", chds)

    def choe(self, choe: str) -> ImageChart:
        """QR code output encoding."""
        return self._add_key("choe", choe)

    def chld(self, chld: str) -> ImageChart:
        """QR code error correction level and margin."""
        return self._add_key("chld", chld)

    def chxr(self, chxr: str) -> ImageChart:
        """Axis ranges."""
        return self._add_key("chxr", chxr)

    def chof(self, chof: str) -> ImageChart:
        """Output file format."""
        return self._add_key("chof", chof)

    def chs(self, chs: str) -> ImageChart:
        """Chart size as <width>x<height>."""
        return self._add_key("chs", chs)

    def chdl(self, chdl: str) -> ImageChart:
        """Legend text, one entry per series."""
        return self._add_key("chdl", chdl)

    def chdls(self, chdls: str) -> ImageChart:
        """Legend text color and font size."""
        return self._add_key("chdls", chdls)

    def chg(self, chg: str) -> ImageChart:
        """Grid lines."""
        return self._add_key("chg", chg)

    def chco(self, chco: str) -> ImageChart:
        """Series colors."""
        return self._add_key("chco", chco)

    def chtt(self, chtt: str) -> ImageChart:
        """Chart title."""
        return self._add_key("chtt", chtt)

    def chts(self, chts: str) -> ImageChart:
        """Title color and font size."""
        return self._add_key("chts", chts)

    def chxt(self, chxt: str) -> ImageChart:
        """Visible axes."""
        return self._add_key("chxt", chxt)

    def chxl(self, chxl: str) -> ImageChart:
        """Custom axis labels."""
        return self._add_key("chxl", chxl)

    def chxs(self, chxs: str) -> ImageChart:
        """Axis label styles."""
        return self._add_key("chxs", chxs)

    def chm(self, chm: str) -> ImageChart:
        """Markers and line fills."""
        return self._add_key("chm", chm)

    def chls(self, chls: str) -> ImageChart:
        """Line thickness and dash style."""
        return self._add_key("chls", chls)

    def chl(self, chl: str) -> ImageChart:
        """Pie and doughnut slice labels."""
        return self._add_key("chl", chl)

    def chlps(self, chlps: str) -> ImageChart:
        """Label position and style."""
        return self._add_key("chlps", chlps)

    def chma(self, chma: str) -> ImageChart:
        """Chart margins."""
        return self._add_key("chma", chma)

    def chdlp(self, chdlp: str) -> ImageChart:
        """Legend position."""
        return self._add_key("chdlp", chdlp)

    def chf(self, chf: str) -> ImageChart:
        """Background fill."""
        return self._add_key("chf", chf)

    def chbr(self, chbr: str) -> ImageChart:
        """Bar corner radius."""
        return self._add_key("chbr", chbr)

    def chan(self, chan: str) -> ImageChart:
        """Animation; the rendered chart becomes a gif."""
        return self._add_key("chan", chan)

    def chli(self, chli: str) -> ImageChart:
        """Doughnut inner label."""
        return self._add_key("chli", chli)

    def icac(self, icac: str) -> ImageChart:
        """Enterprise account id."""
        return self._add_key("icac", icac)

    def ichm(self, ichm: str) -> ImageChart:
        """Enterprise request signature."""
        return self._add_key("ichm", ichm)

    def icff(self, icff: str) -> ImageChart:
        """Default font family."""
        return self._add_key("icff", icff)

    def icfs(self, icfs: str) -> ImageChart:
        """Default font size."""
        return self._add_key("icfs", icfs)

    def iclocale(self, iclocale: str) -> ImageChart:
        """Localization, as an IETF language tag."""
        return self._add_key("iclocale", iclocale)

    def icretina(self, icretina: str) -> ImageChart:
        """Retina mode."""
        return self._add_key("icretina", icretina)

    def icqrb(self, icqrb: str) -> ImageChart:
        """QR code background color."""
        return self._add_key("icqrb", icqrb)

    def icqrf(self, icqrf: str) -> ImageChart:
        """QR code foreground color."""
        return self._add_key("icqrf", icqrf)
