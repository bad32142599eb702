import json
import socket
import threading
from collections.abc import Callable, Iterator
from urllib.parse import parse_qsl

import httpx
import pytest
from fastapi import FastAPI, Request, Response

from imagecharts.adapters.http.client import HttpxChartTransport
from imagecharts.components.chart import ImageChart, ImageChartSettings

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-body"
GIF_BYTES = b"GIF89a-fake-gif-body"


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replies with a canned response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or httpx.Response(200, content=PNG_BYTES)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def form(self) -> list[tuple[str, str]]:
        """Form fields of the last request, in wire order."""
        return parse_qsl(self.requests[-1].content.decode("ascii"), keep_blank_values=True)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def gif_bytes() -> bytes:
    return GIF_BYTES


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def mock_transport(handler: RecordingHandler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
def chart(mock_transport: httpx.MockTransport) -> ImageChart:
    """Chart wired to a mock transport that answers with PNG bytes."""
    return ImageChart(transport=HttpxChartTransport(transport=mock_transport))


@pytest.fixture
def chart_replying() -> Callable[[httpx.Response], tuple[ImageChart, RecordingHandler]]:
    """Factory for charts whose mock service replies with the given response."""

    def factory(response: httpx.Response) -> tuple[ImageChart, RecordingHandler]:
        recorder = RecordingHandler(response)
        transport = HttpxChartTransport(transport=httpx.MockTransport(recorder))
        return ImageChart(transport=transport), recorder

    return factory


def create_fake_service() -> FastAPI:
    """
    Fake Image-Charts endpoint.

    Renders a gif when chan is set, a png otherwise, and rejects requests
    without cht or chs the way the real service does.
    """
    app = FastAPI()
    app.state.requests = []

    @app.post("/chart")
    async def render(request: Request) -> Response:
        form = dict(parse_qsl((await request.body()).decode("ascii")))
        app.state.requests.append(
            {"form": form, "user_agent": request.headers.get("user-agent")}
        )

        errors = [
            {"message": f"{key} is required", "path": [key]}
            for key in ("cht", "chs")
            if key not in form
        ]
        if errors:
            return Response(
                status_code=400,
                headers={"x-ic-error-validation": json.dumps(errors)},
            )
        if form["cht"] == "boom":
            return Response(status_code=500)
        if "chan" in form:
            return Response(content=GIF_BYTES, media_type="image/gif")
        return Response(content=PNG_BYTES, media_type="image/png")

    return app


@pytest.fixture
def fake_service() -> FastAPI:
    return create_fake_service()


@pytest.fixture
def fake_service_transport(fake_service: FastAPI) -> HttpxChartTransport:
    return HttpxChartTransport(transport=httpx.ASGITransport(app=fake_service))


@pytest.fixture
def silent_server() -> Iterator[ImageChartSettings]:
    """A local endpoint that accepts connections but never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    port = sock.getsockname()[1]
    try:
        yield ImageChartSettings(
            host="127.0.0.1", scheme="http", port=port, path="chart", timeout=50
        )
    finally:
        sock.close()


@pytest.fixture
def slow_server() -> Iterator[ImageChartSettings]:
    """A local endpoint that answers 200 but trickles its body one byte per 100 ms."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    sock.settimeout(5)
    port = sock.getsockname()[1]
    stop = threading.Event()

    def serve() -> None:
        try:
            conn, _ = sock.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(b"HTTP/1.1 200 OK\r\nContent-Length: 30\r\n\r\n")
                for _ in range(30):
                    if stop.wait(0.1):
                        return
                    conn.sendall(b"x")
            except OSError:
                return

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield ImageChartSettings(
            host="127.0.0.1", scheme="http", port=port, path="chart", timeout=300
        )
    finally:
        stop.set()
        sock.close()
        thread.join(timeout=2)
