"""Main FastMCP server: mounts the relay tool and serves the HTTP relay route."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from . import tracing
from .client import GeminiClient
from .config import get_config
from .routes import analyze_video_route, health_route
from .tools.relay import relay_server

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook. Enables tracing, tears down shared Gemini clients."""
    tracing.setup()
    yield {}
    tracing.shutdown()
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastMCP(
    "video-relay",
    instructions=(
        "Gemini video relay. Analyze a publicly reachable video file "
        "(.mp4, .mov, .avi, .webm) with a free-text prompt."
    ),
    lifespan=_lifespan,
)

app.mount(relay_server)
app.custom_route(get_config().route_path, methods=["POST", "OPTIONS"])(analyze_video_route)
app.custom_route("/health", methods=["GET"])(health_route)


def main() -> None:
    """Entry-point for ``video-relay-mcp`` console script."""
    cfg = get_config()
    if cfg.transport == "stdio":
        app.run(transport="stdio")
        return
    logger.info(
        "Serving %s on %s:%d (relay route %s)", cfg.transport, cfg.host, cfg.port, cfg.route_path
    )
    app.run(transport=cfg.transport, host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    main()
