"""Optional HTTP health endpoint served next to the stdio MCP server."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

HEALTH_MESSAGE = "MCP Instagram Server is running!"


def create_health_app() -> FastAPI:
    app = FastAPI(title="Instagram MCP Server", docs_url=None, redoc_url=None)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return HEALTH_MESSAGE

    return app


async def serve_health(port: int, host: str = "0.0.0.0") -> None:
    """Run the health app until cancelled.

    Access logs stay off: stdout belongs to the MCP stdio transport.
    """
    config = uvicorn.Config(
        create_health_app(),
        host=host,
        port=port,
        access_log=False,
        log_level="warning",
    )
    await uvicorn.Server(config).serve()
