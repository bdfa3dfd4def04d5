#!/usr/bin/env python3
"""
Boshly - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration and wires modules
2. Runs the installer and configuration validation at startup
3. Serves health endpoints and the MCP tool endpoint

All business logic is in the modules, following black box principles.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from boshly import __version__
from boshly.bootstrap import Components, build_components, run_startup
from boshly.config.provider import EnvConfigProvider
from boshly.logging_config import configure_logging, get_logging_config
from boshly.modules.api import HealthResponse
from boshly.modules.tools import create_mcp_server

logger = logging.getLogger("boshly.main")

MCP_PATH = "/mcp"


def create_app(components: Optional[Components] = None, run_startup_hooks: bool = True) -> FastAPI:
    """Create the FastAPI application around a set of components."""
    components = components or build_components()
    mcp_app = create_mcp_server(components.services).http_app(path=MCP_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Boshly...")
        if run_startup_hooks:
            # Installer may download; keep the event loop free
            await asyncio.to_thread(run_startup, components)
        async with mcp_app.lifespan(app):
            logger.info(f"Boshly started, MCP endpoint at {MCP_PATH}")
            try:
                yield
            finally:
                logger.info("Shutting down Boshly, aborting pending retries")
                # Tool calls still waiting between attempts fail fast
                components.retry_policy.interrupt()
        logger.info("Boshly shutdown complete")

    app = FastAPI(
        title="Boshly",
        description="Boshly - BOSH Director operations for agents",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.components = components

    @app.get("/healthz")
    async def healthz():
        """
        Minimal liveness endpoint.

        Returns:
            200: Service is running
        """
        return {"status": "ok"}

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Director health: CLI availability plus a connectivity check.

        Returns:
            200: Director reachable
            503: CLI missing or director unreachable
        """
        info = await asyncio.to_thread(components.health_probe.health_info)
        payload = HealthResponse(
            cli_path=components.executor.cli_path,
            install_state=components.installer.state.value,
            version=__version__,
            **info,
        )
        if info["status"] == "UP":
            return payload
        return JSONResponse(status_code=503, content=payload.model_dump(mode="json"))

    # Mounted last so the routes above take precedence
    app.mount("/", mcp_app)
    return app


def main() -> None:
    """Run the server with uvicorn."""
    api_config = EnvConfigProvider().get_api_config()
    configure_logging(api_config.log_level)
    uvicorn.run(
        "boshly.main:create_app",
        factory=True,
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )


if __name__ == "__main__":
    main()
