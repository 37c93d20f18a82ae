"""
FastAPI application exposing find-unused-exports over HTTP.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from find_unused_exports import __version__
from find_unused_exports.config import FinderConfig
from find_unused_exports.core.exceptions import FindUnusedExportsError
from find_unused_exports.core.logging_utils import configure_logging
from find_unused_exports.server.routers import analyze, system

logger = logging.getLogger(__name__)

app = FastAPI(
    title="find-unused-exports API",
    description="API for finding unused ECMAScript module exports in a project.",
    version=__version__,
)
app.state.root_path = Path.cwd()
app.state.config = None
app.state.start_time = time.time()

app.include_router(system.router)
app.include_router(analyze.router)


@app.exception_handler(FindUnusedExportsError)
async def find_unused_exports_exception_handler(request: Request, exc: FindUnusedExportsError):
    logger.warning("Request to %s failed: %s", request.url.path, exc.message)
    return JSONResponse(status_code=400, content={"error": exc.to_dict()})


@dataclass
class FinderAPIServer:
    """Server that runs the find-unused-exports FastAPI application."""

    root: Path
    host: str = "127.0.0.1"
    port: int = 8765
    config: Optional[FinderConfig] = None

    def start(self) -> None:
        """Start the API server using uvicorn."""
        app.state.root_path = self.root
        app.state.config = self.config or FinderConfig(project_root=self.root)
        app.state.start_time = time.time()

        active_logging = app.state.config.logging
        active_log_level = configure_logging(active_logging.level, log_file=active_logging.path)

        logger.info("Starting find-unused-exports API server on %s:%s for root %s", self.host, self.port, self.root)
        try:
            uvicorn.run(
                app,
                host=self.host,
                port=self.port,
                log_level=active_log_level.lower(),
            )
        except Exception as e:
            logger.error("Server crashed: %s", e)
            raise
