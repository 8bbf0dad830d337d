"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from yogaflow import __version__
from yogaflow.api.errors import register_exception_handlers
from yogaflow.api.routes import generation, poses, sequences
from yogaflow.backend import TextBackend, create_backend
from yogaflow.config import AppConfig, load_config
from yogaflow.pipeline.coalesce import RequestCoalescer
from yogaflow.store import SequenceStore, create_store

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    *,
    store: SequenceStore | None = None,
    backend: TextBackend | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Parameters
    ----------
    config:
        Application configuration; loaded from env/TOML when omitted.
    store:
        Store to use instead of opening ``config.database.url``.
    backend:
        Text backend to use instead of the one named by ``config.llm``.
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_store = store is None
        app.state.store = store if store is not None else create_store(config.database)
        app.state.backend = backend if backend is not None else create_backend(config.llm)
        await app.state.backend.connect()
        logger.info(
            "yogaflow %s ready (backend=%s)", __version__, type(app.state.backend).__name__,
        )
        try:
            yield
        finally:
            await app.state.backend.disconnect()
            if owns_store:
                app.state.store.close()

    app = FastAPI(title="yogaflow", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.coalescer = RequestCoalescer(ttl=config.generation.coalesce_ttl_seconds)

    register_exception_handlers(app)
    app.include_router(generation.router)
    app.include_router(sequences.router)
    app.include_router(poses.router)
    return app
