"""Application entry point defining the HTTP API and the poll schedule."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import APIRouter, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware

from presence_tracker.application.poll_server import PollServerUseCase
from presence_tracker.application.scheduler import PollScheduler
from presence_tracker.config.logging_config import configure_logging
from presence_tracker.config.settings import Settings, get_settings
from presence_tracker.domain.models.server import DEFAULT_PORT, ServerIdentity
from presence_tracker.domain.repositories.cache_store import CacheStore
from presence_tracker.domain.repositories.server_query_client import ServerQueryClient
from presence_tracker.domain.services.cache_keys import player_data_key, server_data_key
from presence_tracker.domain.services.max_observer import MaxObserver
from presence_tracker.domain.services.presence_reconciler import PresenceReconciler
from presence_tracker.infrastructure.query.minecraft_ping_client import (
    MinecraftPingClient,
)
from presence_tracker.infrastructure.repositories.cached_server_repository import (
    CachedServerRepository,
)
from presence_tracker.infrastructure.repositories.json_cache_store import JsonCacheStore

logger = logging.getLogger(__name__)


def _epoch_seconds() -> int:
    return int(time.time())


def build_scheduler(
    settings: Settings, poll_use_case: PollServerUseCase
) -> PollScheduler:
    """Register one recurring poll per tracked server."""

    scheduler = PollScheduler()
    for identity in settings.tracked_servers:
        scheduler.register(
            f"poll:{identity.address}",
            settings.poll_interval_seconds,
            _poll_task(poll_use_case, identity),
        )
    return scheduler


def _poll_task(
    poll_use_case: PollServerUseCase, identity: ServerIdentity
) -> Callable[[], object]:
    return lambda: poll_use_case.execute(identity)


def create_app(
    settings: Settings | None = None,
    cache_store: CacheStore | None = None,
    query_client: ServerQueryClient | None = None,
    clock: Callable[[], int] = _epoch_seconds,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    cache = cache_store if cache_store is not None else JsonCacheStore(settings.cache_path)
    client = (
        query_client
        if query_client is not None
        else MinecraftPingClient(timeout=settings.query_timeout_seconds)
    )

    poll_use_case = PollServerUseCase(
        client,
        CachedServerRepository(cache),
        MaxObserver(cache),
        reconciler=PresenceReconciler(settings.presence_retention_seconds),
        clock=clock,
    )
    scheduler = build_scheduler(settings, poll_use_case)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.scheduler_enabled:
            logger.info(
                "Starting poll scheduler for %d server(s)", len(settings.tracked_servers)
            )
            scheduler.start()
        try:
            yield
        finally:
            if scheduler.is_running:
                logger.info("Stopping poll scheduler")
                await scheduler.stop()

    app = FastAPI(
        title="Server Presence Tracker API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.scheduler = scheduler
    app.state.poll_use_case = poll_use_case

    @app.get("/", status_code=status.HTTP_200_OK)
    async def get_root() -> dict[str, str]:
        """Return a simple heartbeat response for uptime monitoring."""

        return {"message": "RUNNING SERVER PRESENCE TRACKER"}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix=settings.api_prefix)

    @api_router.get("/status", status_code=status.HTTP_200_OK)
    async def get_status() -> dict:
        """Return the operational status and version of the service."""

        return {"status": "ok", "version": settings.app_version}

    @api_router.get("/servers", status_code=status.HTTP_200_OK)
    async def list_servers() -> dict:
        """List the tracked servers and the keys their data is cached under."""

        return {
            "pollIntervalSeconds": settings.poll_interval_seconds,
            "servers": [
                {
                    **identity.to_dict(),
                    "serverDataKey": server_data_key(identity),
                    "playerDataKey": player_data_key(identity),
                }
                for identity in settings.tracked_servers
            ],
        }

    @api_router.get("/servers/{hostname}/status", status_code=status.HTTP_200_OK)
    def get_server_status(hostname: str, port: int = Query(DEFAULT_PORT)) -> dict:
        """Poll the server now and return its display-ready view."""

        if not 0 < port < 65536:
            raise HTTPException(
                status_code=422,
                detail="Server port is out of range.",
            )

        result = poll_use_case.execute(ServerIdentity(hostname=hostname, port=port))
        return result.view.to_dict(now=clock())

    app.include_router(api_router)
    return app
