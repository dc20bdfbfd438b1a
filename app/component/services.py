"""
Construction of the long-lived service objects from configuration.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request

from app.component.environment import env, env_float, to_path
from app.service.cache_store import JsonFileCacheStore
from app.service.geolocation import IPINFO_URL_TEMPLATE, GeolocationResolver
from app.service.refresh_coordinator import RefreshCoordinator
from app.service.walrus_service import WALRUS_HEALTH_COMMAND, WalrusNodeFetcher
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("services")


def build_coordinator(client: httpx.AsyncClient) -> RefreshCoordinator:
    token = env("IPINFO_TOKEN")
    if token:
        logger.info("IPINFO_TOKEN configured: true")
    else:
        logger.warning("Warning: IPINFO_TOKEN is not set in environment variables. Geolocation features will be limited.")

    resolver = GeolocationResolver(
        token=token,
        client=client,
        url_template=env("IPINFO_URL_TEMPLATE", IPINFO_URL_TEMPLATE),
    )
    fetcher = WalrusNodeFetcher(
        resolver=resolver,
        command=env("WALRUS_HEALTH_COMMAND", WALRUS_HEALTH_COMMAND),
        timeout=env_float("WALRUS_COMMAND_TIMEOUT"),
    )
    cache_file = env("CACHE_FILE", str(to_path("nodes_cache.json")))
    logger.info("Using node cache file", extra={"path": cache_file})
    return RefreshCoordinator(store=JsonFileCacheStore(cache_file), fetcher=fetcher)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with httpx.AsyncClient(timeout=httpx.Timeout(env_float("GEOLOCATION_TIMEOUT"))) as client:
        coordinator = build_coordinator(client)
        app.state.coordinator = coordinator
        try:
            yield
        finally:
            await coordinator.shutdown()
            logger.info("Node data coordinator stopped")


def get_coordinator(request: Request) -> RefreshCoordinator:
    return request.app.state.coordinator
