"""
Centralized router registration for the Walrus Container API.
"""
from fastapi import FastAPI

from app.controller import health_controller, index_controller, nodes_controller
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("router")


def register_routers(app: FastAPI, prefix: str = "") -> None:
    """
    Register all API routers with their respective prefixes and tags.

    Args:
        app: FastAPI application instance
        prefix: Optional global prefix for all routes (e.g., "/api")
    """
    routers_config = [
        {
            "router": index_controller.router,
            "tags": ["Index"],
            "description": "Service metadata and endpoint listing"
        },
        {
            "router": health_controller.router,
            "tags": ["Health"],
            "description": "Node health with geolocation"
        },
        {
            "router": nodes_controller.router,
            "tags": ["Nodes"],
            "description": "Nodes with formatted locations"
        },
    ]

    for config in routers_config:
        app.include_router(
            config["router"],
            prefix=prefix,
            tags=config["tags"]
        )
        route_count = len(config["router"].routes)
        logger.info(
            f"Registered {config['tags'][0]} router: {route_count} routes - {config['description']}"
        )

    logger.info(f"Total routers registered: {len(routers_config)}")
