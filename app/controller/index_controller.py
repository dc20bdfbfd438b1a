from fastapi import APIRouter

from app.model.response import ServiceInfo

router = APIRouter(tags=["Index"])


@router.get("/", name="service info", response_model=ServiceInfo)
async def index():
    """Service metadata and the list of available endpoints."""
    return ServiceInfo(
        message="Walrus Container API",
        version="1.0.0",
        endpoints={
            "/health": "GET - Get Walrus node health and location data",
            "/nodes": "GET - Get Walrus nodes with location data",
        },
    )
