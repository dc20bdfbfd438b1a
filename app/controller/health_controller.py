from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.component.services import get_coordinator
from app.model.response import NodesResponse
from app.service.refresh_coordinator import RefreshCoordinator
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("health_controller")

router = APIRouter(tags=["Health"])


@router.get("/health", name="node health", response_model=NodesResponse)
@traceroot.trace()
async def health(coordinator: RefreshCoordinator = Depends(get_coordinator)):
    """Walrus committee node health with geolocation."""
    logger.debug("Node health requested")
    result = await coordinator.get_node_data()
    logger.debug("Node health served", extra={"node_count": len(result.data), "from_cache": result.from_cache, "stale": result.stale})
    return NodesResponse(
        timestamp=datetime.now(timezone.utc),
        node_count=len(result.data),
        nodes=result.data,
        last_updated=result.last_updated,
        from_cache=result.from_cache,
        stale=result.stale,
    )
