from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.component.services import get_coordinator
from app.model.node import LocatedNode
from app.model.response import LocatedNodesResponse
from app.service.refresh_coordinator import RefreshCoordinator
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("nodes_controller")

router = APIRouter(tags=["Nodes"])


@router.get("/nodes", name="node locations", response_model=LocatedNodesResponse)
@traceroot.trace()
async def nodes(coordinator: RefreshCoordinator = Depends(get_coordinator)):
    """Walrus nodes with a formatted ``city, region, country`` location."""
    result = await coordinator.get_node_data()
    located = [LocatedNode.from_enriched(node) for node in result.data]
    return LocatedNodesResponse(
        timestamp=datetime.now(timezone.utc),
        node_count=len(located),
        nodes=located,
        last_updated=result.last_updated,
        from_cache=result.from_cache,
        stale=result.stale,
    )
