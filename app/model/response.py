from datetime import datetime

from app.model.node import CamelModel, EnrichedNode, LocatedNode


class NodesResponse(CamelModel):
    success: bool = True
    timestamp: datetime
    node_count: int
    nodes: list[EnrichedNode]
    last_updated: datetime | None = None
    from_cache: bool
    stale: bool = False


class LocatedNodesResponse(NodesResponse):
    nodes: list[LocatedNode]


class ServiceInfo(CamelModel):
    message: str
    version: str
    endpoints: dict[str, str]


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    timestamp: datetime
