from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

UNKNOWN = "Unknown"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeRecord(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    node_id: str = UNKNOWN
    node_url: str = UNKNOWN
    node_name: str = UNKNOWN
    node_status: str = "Error"
    walruscan_url: str = UNKNOWN


class GeoInfo(CamelModel):
    country: str = UNKNOWN
    region: str = UNKNOWN
    city: str = UNKNOWN

    @classmethod
    def unknown(cls) -> "GeoInfo":
        return cls()

    def location(self) -> str:
        """``"city, region, country"`` with blank parts rendered as Unknown."""
        return ", ".join(part or UNKNOWN for part in (self.city, self.region, self.country))


class EnrichedNode(NodeRecord):
    geo: GeoInfo = Field(default_factory=GeoInfo)

    @classmethod
    def from_record(cls, record: NodeRecord, geo: GeoInfo) -> "EnrichedNode":
        return cls(**record.model_dump(), geo=geo)


class LocatedNode(EnrichedNode):
    location: str

    @classmethod
    def from_enriched(cls, node: EnrichedNode) -> "LocatedNode":
        return cls(**node.model_dump(exclude={"geo"}), geo=node.geo, location=node.geo.location())


class CacheEntry(CamelModel):
    last_updated: datetime | None = None
    data: list[EnrichedNode] | None = None

    @field_validator("last_updated")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class NodeDataResult(CamelModel):
    data: list[EnrichedNode]
    last_updated: datetime | None = None
    from_cache: bool
    stale: bool = False
