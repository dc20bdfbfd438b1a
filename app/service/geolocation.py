import asyncio
import socket
from typing import Any, Awaitable, Callable
from urllib.parse import urlsplit

import httpx

from app.model.node import UNKNOWN, EnrichedNode, GeoInfo, NodeRecord
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("geolocation")

IPINFO_URL_TEMPLATE = "https://ipinfo.io/{address}/json"

AddressResolver = Callable[[str], Awaitable[str]]


async def resolve_address(hostname: str) -> str:
    """Resolve ``hostname`` to its first address without blocking the loop."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    if not infos:
        raise OSError(f"no address found for {hostname}")
    return infos[0][4][0]


def hostname_from_url(node_url: str) -> str:
    """Host part of a node URL, which usually comes without a scheme (``host:port``)."""
    try:
        hostname = urlsplit(f"http://{node_url}").hostname
    except ValueError:
        hostname = None
    if not hostname:
        return node_url.split(":")[0]
    return hostname


def _field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not value:
        return UNKNOWN
    return value if isinstance(value, str) else str(value)


class GeolocationResolver:
    r"""Best-effort hostname geolocation backed by ipinfo.io.

    ``resolve`` never raises: missing credentials, DNS failures, HTTP errors
    and malformed bodies all degrade to an all-Unknown :class:`GeoInfo`.

    Args:
        token (str, optional): ipinfo.io API token. ``None`` disables lookups.
        client (httpx.AsyncClient): Client used for the lookup requests.
        url_template (str): Lookup URL with an ``{address}`` placeholder.
        address_resolver (callable, optional): Coroutine mapping a hostname
            to an address. Defaults to :func:`resolve_address`.
    """

    def __init__(
        self,
        token: str | None,
        client: httpx.AsyncClient,
        url_template: str = IPINFO_URL_TEMPLATE,
        address_resolver: AddressResolver | None = None,
    ):
        self.token = token
        self.client = client
        self.url_template = url_template
        self.address_resolver = address_resolver or resolve_address

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    async def _lookup_key(self, hostname: str) -> str:
        try:
            address = await self.address_resolver(hostname)
            logger.info(f"Resolved {hostname} to IP: {address}")
            return address
        except (OSError, UnicodeError) as e:
            logger.info(f"DNS lookup failed for {hostname}, trying direct hostname lookup", extra={"error": str(e)})
            return hostname

    async def resolve(self, hostname: str) -> GeoInfo:
        if not self.enabled:
            logger.debug("Geolocation disabled, skipping lookup", extra={"hostname": hostname})
            return GeoInfo.unknown()

        try:
            address = await self._lookup_key(hostname)
            response = await self.client.get(
                self.url_template.format(address=address),
                params={"token": self.token},
            )
            if response.is_error:
                logger.warning(f"Failed to fetch geo data for {address} (from {hostname}), status: {response.status_code}")
                if response.status_code == 401:
                    logger.error("Authentication failed - check IPINFO_TOKEN")
                return GeoInfo.unknown()

            data = response.json()
            if not isinstance(data, dict):
                logger.warning(f"Unexpected geolocation payload for {hostname} ({address})", extra={"payload_type": type(data).__name__})
                return GeoInfo.unknown()

            geo = GeoInfo(
                country=_field(data, "country"),
                region=_field(data, "region"),
                city=_field(data, "city"),
            )
            if UNKNOWN in (geo.country, geo.region, geo.city):
                logger.info(f"Incomplete geolocation data for {hostname} ({address})", extra={"geo": geo.model_dump()})
            else:
                logger.info(f"Successfully got geolocation for {hostname} ({address}): {geo.country}, {geo.region}, {geo.city}")
            return geo
        except Exception as e:
            logger.error(f"Geolocation lookup failed for hostname {hostname}: {e}")
            return GeoInfo.unknown()


async def enrich_nodes(nodes: list[NodeRecord], resolver: GeolocationResolver) -> list[EnrichedNode]:
    """Attach geolocation to each node, one node at a time and in order."""
    enriched: list[EnrichedNode] = []
    for node in nodes:
        try:
            hostname = hostname_from_url(node.node_url)
            logger.info(f"Processing node {node.node_name} with hostname: {hostname}")
            geo = await resolver.resolve(hostname)
        except Exception as e:
            logger.error(f"Error processing node {node.node_id}: {e}", exc_info=True)
            geo = GeoInfo.unknown()
        enriched.append(EnrichedNode.from_record(node, geo))
    return enriched
