import asyncio

from app.component.command import run_command
from app.exception.exception import SubprocessError, WalrusApiException
from app.model.node import EnrichedNode, NodeRecord
from app.service.geolocation import GeolocationResolver, enrich_nodes
from app.service.health_parser import parse_health_output
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("walrus_service")

WALRUS_HEALTH_COMMAND = "walrus health --committee --json"


async def execute_walrus_health(command: str | list[str] = WALRUS_HEALTH_COMMAND, timeout: float | None = None) -> list[NodeRecord]:
    """Run the walrus health command and parse its committee node list.

    Raises:
        SubprocessError: The command is missing, timed out or exited non-zero.
        ParseError: The output held no usable health document.
    """
    try:
        result = await run_command(command, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise SubprocessError(f"Command timed out after {timeout} seconds") from e
    except OSError as e:
        raise SubprocessError(f"Failed to run command: {e}") from e

    if result.stderr.strip():
        logger.warning(f"Command stderr: {result.stderr.strip()}")
    if not result.ok:
        raise SubprocessError(
            f"Command failed with exit code {result.returncode}",
            returncode=result.returncode,
            stderr=result.stderr,
        )

    try:
        return parse_health_output(result.stdout)
    except WalrusApiException as e:
        logger.error(f"Error executing command: {e.message}")
        raise


class WalrusNodeFetcher:
    """One full fetch cycle: run the health command, then geolocate every node."""

    def __init__(
        self,
        resolver: GeolocationResolver,
        command: str | list[str] = WALRUS_HEALTH_COMMAND,
        timeout: float | None = None,
    ):
        self.resolver = resolver
        self.command = command
        self.timeout = timeout

    async def fetch(self) -> list[EnrichedNode]:
        nodes = await execute_walrus_health(self.command, timeout=self.timeout)
        logger.info(f"Fetched {len(nodes)} nodes from walrus health")
        return await enrich_nodes(nodes, self.resolver)
