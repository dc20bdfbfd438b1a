"""
Parsing of ``walrus health --committee --json`` output.

The CLI may print log lines around the JSON document, so extraction tries a
direct parse first and then falls back to a bracket-balanced line scan.
"""
import json
from typing import Any

from app.component.environment import env
from app.exception.exception import ParseError
from app.model.node import UNKNOWN, NodeRecord
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("health_parser")

WALRUSCAN_OPERATOR_URL = "https://walruscan.com/mainnet/operator"

_OPENERS = "{["
_CLOSERS = "}]"


def _depth_delta(line: str) -> int:
    delta = 0
    for char in line:
        if char in _OPENERS:
            delta += 1
        elif char in _CLOSERS:
            delta -= 1
    return delta


def find_json_span(output: str) -> str | None:
    """Return the first top-level JSON object/array found line by line."""
    captured: list[str] = []
    depth = 0
    for line in output.splitlines():
        if not captured:
            if not line.strip().startswith(("{", "[")):
                continue
        captured.append(line)
        depth += _depth_delta(line)
        if depth == 0:
            break
    if not captured:
        return None
    return "\n".join(captured)


def extract_json(output: str) -> Any:
    try:
        return json.loads(output.strip())
    except json.JSONDecodeError:
        pass

    span = find_json_span(output)
    if span is None:
        raise ParseError("No JSON found in output")
    logger.debug("Extracted JSON span from mixed output", extra={"span_length": len(span)})
    try:
        return json.loads(span)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in output: {e}") from e


def _text(value: Any) -> str:
    if value in (None, "", 0, False):
        return UNKNOWN
    return value if isinstance(value, str) else str(value)


def _node_status(health_info: Any) -> str:
    ok = health_info.get("Ok") if isinstance(health_info, dict) else None
    if isinstance(ok, dict):
        return _text(ok.get("nodeStatus"))
    if ok:
        return UNKNOWN
    return "Error"


def walruscan_base_url() -> str:
    return env("WALRUSCAN_OPERATOR_URL", WALRUSCAN_OPERATOR_URL).rstrip("/")


def to_node_record(entry: Any, operator_url: str = WALRUSCAN_OPERATOR_URL) -> NodeRecord:
    if not isinstance(entry, dict):
        entry = {}
    node_id = _text(entry.get("nodeId"))
    return NodeRecord(
        node_id=node_id,
        node_url=_text(entry.get("nodeUrl")),
        node_name=_text(entry.get("nodeName")),
        node_status=_node_status(entry.get("healthInfo")),
        walruscan_url=f"{operator_url}/{node_id}",
    )


def parse_walrus_data(document: Any) -> list[NodeRecord]:
    entries = document.get("healthInfo") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise ParseError("Invalid data structure: expected healthInfo array")
    operator_url = walruscan_base_url()
    return [to_node_record(entry, operator_url) for entry in entries]


def parse_health_output(output: str) -> list[NodeRecord]:
    return parse_walrus_data(extract_json(output))
