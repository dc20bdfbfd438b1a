# ========= Copyright 2026 @ WALRUS NODE API. All Rights Reserved. =========
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ========= Copyright 2026 @ WALRUS NODE API. All Rights Reserved. =========

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.model.node import EnrichedNode, GeoInfo, NodeRecord
from app.service.cache_store import InMemoryCacheStore
from app.service.refresh_coordinator import RefreshCoordinator

NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_health_document() -> dict:
    """Health document shaped like `walrus health --committee --json`."""
    return {
        "healthInfo": [
            {
                "nodeId": "0xabc",
                "nodeUrl": "walrus.node-one.example.com:9185",
                "nodeName": "Node One",
                "healthInfo": {"Ok": {"nodeStatus": "Active"}},
            },
            {
                "nodeId": "0xdef",
                "nodeUrl": "10.0.0.2:9185",
                "nodeName": "Node Two",
                "healthInfo": {"Err": "connection refused"},
            },
        ]
    }


@pytest.fixture
def sample_health_output(sample_health_document: dict) -> str:
    return json.dumps(sample_health_document, indent=2)


@pytest.fixture
def enriched_node() -> EnrichedNode:
    record = NodeRecord(
        node_id="0xabc",
        node_url="walrus.node-one.example.com:9185",
        node_name="Node One",
        node_status="Active",
        walruscan_url="https://walruscan.com/mainnet/operator/0xabc",
    )
    return EnrichedNode.from_record(record, GeoInfo(country="DE", region="Hesse", city="Frankfurt am Main"))


@pytest.fixture
def mock_fetcher(enriched_node: EnrichedNode) -> AsyncMock:
    """Fetcher whose fetch cycle returns one enriched node."""
    fetcher = AsyncMock()
    fetcher.fetch = AsyncMock(return_value=[enriched_node])
    return fetcher


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def coordinator(memory_store: InMemoryCacheStore, mock_fetcher: AsyncMock, now: datetime) -> RefreshCoordinator:
    return RefreshCoordinator(store=memory_store, fetcher=mock_fetcher, clock=lambda: now)


@pytest.fixture
def app(coordinator: RefreshCoordinator) -> FastAPI:
    """Create FastAPI test application backed by the test coordinator."""
    from app.exception.handler import register_exception_handlers
    from app.router import register_routers

    app = FastAPI()
    register_routers(app)
    register_exception_handlers(app)
    app.state.coordinator = coordinator
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def mock_environment_variables():
    """Mock environment variables for testing."""
    env_vars = {
        "IPINFO_TOKEN": "test_token",
        "WALRUS_HEALTH_COMMAND": "walrus health --committee --json",
        "WALRUSCAN_OPERATOR_URL": "https://walruscan.com/mainnet/operator",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
