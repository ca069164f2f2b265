"""
Shared fixtures.

The spreadsheet store is replaced by ``tests.fakes.FakeSpreadsheet``; the real
``AppsScriptGateway`` talks to it through ``httpx.MockTransport``.
"""
from datetime import datetime
from typing import Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from protrack.dependencies import get_gateway, get_state_store_factory
from protrack.main import app
from protrack.repositories.state_store import InMemoryStateStore
from protrack.sheets.gateway import AppsScriptGateway
from tests.fakes import FakeSpreadsheet

BASE_URL = "https://sheets.test/exec"
FIXED_NOW = datetime(2026, 10, 19, 14, 30, 5)


@pytest.fixture
def spreadsheet() -> FakeSpreadsheet:
    return FakeSpreadsheet()


@pytest.fixture
def gateway(spreadsheet: FakeSpreadsheet) -> AppsScriptGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(spreadsheet.handle))
    return AppsScriptGateway(BASE_URL, client=client)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore("test-session")


@pytest.fixture
def client(gateway: AppsScriptGateway):
    session_data: Dict[str, str] = {}

    def memory_store(token: str) -> InMemoryStateStore:
        return InMemoryStateStore(token, data=session_data)

    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_state_store_factory] = lambda: memory_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def login_headers(client: TestClient, username: str, password: str) -> Dict[str, str]:
    resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> Dict[str, str]:
    return login_headers(client, "admin", "secret")


@pytest.fixture
def operator_headers(client: TestClient) -> Dict[str, str]:
    return login_headers(client, "op", "pw")
