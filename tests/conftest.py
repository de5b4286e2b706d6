import asyncio
import json

import pytest
import requests
from fastapi.testclient import TestClient

from habit_ledger.app.core.config import settings
from habit_ledger.app.core.security import create_access_token
from habit_ledger.app.main import create_app
from habit_ledger.app.services.aggregation_service import AggregationService
from habit_ledger.app.services.ledger_service import LedgerService
from habit_ledger.app.services.record_store import (
    MemoryRecordStore,
    SQLiteRecordStore,
    get_record_store,
    reset_record_store,
)

OWNER = "tester"


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryRecordStore()
    return SQLiteRecordStore(str(tmp_path / "habits.db"))


@pytest.fixture
def ledger(store):
    return LedgerService(store)


@pytest.fixture
def aggregation(store):
    return AggregationService(store)


@pytest.fixture
def app_store(monkeypatch):
    monkeypatch.setattr(settings, "store_backend", "memory")
    reset_record_store()
    yield MemoryRecordStore()
    reset_record_store()


@pytest.fixture
def app(app_store):
    application = create_app()
    application.dependency_overrides[get_record_store] = lambda: app_store
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token({'sub': OWNER})}"}


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Stands in for ``requests.Session``; replies from a queue of responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.responses.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply
