import asyncio
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="spendly-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'spendly.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-for-spendly-tests"

import pytest
from fastapi.testclient import TestClient

from spendly.core.database import Base, engine
from spendly.main import app
from spendly.models import user, category, expense  # noqa: F401


async def _reset_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client():
    asyncio.run(_reset_schema())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return (auth headers, user payload)."""

    def _register(email="alice@example.com", name="Alice", password="secret123"):
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register


@pytest.fixture
def make_category(client):
    def _make(headers, name, **fields):
        resp = client.post("/api/v1/categories", json={"name": name, **fields}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["category"]

    return _make


@pytest.fixture
def make_expense(client):
    def _make(headers, category_id, amount=10, description="Coffee", **fields):
        payload = {"amount": amount, "description": description, "category": category_id, **fields}
        resp = client.post("/api/v1/expenses", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["expense"]

    return _make
