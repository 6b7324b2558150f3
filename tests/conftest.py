"""Pytest configuration for global fixtures and environment setup."""
from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

os.environ["API_KEY"] = os.environ.get("API_KEY") or "test-shared-secret"
os.environ["MONGODB_URL"] = os.environ.get("MONGODB_URL") or "mongodb://localhost:27017"

from app.main import app
from app.schemas.notification import NotificationContent
from app.schemas.recipient import Recipient

API_KEY = os.environ["API_KEY"]


def make_token(i: int) -> str:
    return f"fcm-token-{i:030d}"


class FakeDirectory:
    """In-memory stand-in for the recipient collection."""

    def __init__(self, tokens: list[Any] | None = None, error: Exception | None = None):
        self.recipients = [Recipient(id=str(i), token=t) for i, t in enumerate(tokens or [])]
        self.error = error
        self.calls = 0

    async def list_recipients(self) -> list[Recipient]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.recipients


class FakeSender:
    """Records multicast batches; tokens listed in ``rejected`` count as failures."""

    def __init__(self, rejected: set[str] | None = None, fail_on_call: int | None = None):
        self.rejected = rejected or set()
        self.fail_on_call = fail_on_call
        self.batches: list[list[str]] = []

    async def send_multicast(self, tokens: list[str], content: NotificationContent):
        if self.fail_on_call is not None and len(self.batches) == self.fail_on_call:
            raise RuntimeError("FCM unavailable")
        self.batches.append(list(tokens))
        failures = sum(1 for t in tokens if t in self.rejected)
        return SimpleNamespace(success_count=len(tokens) - failures, failure_count=failures)


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY}


@pytest.fixture
def content() -> NotificationContent:
    return NotificationContent(
        title="Hi", body="there", data={"title": "Hi", "body": "there", "type": "info"}
    )
