"""Shared fixtures for SDK tests: JSON payloads shaped like the backend's."""

import json

import httpx
import pytest
import pytest_asyncio

from rag_admin_sdk import AsyncRagAdminClient, MemorySessionStorage, Session

TIMESTAMP = "2024-05-01T10:00:00.000Z"


def user_payload(user_id="u-1", email="admin@example.com", role="ADMIN", **extra):
    return {
        "id": user_id,
        "email": email,
        "role": role,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
        **extra,
    }


def kb_payload(kb_id="kb-1", name="Manuals", **extra):
    return {
        "id": kb_id,
        "name": name,
        "description": None,
        "documents": None,
        "promptInstructions": None,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
        **extra,
    }


def license_payload(license_id="lic-1", is_active=True, expires_at=None, **extra):
    return {
        "id": license_id,
        "key": "KEY-1234",
        "isActive": is_active,
        "expiresAt": expires_at,
        "user": user_payload(user_id="u-2", email="customer@example.com", role="CUSTOMER"),
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
        **extra,
    }


def config_payload(**extra):
    return {
        "id": "cfg-1",
        "key": "global",
        "llmProvider": "OPENAI",
        "model": "gpt-4o",
        "temperature": 0.2,
        "maxTokens": 1024,
        "topP": None,
        "topK": None,
        "frequencyPenalty": None,
        "presencePenalty": None,
        "stopSequences": None,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
        **extra,
    }


class RecordingBackend:
    """MockTransport handler that records requests and replays canned responses.

    ``routes`` maps ``(method, path)`` to a response or to a callable
    taking the request and returning one.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        return route

    def json_body(self, index: int = -1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def session():
    return Session(MemorySessionStorage())


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest_asyncio.fixture
async def client(session, backend):
    client = AsyncRagAdminClient(
        base_url="https://api.test",
        session=session,
        transport=httpx.MockTransport(backend),
    )
    yield client
    await client.close()
