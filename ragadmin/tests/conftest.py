"""
Shared fixtures for console tests.

Workflows are exercised against an AsyncMock client and an in-memory
notifier; nothing here touches the network or the real session file.
"""

import os

# Keep a developer's environment out of settings resolution
os.environ.pop("RAGADMIN_API_URL", None)
os.environ.pop("RAGADMIN_STORAGE_PATH", None)

import pytest

from rag_admin_sdk import MemorySessionStorage, Session

from ragadmin.adapters.notifications import MemoryNotifier
from ragadmin.core.config import get_settings
from ragadmin.tests.factories import mock_client


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def session():
    return Session(MemorySessionStorage())


@pytest.fixture
def client(session):
    return mock_client(session)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
