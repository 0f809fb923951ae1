"""Shared test fixtures for flowctx tests."""

import pytest

from flowctx.config import LoggingContextConfig
from flowctx.execution import ExecutionSnapshot
from flowctx.mdc import MDC


class RecordingStore:
    """In-memory diagnostic store that records every call."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(initial or {})
        self.calls: list[tuple] = []

    def get(self, key):
        self.calls.append(("get", key))
        return self.entries.get(key)

    def put(self, key, value):
        self.calls.append(("put", key, value))
        self.entries[key] = value

    def remove(self, key):
        self.calls.append(("remove", key))
        self.entries.pop(key, None)

    def writes(self) -> list[tuple]:
        return [call for call in self.calls if call[0] != "get"]


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def activity_only_config():
    """Only the activity id role is active."""
    return LoggingContextConfig(
        activity_id="activityId",
        application_name=None,
        process_definition_id=None,
        process_instance_id=None,
        tenant_id=None,
    )


@pytest.fixture
def full_config():
    """Every role is active, business key included."""
    return LoggingContextConfig(business_key="businessKey")


@pytest.fixture
def execution():
    return ExecutionSnapshot(
        activity_id="task1",
        process_definition_id="invoice:1:abc",
        process_instance_id="pi-1",
        tenant_id="tenant-a",
        business_key="order-42",
    )


@pytest.fixture(autouse=True)
def clean_mdc():
    """Reset the default MDC around each test."""
    MDC.clear()
    yield
    MDC.clear()
