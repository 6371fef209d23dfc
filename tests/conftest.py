"""Shared pytest fixtures for withsql unit and integration tests."""
from __future__ import annotations

import pytest

from withsql import SQLBuilder, with_sql
from tests.fixtures import AsyncRecordingExecutor, RecordingExecutor


@pytest.fixture
def executor() -> RecordingExecutor:
    """Executor that records calls and returns one canned row."""
    return RecordingExecutor(result=[{"id": "1"}])


@pytest.fixture
def async_executor() -> AsyncRecordingExecutor:
    return AsyncRecordingExecutor(result=[{"id": "1"}])


@pytest.fixture
def sql(executor: RecordingExecutor) -> SQLBuilder:
    """Builder bound to the recording executor."""
    return with_sql(executor)
