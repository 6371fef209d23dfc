"""Test fixtures: recording query executors and sample DDL."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

_FIXTURES_DIR = Path(__file__).parent


class ExecutorFailure(Exception):
    """Raised by the recording executors for statements told to fail."""


class RecordingExecutor:
    """Synchronous executor that records every call.

    Args:
        result: Value returned for every successful call.
        fail_on: Statement prefixes that raise :class:`ExecutorFailure`.
    """

    def __init__(self, result: Any = None, fail_on: Sequence[str] = ()) -> None:
        self.result = [] if result is None else result
        self.fail_on = tuple(fail_on)
        self.calls: list[tuple[str, list[Any] | None]] = []

    def query(self, text: str, values: Sequence[Any] | None = None) -> Any:
        return self._record(text, values)

    def _record(self, text: str, values: Sequence[Any] | None) -> Any:
        self.calls.append((text, list(values) if values is not None else None))
        if text.startswith(self.fail_on):
            raise ExecutorFailure(f"failed: {text}")
        return self.result

    @property
    def texts(self) -> list[str]:
        return [text for text, _ in self.calls]


class AsyncRecordingExecutor(RecordingExecutor):
    """Asynchronous twin of :class:`RecordingExecutor`."""

    async def query(self, text: str, values: Sequence[Any] | None = None) -> Any:  # type: ignore[override]
        return self._record(text, values)


def load_ddl() -> str:
    """Return the Postgres DDL used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_postgres.sql").read_text()
