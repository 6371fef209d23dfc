"""Statement execution, optionally framed by BEGIN / COMMIT / ROLLBACK.

Per call::

    single statement:  Idle -> Running -> Done
    transactional:     Idle -> Began -> Running -> Committed
                                     \\-> RolledBack -> (original error raised)

The unit of atomicity is exactly one call.  Nothing is retried.  If the
ROLLBACK itself fails, that failure is logged and the original error is
still the one the caller sees.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from withsql.execute.protocols import AsyncQueryExecutor, QueryExecutor

logger = logging.getLogger(__name__)

BEGIN = "BEGIN"
COMMIT = "COMMIT"
ROLLBACK = "ROLLBACK"


def execute(
    executor: QueryExecutor,
    query: str,
    values: Sequence[Any],
    transactional: bool = False,
) -> Any:
    """Run ``query`` with ``values`` on ``executor``.

    Args:
        executor: Synchronous query executor.
        query: Compiled SQL text (may hold several ``;``-separated statements).
        values: Values for the ``$n`` placeholders, in order.
        transactional: Wrap the call in BEGIN / COMMIT, rolling back on error.

    Returns:
        Whatever the executor returns for ``query``.
    """
    if not transactional:
        return executor.query(query, values)

    try:
        executor.query(BEGIN)
        result = executor.query(query, values)
        executor.query(COMMIT)
    except Exception:
        logger.debug("Transaction failed, rolling back")
        _rollback(executor)
        raise
    return result


async def execute_async(
    executor: AsyncQueryExecutor,
    query: str,
    values: Sequence[Any],
    transactional: bool = False,
) -> Any:
    """Async twin of :func:`execute`; awaits every executor call in order."""
    if not transactional:
        return await executor.query(query, values)

    try:
        await executor.query(BEGIN)
        result = await executor.query(query, values)
        await executor.query(COMMIT)
    except Exception:
        logger.debug("Transaction failed, rolling back")
        await _rollback_async(executor)
        raise
    return result


def _rollback(executor: QueryExecutor) -> None:
    try:
        executor.query(ROLLBACK)
    except Exception:
        logger.exception("ROLLBACK failed; re-raising the original error")


async def _rollback_async(executor: AsyncQueryExecutor) -> None:
    try:
        await executor.query(ROLLBACK)
    except Exception:
        logger.exception("ROLLBACK failed; re-raising the original error")
