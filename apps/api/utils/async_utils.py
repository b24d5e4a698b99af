"""Async utility functions for the ISP gateway.

Provides helpers for running blocking PyDAL and row store operations from
async Flask views using a thread pool.
"""

# flake8: noqa: E501


import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, ParamSpec, TypeVar

from flask import copy_current_request_context, current_app, has_app_context, has_request_context

logger = logging.getLogger(__name__)

# Thread pool for blocking operations (PyDAL database calls)
_executor = ThreadPoolExecutor(max_workers=20, thread_name_prefix="pydal_")

P = ParamSpec("P")
T = TypeVar("T")

_CONNECTION_ERRORS = (
    "cursor already closed",
    "connection already closed",
    "server closed the connection",
    "connection refused",
    "lost connection",
    "connection reset",
    "interfaceerror",
)


def _app_db():
    if has_app_context():
        return getattr(current_app, "db", None)
    return None


async def run_in_threadpool(
    func: Callable[P, T], *args: P.args, **kwargs: P.kwargs
) -> T:
    """
    Run a blocking function in the thread pool with Flask context support.

    PyDAL is synchronous while the gateway views are async. The request
    context is copied into the worker thread when present. Stale database
    connections are re-established and the call retried; any other error
    rolls the transaction back and propagates.

    Args:
        func: The blocking function to run
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The result of the function call

    Example:
        >>> rows = await run_in_threadpool(store.fetch_rows, "Z10")
    """
    loop = asyncio.get_running_loop()

    def safe_wrapper():
        max_retries = 2
        retry_count = 0

        while True:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                db = _app_db()
                error_msg = str(e).lower()
                is_connection_error = any(msg in error_msg for msg in _CONNECTION_ERRORS)

                if db is not None and is_connection_error and retry_count < max_retries:
                    try:
                        db._adapter.close()
                    except Exception as close_error:
                        logger.debug(f"Closing stale connection failed: {close_error}")
                    try:
                        db._adapter.reconnect()
                    except Exception as reconnect_error:
                        logger.warning(f"Database reconnect failed: {reconnect_error}")
                    retry_count += 1
                    continue

                if db is not None:
                    try:
                        db.rollback()
                    except Exception as rollback_error:
                        logger.error(f"Failed to rollback transaction: {rollback_error}")

                raise

    if has_request_context():
        wrapped_func = copy_current_request_context(safe_wrapper)
    else:
        wrapped_func = safe_wrapper

    return await loop.run_in_executor(_executor, wrapped_func)


async def run_parallel(*tasks) -> list[Any]:
    """
    Run multiple async tasks in parallel and return all results.

    Args:
        *tasks: Awaitables to run in parallel

    Returns:
        List of results in the same order as tasks

    Example:
        >>> items, payments = await run_parallel(
        ...     run_in_threadpool(store.fetch_rows, "Z03"),
        ...     run_in_threadpool(store.fetch_rows, "Z05"),
        ... )
    """
    return await asyncio.gather(*tasks)
