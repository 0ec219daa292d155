"""Helpers for invoking caller-supplied strategy hooks.

Every hook call goes through :func:`strategy_guard` so that a failure surfaces
as :class:`~genepool.exceptions.StrategyError` naming the hook, and through
:func:`resolve` so that hooks may be plain functions or coroutines.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
import inspect
from typing import Any, Awaitable, Callable, Iterator

from loguru import logger

from genepool.exceptions import GenePoolError, StrategyError


@contextmanager
def strategy_guard(hook: str) -> Iterator[None]:
    try:
        yield
    except GenePoolError:
        raise
    except Exception as exc:
        logger.error("[strategy] '{}' raised {}: {}", hook, type(exc).__name__, exc)
        raise StrategyError(hook, exc) from exc


def guarded(hook: str, func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Turn a sync-or-async hook into a coroutine function that runs under
    :func:`strategy_guard` and awaits the hook's result."""

    @wraps(func)
    async def wrapper(*args: Any) -> Any:
        return await call_hook(hook, func, *args)

    return wrapper


async def resolve(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def call_hook(hook: str, func: Callable[..., Any], *args: Any) -> Any:
    """Call a sync-or-async hook under :func:`strategy_guard`."""
    with strategy_guard(hook):
        return await resolve(func(*args))
