"""Span helpers for gateway requests and replay passes."""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Keyword arguments recorded as span attributes. Bodies and tokens never are.
_RECORDED_KWARGS = frozenset({"cache_key", "enable_cache", "with_token"})

_tracer = trace.get_tracer("whiteboard")


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Run a coroutine function inside a span.

    Exceptions mark the span as failed and propagate. Only the keyword
    arguments in _RECORDED_KWARGS are attached, prefixed with "arg.".

    Args:
        operation_name: Span name (defaults to module.funcname).

    Raises:
        TypeError: If applied to a plain function.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() needs a coroutine function, got {func!r}")
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            with _tracer.start_as_current_span(span_name) as span:
                for key in _RECORDED_KWARGS.intersection(kwargs):
                    span.set_attribute(f"arg.{key}", str(kwargs[key]))
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span (no-op when not recording)."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


def add_span_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
