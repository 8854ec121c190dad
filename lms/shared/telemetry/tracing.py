"""Tracing decorator for service operations."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Only these keyword arguments are copied onto spans (never payloads or secrets).
_SAFE_SPAN_ATTR_KEYS = frozenset(
    {"user_id", "course_id", "admin_id", "notification_id", "layout_id", "kind"}
)


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator wrapping an async function in a span.

    Args:
        operation_name: Span name (defaults to module.funcname).

    Returns:
        Decorated coroutine function. Exceptions are recorded and re-raised.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        tracer = trace.get_tracer(func.__module__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            with tracer.start_as_current_span(span_name) as span:
                for key, value in kwargs.items():
                    if key in _SAFE_SPAN_ATTR_KEYS and value is not None:
                        span.set_attribute(f"arg.{key}", str(value))
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator
