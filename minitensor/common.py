"""Shared error type and small formatting helpers."""

from __future__ import annotations

from typing import Iterable


class GraphError(RuntimeError):
    """Raised when a graph, tensor or operator invariant does not hold."""


def ensure(condition: object, info: str = "") -> None:
    """Raise :class:`GraphError` carrying ``info`` unless ``condition`` holds."""
    if not condition:
        message = f"Assertion failed: {info}" if info else "Assertion failed"
        raise GraphError(message)


def _format_item(value: object) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def vec_to_string(values: Iterable[object]) -> str:
    """Render a sequence as ``[a,b,c]``."""
    return "[" + ",".join(_format_item(value) for value in values) + "]"