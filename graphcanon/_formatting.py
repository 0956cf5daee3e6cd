# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Deterministic string rendering of labels, properties and values.

Canonical forms are compared as text, so every property value, whether it sits
on a node or on a relationship, must go through the same rendering function.
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping

import numpy as np

__all__ = [
    "format_value",
    "format_properties",
    "format_labels",
]


def _format_float(value: float) -> str:
    if math.isnan(value):
        # All NaNs are considered equal
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def format_value(value: Any) -> str:
    """Render a property value to its canonical string.

    Integers and floats are kept distinct (``1`` and ``1.0`` differ). numpy
    scalars and arrays render like the equivalent Python objects.

    Args:
        value: The value to render.

    Returns:
        The canonical rendering of the value.
    """
    if isinstance(value, np.ndarray):
        return format_value(value.tolist())
    if isinstance(value, np.generic):
        return format_value(value.item())
    if value is None:
        return "null"
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value))
    if isinstance(value, Mapping):
        entries = sorted(f"{key}: {format_value(item)}" for key, item in value.items())
        return "{" + ", ".join(entries) + "}"
    if isinstance(value, (set, frozenset)):
        return "{" + ", ".join(sorted(format_value(item) for item in value)) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    return str(value)


def format_properties(properties: Iterable[tuple[Any, Any]]) -> str:
    """Render ``(key, value)`` pairs as a canonical property block.

    Entries are rendered as ``key: value``, deduplicated and sorted. An empty
    input renders as the empty string.

    Example::

        >>> format_properties([("c", 42), ("a", 13)])
        '{ a: 13, c: 42 }'
    """
    entries = sorted({f"{key}: {format_value(value)}" for key, value in properties})
    if not entries:
        return ""
    return "{ " + ", ".join(entries) + " }"


def format_labels(labels: Iterable[Any]) -> str:
    """Render labels as sorted, deduplicated ``:Label`` segments."""
    return "".join(f":{label}" for label in sorted({str(label) for label in labels}))
