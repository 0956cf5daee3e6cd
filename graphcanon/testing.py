# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Utilities for comparing graphs in tests."""

from __future__ import annotations

__all__ = [
    "graphs_equal",
    "assert_graphs_equal",
    "assert_graphs_not_equal",
]

import difflib

from graphcanon import _canonicalize, _flags, _invariants, _protocols


def graphs_equal(left: _protocols.GraphProtocol, right: _protocols.GraphProtocol) -> bool:
    """Return True if the two graphs have the same canonical form.

    The graphs may be different concrete types as long as both implement
    :class:`graphcanon.GraphProtocol`.

    Raises:
        NodeNotFoundError: If either graph has a relationship to an unknown node.
    """
    return _canonicalize.canonicalize(left) == _canonicalize.canonicalize(right)


def assert_graphs_equal(
    actual: _protocols.GraphProtocol,
    expected: _protocols.GraphProtocol,
    *,
    check_invariants: bool | None = None,
    show_full_forms: bool | None = None,
) -> None:
    """Assert that two graphs are equal up to node ids and enumeration order.

    On failure the message holds a unified diff of the canonical node records
    of the two graphs.

    Args:
        actual: The graph produced by the code under test.
        expected: The reference graph.
        check_invariants: Run :func:`graphcanon.check_graph` on both graphs
            first. Defaults to the ``GRAPHCANON_CHECK_INVARIANTS`` flag.
        show_full_forms: Also include both complete canonical forms in the
            message. Defaults to the ``GRAPHCANON_SHOW_FULL_FORMS`` flag.
    """
    if check_invariants is None:
        check_invariants = _flags.CHECK_INVARIANTS
    if show_full_forms is None:
        show_full_forms = _flags.SHOW_FULL_FORMS

    if check_invariants:
        _invariants.check_graph(actual)
        _invariants.check_graph(expected)

    actual_records = _canonicalize.canonical_records(actual)
    expected_records = _canonicalize.canonical_records(expected)
    if actual_records == expected_records:
        return

    diff = difflib.unified_diff(
        expected_records, actual_records, fromfile="expected", tofile="actual", lineterm=""
    )
    error_message = "Graphs are not equal:\n" + "\n".join(diff)
    if show_full_forms:
        error_message += (
            "\n\nExpected canonical form:\n"
            + "\n".join(expected_records)
            + "\n\nActual canonical form:\n"
            + "\n".join(actual_records)
        )
    raise AssertionError(error_message)


def assert_graphs_not_equal(
    left: _protocols.GraphProtocol, right: _protocols.GraphProtocol
) -> None:
    """Assert that two graphs differ in content."""
    left_form = _canonicalize.canonicalize(left)
    if left_form == _canonicalize.canonicalize(right):
        raise AssertionError(f"Graphs are equal. Shared canonical form:\n{left_form}")
