# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Consistency checks for implementations of the graph protocol."""

from __future__ import annotations

__all__ = [
    "check_graph",
]

import collections
from typing import Any, Hashable

from graphcanon import _errors, _formatting, _protocols


def _relationship_key(
    source: Hashable, target: Hashable, rel_type: Any, properties
) -> tuple[Hashable, Hashable, str, str]:
    return (
        source,
        target,
        "" if rel_type is None else str(rel_type),
        _formatting.format_properties(properties),
    )


def check_graph(graph: _protocols.GraphProtocol) -> None:
    """Check that a graph reports a consistent view of itself.

    Verifies that no node id is enumerated twice, that every relationship
    endpoint is a known node, and that the outgoing and incoming views
    describe the same relationships.

    Args:
        graph: The graph to check.

    Raises:
        NodeNotFoundError: If a relationship endpoint is not a node.
        InvariantError: If node ids repeat or the two relationship views disagree.
    """
    node_ids = list(graph.nodes())
    known = set(node_ids)
    if len(known) != len(node_ids):
        duplicates = [
            node_id for node_id, count in collections.Counter(node_ids).items() if count > 1
        ]
        raise _errors.InvariantError(f"Node ids enumerated more than once: {duplicates!r}")

    outgoing: collections.Counter = collections.Counter()
    incoming: collections.Counter = collections.Counter()
    for node_id in node_ids:
        for (target, rel_type), properties in graph.outgoing_relationships(node_id):
            if target not in known:
                raise _errors.NodeNotFoundError(target)
            outgoing[_relationship_key(node_id, target, rel_type, properties)] += 1
        for (source, rel_type), properties in graph.incoming_relationships(node_id):
            if source not in known:
                raise _errors.NodeNotFoundError(source)
            incoming[_relationship_key(source, node_id, rel_type, properties)] += 1

    if outgoing != incoming:
        only_outgoing = outgoing - incoming
        only_incoming = incoming - outgoing
        source, target, rel_type, properties = next(iter(only_outgoing or only_incoming))
        view = "outgoing" if only_outgoing else "incoming"
        raise _errors.InvariantError(
            f"Relationship {source!r}-[:{rel_type} {properties}]->{target!r} is only "
            f"reported by the {view} view. "
            f"Mismatches: {sum(only_outgoing.values())} outgoing-only, "
            f"{sum(only_incoming.values())} incoming-only."
        )
