# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Canonical string forms of property graphs.

The canonical form of a graph depends only on its content. Node ids never
appear in it: every node is described by its signature (labels and
properties), and adjacency refers to neighbors by signature as well. Sorting
at every level removes any dependence on enumeration order.

For the graph ``(a:A {x: 1})-[:REL]->(b:B)-[:REL]->(a)`` the canonical form is::

    (:A { x: 1 }) => out: ()-[:REL ]->(:B ) in: ()<-[:REL ]-(:B )
    (:B ) => out: ()-[:REL ]->(:A { x: 1 }) in: ()<-[:REL ]-(:A { x: 1 })

NOTE: This is not canonical labelling. Distinct nodes with identical
signatures are told apart only through the multiset of their neighbors'
signatures, so highly symmetric graphs that are not isomorphic may share a
canonical form.
"""

from __future__ import annotations

__all__ = [
    "canonicalize",
    "canonical_records",
    "node_signature",
]

import collections
import logging
from typing import Any, Hashable, Mapping

from graphcanon import _errors, _formatting, _protocols

logger = logging.getLogger(__name__)


def node_signature(graph: _protocols.GraphProtocol, node_id: Hashable) -> str:
    """Return the signature of a node, computed from its labels and properties only.

    Args:
        graph: The graph containing the node.
        node_id: The id of the node.

    Returns:
        A string of the form ``(:Label1:Label2 { key: value })``.
    """
    labels = _formatting.format_labels(graph.node_labels(node_id))
    properties = _formatting.format_properties(graph.node_properties(node_id))
    return f"({labels} {properties})"


def _format_rel_type(rel_type: Any) -> str:
    return "" if rel_type is None else str(rel_type)


def _resolve(signatures: Mapping[Hashable, str], node_id: Hashable) -> str:
    try:
        return signatures[node_id]
    except KeyError:
        raise _errors.NodeNotFoundError(node_id) from None


def canonical_records(graph: _protocols.GraphProtocol) -> list[str]:
    """Return the sorted canonical node records of a graph.

    Each record has the form ``Signature => out: ... in: ...`` where the
    outgoing and incoming lists hold the node's relationships rendered
    against their neighbors' signatures.

    Args:
        graph: The graph to describe.

    Returns:
        The records, sorted lexicographically.

    Raises:
        NodeNotFoundError: If a relationship points to a node that is not
            enumerated by ``graph.nodes()``.
    """
    signatures: dict[Hashable, str] = {
        node_id: node_signature(graph, node_id) for node_id in graph.nodes()
    }

    outgoing: dict[Hashable, list[str]] = collections.defaultdict(list)
    incoming: dict[Hashable, list[str]] = collections.defaultdict(list)
    relationship_count = 0
    for source, source_signature in signatures.items():
        for (target, rel_type), properties in graph.outgoing_relationships(source):
            target_signature = _resolve(signatures, target)
            description = (
                f"{_format_rel_type(rel_type)} {_formatting.format_properties(properties)}"
            )
            # A self-loop lands once in each of the node's own buckets
            outgoing[source].append(f"()-[:{description}]->{target_signature}")
            incoming[target].append(f"()<-[:{description}]-{source_signature}")
            relationship_count += 1

    records = [
        f"{signature} => out: {', '.join(sorted(outgoing.get(node_id, ())))}"
        f" in: {', '.join(sorted(incoming.get(node_id, ())))}"
        for node_id, signature in signatures.items()
    ]
    records.sort()
    logger.debug(
        "Canonicalized graph with %d nodes and %d relationships",
        len(signatures),
        relationship_count,
    )
    return records


def canonicalize(graph: _protocols.GraphProtocol) -> str:
    """Return the canonical form of a graph.

    Two graphs have the same canonical form when they hold the same nodes
    (labels and properties) connected by the same relationships (types and
    properties), regardless of node ids and of the order in which anything
    is enumerated.

    Args:
        graph: Any object implementing :class:`graphcanon.GraphProtocol`.

    Returns:
        The newline-joined, sorted canonical node records. An empty graph
        yields the empty string.

    Raises:
        NodeNotFoundError: If a relationship points to an unknown node.
    """
    return "\n".join(canonical_records(graph))
