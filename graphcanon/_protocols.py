# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Protocols for graphs that can be canonicalized.

This file defines the read-only interface a concrete graph representation must
expose so that it can be compared. Any class providing these methods works; it
does not need to inherit from anything.
"""

# NOTE: Every method returns a fresh iterable on each call. The canonicalizer
# materializes everything it reads, so the iterables may be lazy or not.

from __future__ import annotations

import typing
from typing import Any, Hashable, Iterable, Protocol, Tuple

if typing.TYPE_CHECKING:
    from typing_extensions import TypeAlias

NodeId: TypeAlias = Hashable
# (key, value) pair. Keys are unique per node or relationship.
Property: TypeAlias = Tuple[Any, Any]
# (other endpoint id, relationship type). The type may be None.
RelationshipKey: TypeAlias = Tuple[Hashable, Any]
Relationship: TypeAlias = Tuple[RelationshipKey, Iterable[Property]]


@typing.runtime_checkable
class GraphProtocol(Protocol):
    """A directed property multigraph.

    Node ids are opaque: they are only used to navigate the graph and never
    appear in a canonical form. Labels, property keys and relationship types
    are rendered with ``str()``; property values with
    :func:`graphcanon.format_value`.

    Implementations raise :class:`graphcanon.NodeNotFoundError` when given an
    id that :meth:`nodes` does not enumerate.
    """

    def nodes(self) -> Iterable[NodeId]:
        """Return all node ids, each exactly once."""
        ...

    def node_labels(self, node_id: NodeId) -> Iterable[Any]:
        """Return the labels of a node, in any order."""
        ...

    def node_properties(self, node_id: NodeId) -> Iterable[Property]:
        """Return the ``(key, value)`` properties of a node, in any order."""
        ...

    def outgoing_relationships(self, node_id: NodeId) -> Iterable[Relationship]:
        """Return ``((target_id, rel_type), properties)`` for relationships starting here."""
        ...

    def incoming_relationships(self, node_id: NodeId) -> Iterable[Relationship]:
        """Return ``((source_id, rel_type), properties)`` for relationships ending here."""
        ...
