# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""In-memory property graph for building test fixtures."""

from __future__ import annotations

__all__ = [
    "PropertyGraph",
    "Relationship",
]

import dataclasses
from typing import Any, Callable, Hashable, Iterable, Iterator, Mapping

from graphcanon import _errors, _protocols


@dataclasses.dataclass(frozen=True)
class Relationship:
    """A directed relationship between two nodes of a :class:`PropertyGraph`.

    Attributes:
        source: Id of the source node.
        target: Id of the target node.
        rel_type: The relationship type, or None when untyped.
        properties: The properties of the relationship.
    """

    source: Hashable
    target: Hashable
    rel_type: str | None = None
    properties: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class _NodeRecord:
    labels: list[Any]
    properties: dict[Any, Any]
    outgoing: list[Relationship] = dataclasses.field(default_factory=list)
    incoming: list[Relationship] = dataclasses.field(default_factory=list)


class PropertyGraph(_protocols.GraphProtocol):
    """A directed property multigraph held in memory.

    Nodes are added with :meth:`add_node` and connected with
    :meth:`add_relationship`. Self-loops and parallel relationships are
    allowed; every call to :meth:`add_relationship` adds a distinct
    relationship.

    Example::

        graph = PropertyGraph()
        graph.add_node("a", ["Person"], {"name": "Alice"})
        graph.add_node("b", ["Person"], {"name": "Bob"})
        graph.add_relationship("a", "b", "KNOWS", {"since": 2020})
    """

    __slots__ = ("_nodes", "_relationships")

    def __init__(self) -> None:
        self._nodes: dict[Hashable, _NodeRecord] = {}
        self._relationships: list[Relationship] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(nodes={len(self._nodes)}, "
            f"relationships={len(self._relationships)})"
        )

    def _record(self, node_id: Hashable) -> _NodeRecord:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise _errors.NodeNotFoundError(node_id) from None

    def add_node(
        self,
        node_id: Hashable,
        labels: Iterable[Any] = (),
        properties: Mapping[Any, Any] | None = None,
    ) -> Hashable:
        """Add a node to the graph.

        Args:
            node_id: A hashable id that is unique within the graph.
            labels: The labels of the node. Duplicates are dropped.
            properties: The properties of the node.

        Returns:
            The id of the node.

        Raises:
            ValueError: If a node with the same id already exists.
        """
        if node_id in self._nodes:
            raise ValueError(f"Node id {node_id!r} already exists in the graph.")
        self._nodes[node_id] = _NodeRecord(
            labels=list(dict.fromkeys(labels)),
            properties=dict(properties or {}),
        )
        return node_id

    def add_relationship(
        self,
        source: Hashable,
        target: Hashable,
        rel_type: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> Relationship:
        """Add a relationship from ``source`` to ``target``.

        Raises:
            NodeNotFoundError: If either endpoint is not in the graph.
        """
        source_record = self._record(source)
        target_record = self._record(target)
        relationship = Relationship(source, target, rel_type, dict(properties or {}))
        source_record.outgoing.append(relationship)
        target_record.incoming.append(relationship)
        self._relationships.append(relationship)
        return relationship

    def relationships(self) -> Iterator[Relationship]:
        """Return all relationships in insertion order."""
        return iter(self._relationships)

    def relabeled(
        self, mapping: Mapping[Hashable, Hashable] | Callable[[Hashable], Hashable]
    ) -> PropertyGraph:
        """Return a copy of the graph with node ids renamed.

        Args:
            mapping: A mapping or a callable from old ids to new ids. Ids
                missing from a mapping are kept as they are. The renaming
                must be injective.

        Raises:
            ValueError: If two nodes are renamed to the same id.
        """
        if callable(mapping):
            rename = mapping
        else:

            def rename(node_id: Hashable) -> Hashable:
                return mapping.get(node_id, node_id)

        graph = PropertyGraph()
        for node_id, record in self._nodes.items():
            graph.add_node(rename(node_id), record.labels, record.properties)
        for relationship in self._relationships:
            graph.add_relationship(
                rename(relationship.source),
                rename(relationship.target),
                relationship.rel_type,
                relationship.properties,
            )
        return graph

    # GraphProtocol

    def nodes(self) -> Iterator[Hashable]:
        return iter(list(self._nodes))

    def node_labels(self, node_id: Hashable) -> Iterator[Any]:
        return iter(self._record(node_id).labels)

    def node_properties(self, node_id: Hashable) -> Iterator[tuple[Any, Any]]:
        return iter(self._record(node_id).properties.items())

    def outgoing_relationships(self, node_id: Hashable) -> Iterator[_protocols.Relationship]:
        return (
            ((relationship.target, relationship.rel_type), iter(relationship.properties.items()))
            for relationship in self._record(node_id).outgoing
        )

    def incoming_relationships(self, node_id: Hashable) -> Iterator[_protocols.Relationship]:
        return (
            ((relationship.source, relationship.rel_type), iter(relationship.properties.items()))
            for relationship in self._record(node_id).incoming
        )
