# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Errors raised when reading graphs through the capability interface."""

from __future__ import annotations

from typing import Hashable


class NodeNotFoundError(LookupError):
    """Raised when a node id has no corresponding node in the graph.

    This signals a malformed graph, e.g. a relationship whose endpoint was
    never enumerated by ``nodes()``.

    Attributes:
        node_id: The id that could not be resolved.
    """

    def __init__(self, node_id: Hashable) -> None:
        super().__init__(f"Node id {node_id!r} not found")
        self.node_id = node_id


class InvariantError(Exception):
    """Raised when a graph implementation is not self-consistent."""
