# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Structural equality of property graphs, independent of node ids and order."""

__all__ = [
    # Modules
    "testing",
    # Protocols
    "GraphProtocol",
    # Graph classes
    "PropertyGraph",
    "Relationship",
    "OnnxGraphView",
    # Canonical forms
    "canonicalize",
    "canonical_records",
    "node_signature",
    "format_value",
    "format_properties",
    # Comparison
    "graphs_equal",
    "check_graph",
    # Errors
    "NodeNotFoundError",
    "InvariantError",
]

import importlib.metadata

from graphcanon import testing
from graphcanon._canonicalize import canonical_records, canonicalize, node_signature
from graphcanon._errors import InvariantError, NodeNotFoundError
from graphcanon._formatting import format_properties, format_value
from graphcanon._graph import PropertyGraph, Relationship
from graphcanon._invariants import check_graph
from graphcanon._protocols import GraphProtocol
from graphcanon.onnx_graph import OnnxGraphView
from graphcanon.testing import graphs_equal

try:  # noqa: SIM105
    __version__ = importlib.metadata.version("graphcanon")
except importlib.metadata.PackageNotFoundError:
    # package is not installed
    pass


def __set_module() -> None:
    global_dict = globals()
    for name in __all__:
        global_dict[name].__module__ = __name__


__set_module()
