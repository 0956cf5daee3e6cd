# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Expose ONNX graphs through the graph protocol.

This makes it possible to compare two ONNX graphs while ignoring node names,
value names and node order::

    from graphcanon import OnnxGraphView, testing

    testing.assert_graphs_equal(OnnxGraphView(model_1), OnnxGraphView(model_2))

Every ``NodeProto``, graph input, graph output, initializer and outer scope
value becomes a node. Every use of a value becomes an untyped relationship
from its producer to its consumer, carrying the producer's output index
(``output``) and the consumer's input slot (``input``).
"""

from __future__ import annotations

__all__ = [
    "OnnxGraphView",
]

import collections
import logging
from typing import Any, Hashable, Iterator

import google.protobuf.message
import onnx

from graphcanon import _canonicalize, _errors, _protocols

logger = logging.getLogger(__name__)

# Domains that name the default ONNX operator set
_DEFAULT_DOMAINS = frozenset(("", "ai.onnx"))


def _convert_attribute_value(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, onnx.TensorProto):
        return onnx.numpy_helper.to_array(value)
    if isinstance(value, onnx.GraphProto):
        return _canonicalize.canonicalize(OnnxGraphView(value))
    if isinstance(value, google.protobuf.message.Message):
        return str(value)
    if isinstance(value, list):
        return [_convert_attribute_value(item) for item in value]
    return value


def _attribute_value(attr: onnx.AttributeProto) -> Any:
    if attr.ref_attr_name:
        # Reference to an attribute of the enclosing function
        return f"@{attr.ref_attr_name}"
    return _convert_attribute_value(onnx.helper.get_attribute_value(attr))


def _dim(dim: onnx.TensorShapeProto.Dimension) -> int | str | None:
    if dim.HasField("dim_value"):
        return dim.dim_value
    if dim.HasField("dim_param"):
        return dim.dim_param
    return None


def _type_properties(value_info: onnx.ValueInfoProto) -> dict[str, Any]:
    if not value_info.HasField("type"):
        return {}
    type_proto = value_info.type
    if not type_proto.HasField("tensor_type"):
        return {"type": str(type_proto)}
    tensor_type = type_proto.tensor_type
    properties: dict[str, Any] = {
        "elem_type": onnx.TensorProto.DataType.Name(tensor_type.elem_type)
    }
    if tensor_type.HasField("shape"):
        properties["shape"] = [_dim(dim) for dim in tensor_type.shape.dim]
    return properties


def _initializer_properties(initializer: onnx.TensorProto) -> dict[str, Any]:
    return {
        "data_type": onnx.TensorProto.DataType.Name(initializer.data_type),
        "dims": list(initializer.dims),
        "value": onnx.numpy_helper.to_array(initializer),
    }


def _node_properties(node: onnx.NodeProto) -> dict[str, Any]:
    properties = {attr.name: _attribute_value(attr) for attr in node.attribute}
    for field, value in (
        ("domain", "" if node.domain in _DEFAULT_DOMAINS else node.domain),
        ("overload", getattr(node, "overload", "")),
    ):
        if not value:
            continue
        if field in properties:
            raise ValueError(
                f"Attribute '{field}' of node '{node.name}' ({node.op_type}) clashes with "
                f"the node's {field} '{value}'"
            )
        properties[field] = value
    return properties


class OnnxGraphView(_protocols.GraphProtocol):
    """A read-only view of an ONNX graph as a property graph.

    Nodes of the view:

    - one per ``NodeProto``, labelled with its ``op_type``; its attributes are
      the properties, plus ``domain`` and ``overload`` when they are not the
      defaults.
    - one per graph input (label ``Input``) and output (label ``Output``),
      with the position ``index`` and the declared ``elem_type`` and ``shape``.
      An input that also has an initializer carries it as ``default``.
    - one per initializer that is not also a graph input (label
      ``Initializer``), with ``data_type``, ``dims`` and ``value``.
    - one per value used but not produced in the graph, such as an outer
      scope value referenced by a subgraph (label ``OuterScope``), with the
      value ``name``. Relationships from it carry no ``output`` index.

    Subgraph attributes are rendered as their own canonical form.

    Args:
        graph: An ``onnx.GraphProto``, or an ``onnx.ModelProto`` whose main
            graph is used.

    Raises:
        TypeError: If ``graph`` is neither a GraphProto nor a ModelProto.

    Reading the properties of a node raises ``ValueError`` when one of its
    attributes is named ``domain`` or ``overload`` while the node also has a
    non-default domain or overload.
    """

    def __init__(self, graph: onnx.GraphProto | onnx.ModelProto) -> None:
        if isinstance(graph, onnx.ModelProto):
            graph = graph.graph
        if not isinstance(graph, onnx.GraphProto):
            raise TypeError(f"Cannot view {type(graph)} as a graph")
        self._graph = graph
        self._labels: dict[Hashable, str] = {}
        self._outgoing: dict[Hashable, list[tuple[Hashable, dict[str, int]]]] = (
            collections.defaultdict(list)
        )
        self._incoming: dict[Hashable, list[tuple[Hashable, dict[str, int]]]] = (
            collections.defaultdict(list)
        )
        # value name -> (producer id, output index or None for outer scope values)
        self._producers: dict[str, tuple[Hashable, int | None]] = {}
        self._initializers = {initializer.name: initializer for initializer in graph.initializer}
        self._build()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._graph.name!r}, nodes={len(self._labels)})"

    def _build(self) -> None:
        graph = self._graph
        for i, value_info in enumerate(graph.input):
            node_id = ("input", i)
            self._labels[node_id] = "Input"
            self._producers[value_info.name] = (node_id, 0)
        for name in self._initializers:
            if name in self._producers:
                # Default value of a graph input, reported on the Input node
                continue
            node_id = ("initializer", name)
            self._labels[node_id] = "Initializer"
            self._producers[name] = (node_id, 0)
        for i, node in enumerate(graph.node):
            node_id = ("node", i)
            self._labels[node_id] = node.op_type
            for output_index, name in enumerate(node.output):
                if name:
                    self._producers[name] = (node_id, output_index)
        for i, node in enumerate(graph.node):
            for input_index, name in enumerate(node.input):
                if name:
                    self._connect(name, ("node", i), input_index)
        for i, value_info in enumerate(graph.output):
            node_id = ("output", i)
            self._labels[node_id] = "Output"
            self._connect(value_info.name, node_id, None)

    def _connect(self, name: str, consumer: Hashable, input_index: int | None) -> None:
        if name not in self._producers:
            # Values from an enclosing graph are only known by name
            logger.debug("Value '%s' is not produced in graph '%s'", name, self._graph.name)
            node_id = ("outer", name)
            self._labels[node_id] = "OuterScope"
            self._producers[name] = (node_id, None)
        producer, output_index = self._producers[name]
        properties: dict[str, int] = {}
        if output_index is not None:
            properties["output"] = output_index
        if input_index is not None:
            properties["input"] = input_index
        self._outgoing[producer].append((consumer, properties))
        self._incoming[consumer].append((producer, properties))

    def _check(self, node_id: Hashable) -> None:
        if node_id not in self._labels:
            raise _errors.NodeNotFoundError(node_id)

    # GraphProtocol

    def nodes(self) -> Iterator[Hashable]:
        return iter(list(self._labels))

    def node_labels(self, node_id: Hashable) -> Iterator[str]:
        self._check(node_id)
        return iter((self._labels[node_id],))

    def node_properties(self, node_id: Hashable) -> Iterator[tuple[str, Any]]:
        self._check(node_id)
        kind, key = node_id
        if kind == "node":
            properties = _node_properties(self._graph.node[key])
        elif kind == "input":
            value_info = self._graph.input[key]
            properties = {"index": key, **_type_properties(value_info)}
            if value_info.name in self._initializers:
                properties["default"] = _initializer_properties(
                    self._initializers[value_info.name]
                )
        elif kind == "output":
            properties = {"index": key, **_type_properties(self._graph.output[key])}
        elif kind == "outer":
            properties = {"name": key}
        else:
            properties = _initializer_properties(self._initializers[key])
        return iter(properties.items())

    def outgoing_relationships(self, node_id: Hashable) -> Iterator[_protocols.Relationship]:
        self._check(node_id)
        return (
            ((target, None), iter(properties.items()))
            for target, properties in self._outgoing.get(node_id, ())
        )

    def incoming_relationships(self, node_id: Hashable) -> Iterator[_protocols.Relationship]:
        self._check(node_id)
        return (
            ((source, None), iter(properties.items()))
            for source, properties in self._incoming.get(node_id, ())
        )
