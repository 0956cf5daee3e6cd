# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
from __future__ import annotations

import unittest

import numpy as np
import onnx
from onnx import helper, numpy_helper

import graphcanon
from graphcanon import testing


def _add_relu_graph(
    *,
    hidden: str = "t",
    node_names: tuple[str, str] = ("add", "relu"),
    reverse_nodes: bool = False,
    swap_add_inputs: bool = False,
    alpha: float = 0.1,
    bias: tuple[float, ...] = (1.0, 2.0),
) -> onnx.GraphProto:
    add_inputs = ["b", "x"] if swap_add_inputs else ["x", "b"]
    nodes = [
        helper.make_node("Add", add_inputs, [hidden], name=node_names[0]),
        helper.make_node("LeakyRelu", [hidden], ["y"], name=node_names[1], alpha=alpha),
    ]
    if reverse_nodes:
        nodes.reverse()
    return helper.make_graph(
        nodes,
        "add_relu",
        [helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2])],
        [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
        initializer=[numpy_helper.from_array(np.array(bias, dtype=np.float32), name="b")],
    )


def _if_graph(branch_value: str, outer_value: str = "x") -> onnx.GraphProto:
    then_branch = helper.make_graph(
        [helper.make_node("Identity", [outer_value], [branch_value])],
        "then",
        [],
        [helper.make_tensor_value_info(branch_value, onnx.TensorProto.FLOAT, [2])],
    )
    else_branch = helper.make_graph(
        [helper.make_node("Neg", [outer_value], [branch_value + "_neg"])],
        "else",
        [],
        [helper.make_tensor_value_info(branch_value + "_neg", onnx.TensorProto.FLOAT, [2])],
    )
    return helper.make_graph(
        [helper.make_node("If", ["cond"], ["y"], then_branch=then_branch, else_branch=else_branch)],
        "if_graph",
        [
            helper.make_tensor_value_info("cond", onnx.TensorProto.BOOL, []),
            helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2]),
            helper.make_tensor_value_info("z", onnx.TensorProto.FLOAT, [2]),
        ],
        [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
    )


def _default_input_graph(default: tuple[float, ...]) -> onnx.GraphProto:
    return helper.make_graph(
        [helper.make_node("Add", ["x", "b"], ["y"])],
        "default_input",
        [
            helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2]),
            helper.make_tensor_value_info("b", onnx.TensorProto.FLOAT, [2]),
        ],
        [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
        initializer=[numpy_helper.from_array(np.array(default, dtype=np.float32), name="b")],
    )


class OnnxGraphViewTest(unittest.TestCase):
    def test_canonical_form_of_simple_graph(self):
        graph = helper.make_graph(
            [helper.make_node("Relu", ["x"], ["y"])],
            "relu",
            [helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2])],
            [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
        )
        io = '{ elem_type: "FLOAT", index: 0, shape: [2] }'
        expected = "\n".join(
            [
                f"(:Input {io}) => out: ()-[: {{ input: 0, output: 0 }}]->(:Relu ) in: ",
                f"(:Output {io}) => out:  in: ()<-[: {{ output: 0 }}]-(:Relu )",
                f"(:Relu ) => out: ()-[: {{ output: 0 }}]->(:Output {io})"
                f" in: ()<-[: {{ input: 0, output: 0 }}]-(:Input {io})",
            ]
        )
        self.assertEqual(graphcanon.canonicalize(graphcanon.OnnxGraphView(graph)), expected)

    def test_view_is_a_graph_protocol(self):
        view = graphcanon.OnnxGraphView(_add_relu_graph())
        self.assertIsInstance(view, graphcanon.GraphProtocol)
        graphcanon.check_graph(view)

    def test_value_names_node_names_and_order_are_ignored(self):
        testing.assert_graphs_equal(
            graphcanon.OnnxGraphView(_add_relu_graph()),
            graphcanon.OnnxGraphView(
                _add_relu_graph(hidden="renamed", node_names=("n1", "n0"), reverse_nodes=True)
            ),
        )

    def test_input_slots_are_compared(self):
        testing.assert_graphs_not_equal(
            graphcanon.OnnxGraphView(_add_relu_graph()),
            graphcanon.OnnxGraphView(_add_relu_graph(swap_add_inputs=True)),
        )

    def test_attributes_are_compared(self):
        testing.assert_graphs_not_equal(
            graphcanon.OnnxGraphView(_add_relu_graph(alpha=0.1)),
            graphcanon.OnnxGraphView(_add_relu_graph(alpha=0.2)),
        )

    def test_initializer_values_are_compared(self):
        testing.assert_graphs_not_equal(
            graphcanon.OnnxGraphView(_add_relu_graph(bias=(1.0, 2.0))),
            graphcanon.OnnxGraphView(_add_relu_graph(bias=(1.0, 3.0))),
        )

    def test_initializer_properties(self):
        view = graphcanon.OnnxGraphView(_add_relu_graph())
        properties = dict(view.node_properties(("initializer", "b")))
        self.assertEqual(properties["data_type"], "FLOAT")
        self.assertEqual(properties["dims"], [2])
        np.testing.assert_array_equal(properties["value"], np.array([1.0, 2.0], dtype=np.float32))

    def test_node_attributes_and_domain_become_properties(self):
        graph = helper.make_graph(
            [helper.make_node("Custom", ["x"], ["y"], domain="com.example", mode="fast")],
            "custom",
            [helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, ["N"])],
            [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, ["N"])],
        )
        view = graphcanon.OnnxGraphView(graph)
        self.assertEqual(list(view.node_labels(("node", 0))), ["Custom"])
        self.assertEqual(
            dict(view.node_properties(("node", 0))), {"mode": "fast", "domain": "com.example"}
        )
        self.assertEqual(
            dict(view.node_properties(("input", 0))),
            {"index": 0, "elem_type": "FLOAT", "shape": ["N"]},
        )

    def test_subgraph_attributes_are_compared_by_content(self):
        testing.assert_graphs_equal(
            graphcanon.OnnxGraphView(_if_graph("a")),
            graphcanon.OnnxGraphView(_if_graph("b")),
        )

    def test_outer_scope_values_become_nodes(self):
        (else_branch,) = (
            attr.g for attr in _if_graph("a").node[0].attribute if attr.name == "else_branch"
        )
        view = graphcanon.OnnxGraphView(else_branch)
        outer = ("outer", "x")
        self.assertEqual(list(view.node_labels(outer)), ["OuterScope"])
        self.assertEqual(dict(view.node_properties(outer)), {"name": "x"})
        incoming = [
            (key, dict(properties)) for key, properties in view.incoming_relationships(("node", 0))
        ]
        self.assertEqual(incoming, [((outer, None), {"input": 0})])
        graphcanon.check_graph(view)

    def test_outer_scope_values_read_by_subgraphs_are_compared(self):
        testing.assert_graphs_not_equal(
            graphcanon.OnnxGraphView(_if_graph("a", outer_value="x")),
            graphcanon.OnnxGraphView(_if_graph("a", outer_value="z")),
        )

    def test_input_default_values_are_compared(self):
        testing.assert_graphs_not_equal(
            graphcanon.OnnxGraphView(_default_input_graph((1.0, 2.0))),
            graphcanon.OnnxGraphView(_default_input_graph((5.0, 9.0))),
        )

    def test_input_with_initializer_carries_default(self):
        view = graphcanon.OnnxGraphView(_default_input_graph((1.0, 2.0)))
        self.assertNotIn(("initializer", "b"), list(view.nodes()))
        default = dict(view.node_properties(("input", 1)))["default"]
        self.assertEqual(default["data_type"], "FLOAT")
        self.assertEqual(default["dims"], [2])
        np.testing.assert_array_equal(default["value"], np.array([1.0, 2.0], dtype=np.float32))
        graphcanon.check_graph(view)

    def test_attribute_named_like_the_domain_raises_value_error(self):
        node = helper.make_node("Custom", ["x"], ["y"], domain="com.example")
        node.attribute.append(helper.make_attribute("domain", "other"))
        graph = helper.make_graph(
            [node],
            "custom",
            [helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2])],
            [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
        )
        view = graphcanon.OnnxGraphView(graph)
        with self.assertRaisesRegex(ValueError, "domain"):
            view.node_properties(("node", 0))

    def test_attribute_named_like_the_domain_is_kept_for_default_domain(self):
        node = helper.make_node("Custom", ["x"], ["y"])
        node.attribute.append(helper.make_attribute("domain", "other"))
        graph = helper.make_graph(
            [node],
            "custom",
            [helper.make_tensor_value_info("x", onnx.TensorProto.FLOAT, [2])],
            [helper.make_tensor_value_info("y", onnx.TensorProto.FLOAT, [2])],
        )
        view = graphcanon.OnnxGraphView(graph)
        self.assertEqual(dict(view.node_properties(("node", 0))), {"domain": "other"})

    def test_model_proto_uses_main_graph(self):
        graph = _add_relu_graph()
        model = helper.make_model(graph)
        self.assertEqual(
            graphcanon.canonicalize(graphcanon.OnnxGraphView(model)),
            graphcanon.canonicalize(graphcanon.OnnxGraphView(graph)),
        )

    def test_unsupported_type_raises_type_error(self):
        with self.assertRaises(TypeError):
            graphcanon.OnnxGraphView(onnx.NodeProto())

    def test_unknown_node_raises_node_not_found(self):
        view = graphcanon.OnnxGraphView(_add_relu_graph())
        with self.assertRaises(graphcanon.NodeNotFoundError):
            view.node_labels(("node", 99))


if __name__ == "__main__":
    unittest.main()
