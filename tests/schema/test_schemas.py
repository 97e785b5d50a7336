"""Schema validation tests for graph definitions and evaluation results."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import DECISIONS_DIR, decision_table_node, make_edge, make_graph, make_node
from models.schemas import (
    DecisionTableContent,
    EvaluationOptions,
    EvaluationResult,
    ExpressionContent,
    GraphDefinition,
    GraphEdge,
    GraphNode,
    SwitchContent,
    TraceEntry,
    canonical_node_type,
)


class TestGraphSchemas:
    """Test graph definition schemas."""

    def test_sample_decision_file_parses(self) -> None:
        """Test: The sample pricing decision parses from JSON."""
        text = (DECISIONS_DIR / "pricing-decision.json").read_text(encoding="utf-8")
        graph = GraphDefinition.model_validate_json(text)
        assert graph.id == "pricing-decision"
        assert len(graph.nodes) == 4
        assert len(graph.edges) == 3
        assert graph.nodes["input1"].position is not None

    def test_edge_wire_names(self) -> None:
        """Test: Edges read camelCase source/target ids."""
        edge = GraphEdge.model_validate({"id": "e1", "sourceId": "a", "targetId": "b"})
        assert edge.source_id == "a"
        assert edge.target_id == "b"
        assert edge.type == "edge"
        assert edge.model_dump(by_alias=True)["sourceId"] == "a"

    def test_edge_requires_endpoints(self) -> None:
        """Test: An edge without a target is rejected."""
        with pytest.raises(ValidationError):
            GraphEdge.model_validate({"id": "e1", "sourceId": "a"})

    def test_graph_defaults(self) -> None:
        """Test: Optional graph fields default sensibly."""
        graph = GraphDefinition.model_validate({"id": "g"})
        assert graph.nodes == {}
        assert graph.edges == []
        assert graph.description is None

    def test_input_node_lookup(self) -> None:
        """Test: The input node is found by type, short alias included."""
        graph = make_graph([make_node("a", "output"), make_node("b", "input")], [])
        node = graph.input_node()
        assert node is not None
        assert node.id == "b"

    def test_missing_input_node(self) -> None:
        """Test: No input node yields None."""
        graph = make_graph([make_node("a", "outputNode")], [])
        assert graph.input_node() is None

    def test_outgoing_edges_keep_declaration_order(self) -> None:
        """Test: Outgoing edges come back in declaration order."""
        graph = make_graph(
            [make_node("a", "inputNode"), make_node("b", "outputNode"), make_node("c", "outputNode")],
            [make_edge("a", "c", "first"), make_edge("b", "c"), make_edge("a", "b", "second")],
        )
        assert [edge.id for edge in graph.outgoing_edges("a")] == ["first", "second"]

    def test_graph_is_immutable(self) -> None:
        """Test: Graph definitions can not be reassigned."""
        graph = make_graph([make_node("a", "inputNode")], [])
        with pytest.raises(ValidationError):
            graph.name = "changed"  # type: ignore[misc]


class TestNodeContentSchemas:
    """Test decoding of node content by node type."""

    def test_expression_content_decoded(self) -> None:
        """Test: Expression node content becomes ExpressionContent."""
        node = GraphNode.model_validate(
            make_node("e", "expressionNode", {"expressions": {"a.b": "x * 2", "c": "y"}})
        )
        assert isinstance(node.content, ExpressionContent)
        assert list(node.content.expressions) == ["a.b", "c"]

    def test_decision_table_content_decoded(self) -> None:
        """Test: Decision table content becomes DecisionTableContent."""
        node = GraphNode.model_validate(
            decision_table_node("t", "collect", ["age"], ["tier"], [["age > 1", "a"]])
        )
        assert isinstance(node.content, DecisionTableContent)
        assert node.content.hit_policy == "collect"
        assert node.content.inputs[0].field == "age"
        assert node.content.inputs[0].type == "expression"
        assert node.content.rules == [["age > 1", "a"]]

    def test_switch_content_decoded_from_alias(self) -> None:
        """Test: Short type aliases select the same content variant."""
        node = GraphNode.model_validate(
            make_node("s", "switch", {"statements": [{"id": "s1", "condition": "x", "isDefault": True}]})
        )
        assert isinstance(node.content, SwitchContent)
        assert node.content.hit_policy == "first"
        assert node.content.statements[0].is_default is True

    def test_unknown_type_keeps_raw_content(self) -> None:
        """Test: Content of unknown node types is kept as a mapping."""
        node = GraphNode.model_validate(make_node("f", "functionNode", {"source": "return 1"}))
        assert node.content == {"source": "return 1"}

    def test_input_node_without_content(self) -> None:
        """Test: Input nodes carry no content."""
        node = GraphNode.model_validate(make_node("i", "inputNode"))
        assert node.content is None
        assert node.canonical_type == "inputNode"

    def test_invalid_expression_content_rejected(self) -> None:
        """Test: Expressions must map field paths to strings."""
        with pytest.raises(ValidationError):
            GraphNode.model_validate(make_node("e", "expressionNode", {"expressions": ["x"]}))

    def test_canonical_node_type(self) -> None:
        """Test: Aliases map to wire names and unknown names pass through."""
        assert canonical_node_type("decisionTable") == "decisionTableNode"
        assert canonical_node_type("outputNode") == "outputNode"
        assert canonical_node_type("customNode") == "customNode"


class TestEvaluationSchemas:
    """Test evaluation option and result schemas."""

    def test_options_defaults(self) -> None:
        """Test: Options default to no trace, no performance, 30s deadline."""
        options = EvaluationOptions()
        assert options.include_trace is False
        assert options.include_performance is False
        assert options.max_execution_time_ms == 30000

    def test_options_wire_names(self) -> None:
        """Test: Options accept the camelCase wire names."""
        options = EvaluationOptions.model_validate(
            {"includeTrace": True, "includePerformance": True, "maxExecutionTimeMs": 500}
        )
        assert options.include_trace is True
        assert options.max_execution_time_ms == 500

    def test_options_reject_non_positive_deadline(self) -> None:
        """Test: The deadline must be positive."""
        with pytest.raises(ValidationError):
            EvaluationOptions(max_execution_time_ms=0)

    def test_result_to_dict_omits_unrequested_parts(self) -> None:
        """Test: Trace and performance are omitted when not requested."""
        assert EvaluationResult(result={"a": 1.0}).to_dict() == {"result": {"a": 1.0}}

    def test_result_to_dict_trace_wire_names(self) -> None:
        """Test: Trace entries serialize with wire field names."""
        entry = TraceEntry(
            node_id="n1", name="Node", type="inputNode", input={}, output={}, execution_time_ms=1.5
        )
        data = EvaluationResult(
            result=None, trace=[entry], performance={"executionTimeMs": 2.0}
        ).to_dict()

        assert data["result"] is None
        assert data["trace"] == [
            {
                "id": "n1",
                "name": "Node",
                "type": "inputNode",
                "input": {},
                "output": {},
                "executionTime": 1.5,
            }
        ]
        assert data["performance"] == {"executionTimeMs": 2.0}
