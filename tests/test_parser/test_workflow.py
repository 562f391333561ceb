"""Tests for the workflow path (workflow module).

Covers:
- Each format end-to-end from sample responses
- Degenerate input (empty, whitespace, prose)
- Structured JSON fast path and its fall-through cases
- Format hints
- Visualization envelope and the chat-mode gate
- Graph invariants and determinism
"""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from deliverable_parser.config import ParserConfig
from deliverable_parser.parser.models import (
    NodeType,
    ParsedWorkflow,
    StructuredInput,
    TextDerived,
    WorkflowFormat,
    WorkflowInput,
)
from deliverable_parser.parser.workflow import (
    generate_workflow_visualization,
    interpret_workflow_input,
    parse_workflow,
    to_visualization,
)


pytestmark = pytest.mark.unit


def _assert_well_formed(workflow: ParsedWorkflow) -> None:
    ids = [n.id for n in workflow.nodes]
    assert len(ids) == len(set(ids))
    assert len({e.id for e in workflow.edges}) == len(workflow.edges)
    for edge in workflow.edges:
        assert edge.source in ids
        assert edge.target in ids
    sources = {e.source for e in workflow.edges}
    for node in workflow.nodes:
        if node.type != NodeType.END:
            assert node.id in sources, f"{node.id} has no outgoing edge"


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class TestFormats:
    def test_linear(self, linear_response):
        workflow = parse_workflow(linear_response)
        assert workflow.layout == "linear-process"
        assert [n.label for n in workflow.nodes] == [
            "Start",
            "Collect employee documents",
            "Set up accounts",
            "Schedule orientation",
            "Complete",
        ]
        assert workflow.nodes[1].substeps == ["ID card", "Tax forms"]
        assert len(workflow.edges) == 4
        _assert_well_formed(workflow)

    def test_decision_tree(self, decision_response):
        workflow = parse_workflow(decision_response)
        assert workflow.layout == "decision-tree"

        decision = next(n for n in workflow.nodes if n.type == NodeType.DECISION)
        assert decision.label == "Manager decision on the claim"
        outgoing = workflow.outgoing(decision.id)
        assert sorted(e.label for e in outgoing) == ["No", "Yes"]
        assert len({e.target for e in outgoing}) == 2
        assert len(workflow.edges) == 7
        _assert_well_formed(workflow)

    def test_parallel(self, parallel_response):
        workflow = parse_workflow(parallel_response)
        assert workflow.layout == "parallel-workflow"
        assert len(workflow.outgoing("start")) == 3
        assert len(workflow.edges) == 8
        _assert_well_formed(workflow)

    def test_approval(self, approval_response):
        workflow = parse_workflow(approval_response)
        assert workflow.layout == "approval-workflow"
        review = workflow.nodes[2]
        assert review.label == "Review by department head"
        assert review.type == NodeType.DECISION
        assert len(workflow.edges) == len(workflow.nodes) - 1
        _assert_well_formed(workflow)

    def test_deliverable_outside_text_ignored(self):
        text = "- stray bullet\n<DELIVERABLE>\n1. Only step\n</DELIVERABLE>\n- another"
        workflow = parse_workflow(text)
        assert [n.label for n in workflow.nodes] == ["Start", "Only step", "Complete"]


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------


class TestDegenerate:
    @pytest.mark.parametrize("text", ["", "   \n\t  ", "We should think about this carefully."])
    def test_minimal_graph(self, text):
        workflow = parse_workflow(text)
        assert [(n.id, n.type) for n in workflow.nodes] == [
            ("start", NodeType.START),
            ("end", NodeType.END),
        ]
        assert len(workflow.edges) == 1
        assert workflow.edges[0].source == "start"
        assert workflow.edges[0].target == "end"
        assert workflow.layout == "linear-process"

    @pytest.mark.parametrize("hint", list(WorkflowFormat))
    def test_minimal_graph_in_every_format(self, hint):
        workflow = parse_workflow("", format_hint=hint)
        assert len(workflow.nodes) == 2
        assert len(workflow.edges) == 1


# ---------------------------------------------------------------------------
# Structured input
# ---------------------------------------------------------------------------


class TestStructuredInput:
    def test_json_graph_used_as_is(self, json_workflow_response):
        workflow = parse_workflow(json_workflow_response)
        assert [n.id for n in workflow.nodes] == ["a", "b", "c"]
        assert workflow.nodes[0].type == NodeType.START
        assert workflow.nodes[1].label == "Do work"
        assert workflow.nodes[1].type == NodeType.STEP
        assert workflow.nodes[2].label == "Step 3"
        assert [e.id for e in workflow.edges] == ["edge-0", "edge-1"]
        assert workflow.edges[1].label == "done"
        assert workflow.layout == "parallel-workflow"

    def test_interpretation_is_tagged(self, json_workflow_response):
        assert isinstance(interpret_workflow_input(json_workflow_response), StructuredInput)
        assert isinstance(interpret_workflow_input("1. Do A"), TextDerived)

    def test_json_graph_is_well_formed(self, json_workflow_response):
        workflow = parse_workflow(json_workflow_response)
        types = [n.type for n in workflow.nodes]
        assert NodeType.START in types
        assert NodeType.END in types
        _assert_well_formed(workflow)

    def test_default_layout_and_ids(self):
        text = (
            '{"nodes": [{"type": "start"}, {"type": "end"}],'
            ' "edges": [{"source": "node-0", "target": "node-1"}]}'
        )
        workflow = parse_workflow(text)
        assert [n.id for n in workflow.nodes] == ["node-0", "node-1"]
        assert workflow.layout == "linear-process"
        _assert_well_formed(workflow)

    def test_unknown_node_type_becomes_step(self):
        text = (
            '{"nodes": [{"id": "s", "type": "start"},'
            ' {"id": "x", "type": "gateway", "label": "X"},'
            ' {"id": "e", "type": "end"}],'
            ' "edges": [{"source": "s", "target": "x"}, {"source": "x", "target": "e"}]}'
        )
        assert parse_workflow(text).nodes[1].type == NodeType.STEP

    @pytest.mark.parametrize(
        "text",
        [
            '{"nodes": [{"id": "a"}, {"id": "b"}], "edges": []}',
            '{"nodes": [{"id": "a", "type": "start"}, {"id": "b"}],'
            ' "edges": [{"source": "a", "target": "b"}]}',
            '{"nodes": [{"id": "a"}, {"id": "b", "type": "end"}],'
            ' "edges": [{"source": "a", "target": "b"}]}',
        ],
    )
    def test_graph_without_start_or_end_falls_through(self, text):
        assert isinstance(interpret_workflow_input(text), TextDerived)
        workflow = parse_workflow(text)
        assert [n.id for n in workflow.nodes] == ["start", "end"]
        _assert_well_formed(workflow)

    def test_dead_end_node_falls_through(self):
        text = (
            '{"nodes": [{"id": "s", "type": "start"}, {"id": "x"}, {"id": "e", "type": "end"}],'
            ' "edges": [{"source": "s", "target": "x"}, {"source": "s", "target": "e"}]}'
        )
        assert isinstance(interpret_workflow_input(text), TextDerived)

    def test_interpretation_validates_as_tagged_union(self):
        adapter = TypeAdapter(WorkflowInput)
        assert isinstance(adapter.validate_python({"kind": "text", "text": "x"}), TextDerived)
        with pytest.raises(ValidationError):
            adapter.validate_python({"kind": "image", "text": "x"})

    def test_malformed_json_falls_through(self):
        result = interpret_workflow_input('{"nodes": [oops')
        assert isinstance(result, TextDerived)
        workflow = parse_workflow('{"nodes": [oops')
        assert [n.id for n in workflow.nodes] == ["start", "end"]

    def test_dangling_edge_falls_through(self):
        text = '{"nodes": [{"id": "a"}], "edges": [{"source": "a", "target": "zzz"}]}'
        assert isinstance(interpret_workflow_input(text), TextDerived)

    def test_missing_edges_key_falls_through(self):
        assert isinstance(interpret_workflow_input('{"nodes": [{"id": "a"}]}'), TextDerived)

    def test_empty_nodes_fall_through(self):
        assert isinstance(interpret_workflow_input('{"nodes": [], "edges": []}'), TextDerived)


# ---------------------------------------------------------------------------
# Format hints
# ---------------------------------------------------------------------------


class TestFormatHint:
    def test_hint_overrides_classification(self, linear_response):
        workflow = parse_workflow(linear_response, format_hint="parallel")
        assert workflow.layout == "parallel-workflow"
        assert len(workflow.outgoing("start")) == 3

    def test_unknown_hint_ignored(self, parallel_response):
        workflow = parse_workflow(parallel_response, format_hint="spiral")
        assert workflow.layout == "parallel-workflow"

    def test_config_caps_applied(self, parallel_response):
        config = ParserConfig(max_parallel_branches=2)
        workflow = parse_workflow(parallel_response, config=config)
        assert len(workflow.outgoing("start")) == 2


# ---------------------------------------------------------------------------
# Visualization
# ---------------------------------------------------------------------------


class TestVisualization:
    def test_envelope(self, decision_response):
        workflow = parse_workflow(decision_response)
        viz = to_visualization(workflow)
        assert viz.type == "workflow"
        assert viz.title == "Decision Tree Workflow"
        assert viz.data == []
        assert viz.config.nodes == workflow.nodes
        assert viz.config.edges == workflow.edges
        assert viz.config.layout == "decision-tree"

    def test_unknown_layout_title(self):
        viz = to_visualization(ParsedWorkflow(nodes=[], edges=[], layout="radial"))
        assert viz.title == "Workflow"

    def test_workflow_mode_generates(self, approval_response):
        viz = generate_workflow_visualization(approval_response, chat_mode="workflow")
        assert viz is not None
        assert viz.title == "Approval Workflow Workflow"

    @pytest.mark.parametrize("mode", [None, "standard", "checklist", "Workflow"])
    def test_other_modes_skip(self, approval_response, mode):
        assert generate_workflow_visualization(approval_response, chat_mode=mode) is None

    def test_chat_mode_configurable(self, approval_response):
        config = ParserConfig(workflow_chat_mode="flow")
        assert generate_workflow_visualization(
            approval_response, chat_mode="flow", config=config
        ) is not None


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestDeterminism:
    def test_same_input_same_output(self, decision_response, parallel_response):
        for text in (decision_response, parallel_response):
            assert parse_workflow(text) == parse_workflow(text)

    def test_result_is_frozen(self, linear_response):
        workflow = parse_workflow(linear_response)
        with pytest.raises(ValidationError):
            workflow.layout = "other"
