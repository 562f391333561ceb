"""Workflow extraction from LLM responses.

Ties the pipeline together: structured-JSON fast path, normalisation, format
classification, step extraction, node typing, edge synthesis, and the
visualization envelope. Every function here is total over ``str`` input;
malformed or empty text degrades to a minimal start/end graph.
"""

from __future__ import annotations

import json
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

from deliverable_parser.config import DEFAULT_CONFIG, ParserConfig

from .classifier import classify_format, resolve_format_hint
from .edges import synthesize_edges
from .models import (
    NodeType,
    ParsedWorkflow,
    StructuredInput,
    TextDerived,
    VisualizationConfig,
    VisualizationData,
    WorkflowEdge,
    WorkflowFormat,
    WorkflowInput,
    WorkflowNode,
)
from .steps import build_nodes, extract_steps
from .text import isolate_deliverable, normalize_text, strip_code_fences


# ---------------------------------------------------------------------------
# Structured-input validation
# ---------------------------------------------------------------------------

class _RawNode(BaseModel):
    """A node as an LLM might emit it in JSON; every field optional."""
    id: Optional[Union[str, int]] = None
    type: Optional[str] = None
    label: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    substeps: Optional[list[str]] = None


class _RawEdge(BaseModel):
    id: Optional[Union[str, int]] = None
    source: Union[str, int]
    target: Union[str, int]
    label: Optional[str] = None


class _RawGraph(BaseModel):
    nodes: list[_RawNode] = Field(..., min_length=1)
    edges: list[_RawEdge]
    layout: Optional[str] = None


def _node_type(value: Optional[str]) -> NodeType:
    try:
        return NodeType((value or "").lower())
    except ValueError:
        return NodeType.STEP


def _to_workflow(raw: _RawGraph) -> Optional[ParsedWorkflow]:
    """Apply defaults and reject graphs the renderer cannot walk.

    Ids must be unique, edges must reference known nodes, a ``start`` and an
    ``end`` node must exist, and every non-``end`` node needs an outgoing edge.
    """
    nodes = [
        WorkflowNode(
            id=str(node.id) if node.id is not None else f"node-{index}",
            type=_node_type(node.type),
            label=node.label or node.title or f"Step {index + 1}",
            description=node.description,
            substeps=node.substeps or [],
        )
        for index, node in enumerate(raw.nodes)
    ]
    edges = [
        WorkflowEdge(
            id=str(edge.id) if edge.id is not None else f"edge-{index}",
            source=str(edge.source),
            target=str(edge.target),
            label=edge.label,
        )
        for index, edge in enumerate(raw.edges)
    ]

    node_ids = [node.id for node in nodes]
    if len(set(node_ids)) != len(node_ids):
        return None
    if len({edge.id for edge in edges}) != len(edges):
        return None
    known = set(node_ids)
    if any(edge.source not in known or edge.target not in known for edge in edges):
        return None

    types = {node.type for node in nodes}
    if NodeType.START not in types or NodeType.END not in types:
        return None
    sources = {edge.source for edge in edges}
    if any(node.type != NodeType.END and node.id not in sources for node in nodes):
        return None

    return ParsedWorkflow(
        nodes=nodes, edges=edges, layout=raw.layout or WorkflowFormat.LINEAR.layout
    )


def interpret_workflow_input(raw_text: str) -> WorkflowInput:
    """Decide whether a response carries a ready-made JSON graph.

    The deliverable (with fence markers removed) is tried as a JSON object
    with ``nodes`` and ``edges``. Anything that fails to decode or validate
    falls through to text extraction; no error reaches the caller.
    """
    candidate = strip_code_fences(isolate_deliverable(raw_text or "")).strip()
    if candidate.startswith("{"):
        try:
            workflow = _to_workflow(_RawGraph.model_validate(json.loads(candidate)))
        except (json.JSONDecodeError, ValidationError):
            workflow = None
        if workflow is not None:
            return StructuredInput(workflow=workflow)
    return TextDerived(text=normalize_text(raw_text or ""))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_workflow(
    raw_text: str,
    format_hint: Union[WorkflowFormat, str, None] = None,
    config: Optional[ParserConfig] = None,
) -> ParsedWorkflow:
    """Parse an LLM response into a workflow graph.

    Args:
        raw_text: The response text, optionally wrapped in ``<DELIVERABLE>``.
        format_hint: A user-selected format; unrecognised hints are ignored
            and the format is classified from the text.
        config: Caps for label length, sub-steps and parallel branches.

    Returns:
        A graph that always holds a ``start`` and an ``end`` node, whether
        built from text or taken from structured JSON. Labels longer than
        ``config.label_max_length`` are truncated and the full text is not
        kept.
    """
    config = config or DEFAULT_CONFIG
    interpreted = interpret_workflow_input(raw_text)
    if isinstance(interpreted, StructuredInput):
        return interpreted.workflow

    fmt = resolve_format_hint(format_hint) or classify_format(interpreted.text)
    nodes = build_nodes(extract_steps(interpreted.text, config))
    nodes, edges = synthesize_edges(nodes, fmt, config)
    return ParsedWorkflow(nodes=nodes, edges=edges, layout=fmt.layout)


def to_visualization(workflow: ParsedWorkflow) -> VisualizationData:
    """Wrap a workflow graph in the generic visualization envelope."""
    fmt = WorkflowFormat.from_layout(workflow.layout)
    title = f"{fmt.value} Workflow" if fmt is not None else "Workflow"
    return VisualizationData(
        title=title,
        data=[],
        config=VisualizationConfig(
            nodes=workflow.nodes, edges=workflow.edges, layout=workflow.layout
        ),
    )


def generate_workflow_visualization(
    response: str,
    chat_mode: Optional[str] = None,
    format_hint: Union[WorkflowFormat, str, None] = None,
    config: Optional[ParserConfig] = None,
) -> Optional[VisualizationData]:
    """Build a workflow visualization for a chat response.

    Extraction only runs in the workflow chat mode; any other mode returns
    ``None`` without looking at the text.
    """
    config = config or DEFAULT_CONFIG
    if chat_mode != config.workflow_chat_mode:
        return None
    return to_visualization(parse_workflow(response, format_hint=format_hint, config=config))
