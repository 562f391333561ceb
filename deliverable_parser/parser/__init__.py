"""Deliverable parser core.

Turns free-form LLM responses into structured deliverables: workflow graphs
(nodes + edges with a layout hint) and hierarchical checklists. Pure regex
and markdown-structure heuristics. No model calls and no I/O.

Usage::

    from deliverable_parser.parser import parse_workflow, parse_checklist

    workflow = parse_workflow(response_text)
    print(workflow.nodes, workflow.edges, workflow.layout)

    sections = parse_checklist(response_text)
    print(summarize_checklist(sections))
"""

from deliverable_parser.parser.checklist import parse_checklist, summarize_checklist
from deliverable_parser.parser.classifier import classify_format, resolve_format_hint
from deliverable_parser.parser.models import (
    ChecklistItem,
    ChecklistProgress,
    ChecklistSection,
    NodeType,
    ParsedWorkflow,
    Priority,
    SeparatedContent,
    StructuredInput,
    TextDerived,
    VisualizationData,
    WorkflowEdge,
    WorkflowFormat,
    WorkflowNode,
)
from deliverable_parser.parser.text import normalize_text, split_response
from deliverable_parser.parser.workflow import (
    generate_workflow_visualization,
    interpret_workflow_input,
    parse_workflow,
    to_visualization,
)

__all__ = [
    # Workflow path
    "parse_workflow",
    "interpret_workflow_input",
    "to_visualization",
    "generate_workflow_visualization",
    "classify_format",
    "resolve_format_hint",
    # Checklist path
    "parse_checklist",
    "summarize_checklist",
    # Text helpers
    "normalize_text",
    "split_response",
    # Models
    "NodeType",
    "Priority",
    "WorkflowFormat",
    "WorkflowNode",
    "WorkflowEdge",
    "ParsedWorkflow",
    "VisualizationData",
    "ChecklistItem",
    "ChecklistSection",
    "ChecklistProgress",
    "SeparatedContent",
    "StructuredInput",
    "TextDerived",
]
