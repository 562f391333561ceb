"""Command line entry point for the deliverable parser.

Usage::

    python -m deliverable_parser.cli workflow response.md
    python -m deliverable_parser.cli workflow response.md --format decision --json
    python -m deliverable_parser.cli checklist response.md
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.table import Table

from deliverable_parser.config import ParserConfig
from deliverable_parser.parser import (
    ChecklistSection,
    ParsedWorkflow,
    generate_workflow_visualization,
    parse_checklist,
    parse_workflow,
    summarize_checklist,
)
from deliverable_parser.parser.models import WorkflowFormat
from deliverable_parser.utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_text_file,
)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_NODE_STYLES = {
    "start": "bright_green",
    "end": "bright_red",
    "decision": "bright_yellow",
    "step": "bright_cyan",
}

_PRIORITY_STYLES = {"high": "bold red", "medium": "yellow", "low": "dim"}


def render_workflow(workflow: ParsedWorkflow) -> None:
    """Print workflow nodes and edges as Rich tables."""
    fmt = WorkflowFormat.from_layout(workflow.layout)
    print_summary_table(
        {
            "Format": fmt.value if fmt is not None else workflow.layout,
            "Layout": workflow.layout,
            "Nodes": str(len(workflow.nodes)),
            "Edges": str(len(workflow.edges)),
        },
        title="Workflow",
    )

    nodes = Table(title="Nodes", show_header=True, header_style="bold cyan")
    nodes.add_column("Id", no_wrap=True)
    nodes.add_column("Type")
    nodes.add_column("Label")
    nodes.add_column("Sub-steps")
    for node in workflow.nodes:
        style = _NODE_STYLES.get(node.type.value, "white")
        nodes.add_row(
            node.id,
            f"[{style}]{node.type.value}[/{style}]",
            node.label,
            "\n".join(node.substeps),
        )
    console.print(nodes)

    edges = Table(title="Edges", show_header=True, header_style="bold cyan")
    edges.add_column("Id", no_wrap=True)
    edges.add_column("Source")
    edges.add_column("Target")
    edges.add_column("Label")
    for edge in workflow.edges:
        edges.add_row(edge.id, edge.source, edge.target, edge.label or "")
    console.print(edges)


def render_checklist(sections: list[ChecklistSection]) -> None:
    """Print checklist sections as Rich tables followed by a progress line."""
    for section in sections:
        table = Table(title=section.title, show_header=True, header_style="bold cyan")
        table.add_column("Done", justify="center")
        table.add_column("Item")
        table.add_column("Priority")
        table.add_column("Deadline")
        for item in section.items:
            style = _PRIORITY_STYLES[item.priority.value]
            table.add_row(
                "[green]x[/green]" if item.completed else "",
                item.text,
                f"[{style}]{item.priority.value}[/{style}]",
                item.deadline or "",
            )
        console.print(table)

    progress = summarize_checklist(sections)
    print_success(
        f"Progress: {progress.completed}/{progress.total} completed ({progress.percent}%)"
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _load_config(path: Optional[str]) -> ParserConfig:
    if path:
        return ParserConfig.load(Path(path))
    return ParserConfig.from_env()


def run_workflow(text: str, args: argparse.Namespace, config: ParserConfig) -> None:
    """Parse *text* as a workflow and print it."""
    if args.chat_mode is not None:
        visualization = generate_workflow_visualization(
            text, chat_mode=args.chat_mode, format_hint=args.format, config=config
        )
        if visualization is None:
            print_warning(f"Workflow extraction skipped for chat mode '{args.chat_mode}'")
            return
        if args.json:
            console.out(visualization.model_dump_json(indent=2), highlight=False)
            return
        workflow = ParsedWorkflow(
            nodes=visualization.config.nodes,
            edges=visualization.config.edges,
            layout=visualization.config.layout,
        )
    else:
        workflow = parse_workflow(text, format_hint=args.format, config=config)
        if args.json:
            console.out(workflow.model_dump_json(indent=2), highlight=False)
            return

    render_workflow(workflow)


def run_checklist(text: str, args: argparse.Namespace, config: ParserConfig) -> None:
    """Parse *text* as a checklist and print it."""
    sections = parse_checklist(text, config=config)
    if args.json:
        payload = {
            "sections": [section.model_dump(mode="json") for section in sections],
            "progress": summarize_checklist(sections).model_dump(mode="json"),
        }
        console.out(json.dumps(payload, indent=2, ensure_ascii=False), highlight=False)
        return
    render_checklist(sections)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``deliverable-parser``."""
    parser = argparse.ArgumentParser(
        prog="deliverable-parser",
        description="Extract workflow graphs and checklists from LLM responses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  deliverable-parser workflow response.md\n"
            "  deliverable-parser workflow response.md --format parallel --json\n"
            "  deliverable-parser workflow response.md --chat-mode workflow\n"
            "  deliverable-parser checklist response.md\n"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a saved ParserConfig JSON file (default: environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    workflow = commands.add_parser("workflow", help="Extract a workflow graph")
    workflow.add_argument("path", help="Path to the response file")
    workflow.add_argument(
        "--format", "-f",
        default=None,
        help="Format hint: linear, decision, parallel or approval (default: auto-detect)",
    )
    workflow.add_argument(
        "--chat-mode",
        default=None,
        help="Gate extraction on a chat mode and emit the visualization envelope",
    )
    workflow.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    workflow.set_defaults(handler=run_workflow)

    checklist = commands.add_parser("checklist", help="Extract a checklist")
    checklist.add_argument("path", help="Path to the response file")
    checklist.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    checklist.set_defaults(handler=run_checklist)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``deliverable-parser``."""
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {exc}")
        sys.exit(1)

    try:
        text = asyncio.run(read_text_file(args.path))
    except (FileNotFoundError, ValueError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    args.handler(text, args, config)


if __name__ == "__main__":
    main()
