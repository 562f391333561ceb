"""Edge synthesis strategies.

Each workflow format maps to one strategy that turns the ordered node
sequence (start, steps..., end) into an edge set. Every strategy yields an
acyclic graph in which each non-``end`` node has at least one outgoing edge.
"""

from __future__ import annotations

import itertools
from typing import Callable, Optional

from deliverable_parser.config import DEFAULT_CONFIG, ParserConfig

from .models import NodeType, WorkflowEdge, WorkflowFormat, WorkflowNode


YES_LABEL = "Yes"
NO_LABEL = "No"
YES_OUTCOME_LABEL = "Yes - Continue"
NO_OUTCOME_LABEL = "No - Alternative"

Strategy = Callable[
    [list[WorkflowNode], ParserConfig],
    tuple[list[WorkflowNode], list[WorkflowEdge]],
]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def _chain(
    nodes: list[WorkflowNode], prefix: str = "edge", start: int = 0
) -> list[WorkflowEdge]:
    """Link each node to its immediate successor."""
    return [
        WorkflowEdge(id=f"{prefix}-{n}", source=a.id, target=b.id)
        for n, (a, b) in enumerate(zip(nodes, nodes[1:]), start=start)
    ]


def linear_edges(
    nodes: list[WorkflowNode], config: ParserConfig = DEFAULT_CONFIG
) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Strict chain: ``n - 1`` edges for ``n`` nodes."""
    return list(nodes), _chain(nodes)


def approval_edges(
    nodes: list[WorkflowNode], config: ParserConfig = DEFAULT_CONFIG
) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Gated sequential chain.

    Same topology as a linear process; the review/approve gates are already
    expressed by decision-typed nodes and the layout tag.
    """
    return linear_edges(nodes, config)


def _outcome_id(node_id: str, suffix: str) -> str:
    return f"{node_id}-{suffix}"


def _next_main_node(
    nodes: list[WorkflowNode], index: int, outcome_ids: set[str]
) -> Optional[WorkflowNode]:
    """Return the first node after *index* that is not a synthesized outcome."""
    for candidate in nodes[index + 1:]:
        if candidate.id not in outcome_ids:
            return candidate
    return None


def decision_tree_edges(
    nodes: list[WorkflowNode], config: ParserConfig = DEFAULT_CONFIG
) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Branch every decision node into labelled Yes/No outcomes.

    Outcome nodes are inserted right after their decision node. Decision
    nodes get exactly the two labelled edges; every other node (outcomes
    included) links to the next non-outcome node.
    """
    expanded: list[WorkflowNode] = []
    outcome_ids: set[str] = set()
    for node in nodes:
        expanded.append(node)
        if node.type == NodeType.DECISION:
            for suffix, label in (("yes", YES_OUTCOME_LABEL), ("no", NO_OUTCOME_LABEL)):
                outcome = WorkflowNode(
                    id=_outcome_id(node.id, suffix), type=NodeType.STEP, label=label
                )
                expanded.append(outcome)
                outcome_ids.add(outcome.id)

    counter = itertools.count()
    edges: list[WorkflowEdge] = []
    for index, node in enumerate(expanded):
        if node.type == NodeType.END:
            continue
        if node.type == NodeType.DECISION:
            for suffix, label in (("yes", YES_LABEL), ("no", NO_LABEL)):
                edges.append(WorkflowEdge(
                    id=f"edge-{next(counter)}",
                    source=node.id,
                    target=_outcome_id(node.id, suffix),
                    label=label,
                ))
            continue
        successor = _next_main_node(expanded, index, outcome_ids)
        if successor is not None:
            edges.append(WorkflowEdge(
                id=f"edge-{next(counter)}", source=node.id, target=successor.id
            ))

    return expanded, edges


def parallel_edges(
    nodes: list[WorkflowNode], config: ParserConfig = DEFAULT_CONFIG
) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Fan out from start to the first branches and fan back in to end.

    Up to ``max_parallel_branches`` intermediate nodes become branches.
    Intermediate nodes beyond that cap are chained after the last branch so
    that none of them is left without an outgoing edge.
    """
    if len(nodes) < 2:
        return list(nodes), []

    start, end = nodes[0], nodes[-1]
    middle = nodes[1:-1]
    if not middle:
        return list(nodes), _chain([start, end])

    branches = middle[: config.max_parallel_branches]
    rest = middle[config.max_parallel_branches:]

    edges: list[WorkflowEdge] = [
        WorkflowEdge(id=f"edge-fanout-{i}", source=start.id, target=branch.id)
        for i, branch in enumerate(branches)
    ]
    edges.extend(
        WorkflowEdge(id=f"edge-fanin-{i}", source=branch.id, target=end.id)
        for i, branch in enumerate(branches)
    )
    if rest:
        edges.extend(_chain([branches[-1], *rest, end], prefix="edge-tail"))

    return list(nodes), edges


STRATEGIES: dict[WorkflowFormat, Strategy] = {
    WorkflowFormat.LINEAR: linear_edges,
    WorkflowFormat.DECISION_TREE: decision_tree_edges,
    WorkflowFormat.PARALLEL: parallel_edges,
    WorkflowFormat.APPROVAL: approval_edges,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def synthesize_edges(
    nodes: list[WorkflowNode],
    fmt: WorkflowFormat,
    config: Optional[ParserConfig] = None,
) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Build the edge set for *nodes* using the strategy of *fmt*.

    Returns:
        The (possibly expanded) node list and its edges. Only the decision
        tree strategy adds nodes.
    """
    return STRATEGIES[fmt](nodes, config or DEFAULT_CONFIG)
