"""Workflow format classification.

An ordered table of ``(predicate, format)`` rules evaluated
first-match-wins. Text that matches no rule is a Linear Process.
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from .models import WorkflowFormat


# Short ids used by the format selector in the chat UI.
_FORMAT_ALIASES: dict[str, WorkflowFormat] = {
    "linear": WorkflowFormat.LINEAR,
    "decision": WorkflowFormat.DECISION_TREE,
    "parallel": WorkflowFormat.PARALLEL,
    "approval": WorkflowFormat.APPROVAL,
}


def _is_decision_tree(lower: str) -> bool:
    return "decision" in lower and ("yes" in lower or "no" in lower)


def _is_parallel(lower: str) -> bool:
    return any(kw in lower for kw in ("parallel", "simultaneous", "concurrent"))


def _is_approval(lower: str) -> bool:
    return "approval" in lower and "review" in lower


FORMAT_RULES: list[tuple[Callable[[str], bool], WorkflowFormat]] = [
    (_is_decision_tree, WorkflowFormat.DECISION_TREE),
    (_is_parallel, WorkflowFormat.PARALLEL),
    (_is_approval, WorkflowFormat.APPROVAL),
]


def classify_format(text: str) -> WorkflowFormat:
    """Classify normalised text into a workflow format.

    Args:
        text: Normalised response text. Case does not matter.

    Returns:
        The format of the first matching rule in ``FORMAT_RULES``, or
        ``WorkflowFormat.LINEAR`` when none match.
    """
    lower = (text or "").lower()
    for predicate, fmt in FORMAT_RULES:
        if predicate(lower):
            return fmt
    return WorkflowFormat.LINEAR


def resolve_format_hint(hint: Union[WorkflowFormat, str, None]) -> Optional[WorkflowFormat]:
    """Resolve a user-selected format hint.

    Accepts a ``WorkflowFormat``, its display name ("Decision Tree"), its
    layout tag ("decision-tree") or a selector id ("decision"). Returns
    ``None`` for anything unrecognised so that classification runs instead.
    """
    if hint is None:
        return None
    if isinstance(hint, WorkflowFormat):
        return hint

    key = hint.strip().lower()
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    for fmt in WorkflowFormat:
        if key in (fmt.value.lower(), fmt.layout):
            return fmt
    return None
