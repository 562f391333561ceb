"""Step extraction and node classification for workflow text.

Walks normalised lines, recognises step markers (enumerators, ``Step N:``
style keywords, sentinel verbs, bullets), collects sub-step bullets and a
description line per step, then types each node by position and keywords.
"""

from __future__ import annotations

import re
from typing import Optional

from deliverable_parser.config import DEFAULT_CONFIG, ParserConfig

from .models import NodeType, WorkflowNode


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_ENUMERATOR_PATTERN = re.compile(r"^\d+[.)]\s*")
_BULLET_PATTERN = re.compile(r"^[-•*]\s+(?:\[[ xX]\]\s*)?")
_STEP_KEYWORD_PATTERN = re.compile(
    r"^(?:step|phase|stage|task)(?:\s*\d+\w*|\s+[ivx]+\b|\s+[a-z]+(?=\s*:))\s*[:.)\-–]?\s*",
    re.IGNORECASE,
)
_SENTINEL_PATTERN = re.compile(
    r"^(?:start|begin|review|approve|complete|end|finish)\b", re.IGNORECASE
)

DECISION_KEYWORDS = ("decision", "review", "approve", "check")

START_LABEL = "Start"
END_LABEL = "Complete"


# ---------------------------------------------------------------------------
# Step Records
# ---------------------------------------------------------------------------

class StepRecord:
    """An extracted step: its display label, optional description, and sub-steps."""

    __slots__ = ("label", "description", "substeps")

    def __init__(self, label: str, description: Optional[str] = None) -> None:
        self.label = label
        self.description = description
        self.substeps: list[str] = []

    def __repr__(self) -> str:
        return f"StepRecord(label={self.label!r}, substeps={len(self.substeps)})"


def truncate_label(text: str, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """Cut *text* to ``label_max_length`` characters plus the ellipsis marker.

    The full text is not kept anywhere else; callers needing it must keep
    their own copy of the input.
    """
    if len(text) > config.label_max_length:
        return text[: config.label_max_length] + config.ellipsis
    return text


def is_primary_step(line: str) -> bool:
    """Return True for enumerated, keyword (``Step 2:``) and sentinel-verb lines.

    A bulleted keyword line (``- Step 2: ...``) is primary as well.
    """
    return bool(
        _ENUMERATOR_PATTERN.match(line)
        or _STEP_KEYWORD_PATTERN.match(_BULLET_PATTERN.sub("", line, count=1))
        or _SENTINEL_PATTERN.match(line)
    )


def is_bullet(line: str) -> bool:
    """Return True for ``-``, ``•`` and ``*`` list items."""
    return _BULLET_PATTERN.match(line) is not None


def clean_step_text(line: str) -> str:
    """Strip enumerators, bullets and ``Step/Phase/Stage/Task N:`` prefixes."""
    text = _ENUMERATOR_PATTERN.sub("", line, count=1)
    text = _BULLET_PATTERN.sub("", text, count=1)
    keyword = _STEP_KEYWORD_PATTERN.match(text)
    if keyword:
        remainder = text[keyword.end():].strip()
        # A bare "Step 3:" header is labelled by the keyword itself.
        return remainder or keyword.group(0).strip().rstrip(":.)-– ")
    return text.strip()


def extract_steps(text: str, config: Optional[ParserConfig] = None) -> list[StepRecord]:
    """Extract ordered step records from normalised text.

    When the text contains at least one primary marker (enumerator, step
    keyword, sentinel verb) bullets following a step become its sub-steps;
    otherwise every bullet is a step of its own. The first prose line after
    a step becomes its description. Lines matching nothing are skipped.
    """
    config = config or DEFAULT_CONFIG
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    has_primary = any(is_primary_step(line) for line in lines)

    steps: list[StepRecord] = []
    current: Optional[StepRecord] = None

    for line in lines:
        bullet = is_bullet(line)
        if is_primary_step(line) or (bullet and (not has_primary or current is None)):
            cleaned = clean_step_text(line)
            if not cleaned:
                continue
            current = StepRecord(label=truncate_label(cleaned, config))
            steps.append(current)
        elif bullet and current is not None:
            substep = clean_step_text(line)
            if substep and len(current.substeps) < config.max_substeps:
                current.substeps.append(substep)
        elif current is not None and current.description is None and not current.substeps:
            current.description = line

    return steps


# ---------------------------------------------------------------------------
# Node Classification
# ---------------------------------------------------------------------------

def classify_node(index: int, count: int, label: str) -> NodeType:
    """Type a node from its position in the sequence and its label.

    Precedence: first position is ``start``, last is ``end``, a label
    mentioning decision/review/approve/check is a ``decision``, anything
    else is a ``step``.
    """
    if index == 0:
        return NodeType.START
    if index == count - 1:
        return NodeType.END
    lower = label.lower()
    if any(kw in lower for kw in DECISION_KEYWORDS):
        return NodeType.DECISION
    return NodeType.STEP


def build_nodes(steps: list[StepRecord]) -> list[WorkflowNode]:
    """Wrap step records between a synthesized start and end node.

    The sentinels are added regardless of what was extracted, so the
    sequence always has defined entry and exit points; with no steps the
    result is exactly ``[start, end]``.
    """
    entries: list[tuple[str, StepRecord]] = [("start", StepRecord(START_LABEL))]
    entries.extend((f"step-{i}", record) for i, record in enumerate(steps, start=1))
    entries.append(("end", StepRecord(END_LABEL)))

    count = len(entries)
    return [
        WorkflowNode(
            id=node_id,
            type=classify_node(index, count, record.label),
            label=record.label,
            description=record.description,
            substeps=list(record.substeps),
        )
        for index, (node_id, record) in enumerate(entries)
    ]
