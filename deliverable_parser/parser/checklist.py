"""Checklist extraction from LLM responses.

A line-by-line state machine: ``##``/``###`` headers open sections,
``- [ ]``/``- [x]`` lines and plain bullets become items with priority and
deadline annotations pulled out of their text, and everything else is
ignored. The result always holds at least one section.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from deliverable_parser.config import DEFAULT_CONFIG, ParserConfig

from .models import ChecklistItem, ChecklistProgress, ChecklistSection, Priority
from .text import normalize_checklist_text


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_SECTION_PATTERN = re.compile(r"^#{2,3}\s+")
_CHECKBOX_PATTERN = re.compile(r"^[-*]\s*\[([x\s])\]\s*(.+)", re.IGNORECASE)
_BULLET_PATTERN = re.compile(r"^[-*]\s+")
_PRIORITY_PATTERN = re.compile(r"\((\w+)\s*priority\)", re.IGNORECASE)
_PRIORITY_STRIP_PATTERN = re.compile(r"\([^)]*priority\)", re.IGNORECASE)
_DEADLINE_PATTERN = re.compile(r"\b(?:by|due|deadline):\s*([^,]+)", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s{2,}")


class ScanState(str, Enum):
    """Where the scanner is relative to explicit section headers."""
    BEFORE_SECTION = "before_section"
    IN_SECTION = "in_section"


class ChecklistAccumulator:
    """Everything collected so far, threaded through ``consume_line``.

    ``title`` is the last header seen; it only applies once the scanner is
    ``IN_SECTION``. Before that, items belong to ``default_title``.
    """

    __slots__ = ("sections", "default_title", "title", "items", "counter")

    def __init__(self, default_title: str) -> None:
        self.sections: list[ChecklistSection] = []
        self.default_title = default_title
        self.title: Optional[str] = None
        self.items: list[ChecklistItem] = []
        self.counter = 0

    def section_title(self, state: ScanState) -> str:
        """Return the title that items seen in *state* belong to."""
        if state is ScanState.IN_SECTION and self.title is not None:
            return self.title
        return self.default_title

    def flush(self, state: ScanState) -> None:
        """Close the current section if it holds any items."""
        if self.items:
            self.sections.append(
                ChecklistSection(title=self.section_title(state), items=self.items)
            )
        self.items = []

    def next_id(self) -> str:
        item_id = f"item-{self.counter}"
        self.counter += 1
        return item_id


# ---------------------------------------------------------------------------
# Annotation extraction
# ---------------------------------------------------------------------------

def extract_priority(text: str) -> Priority:
    """Map a ``(high priority)`` style annotation to a ``Priority``.

    Missing annotations and unknown words both default to medium.
    """
    match = _PRIORITY_PATTERN.search(text)
    if match:
        word = match.group(1).lower()
        if word in {p.value for p in Priority}:
            return Priority(word)
    return Priority.MEDIUM


def extract_deadline(text: str) -> Optional[str]:
    """Return the text after ``by:``/``due:``/``deadline:`` up to the next comma."""
    match = _DEADLINE_PATTERN.search(text)
    if match:
        return match.group(1).strip() or None
    return None


def _clean(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def strip_annotations(text: str, deadline: bool = True) -> str:
    """Remove the priority (and optionally deadline) annotations from *text*."""
    text = _PRIORITY_STRIP_PATTERN.sub("", text, count=1)
    if deadline:
        text = _DEADLINE_PATTERN.sub("", text, count=1)
    return _clean(text)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

def consume_line(
    state: ScanState, acc: ChecklistAccumulator, line: str
) -> ScanState:
    """Feed one line to the scanner and return the next state.

    Lines that are neither headers nor list items leave both the state and
    the accumulator untouched, so prose between items never leaks into them.
    """
    trimmed = line.strip()

    if _SECTION_PATTERN.match(trimmed):
        acc.flush(state)
        acc.title = _SECTION_PATTERN.sub("", trimmed, count=1).strip()
        return ScanState.IN_SECTION

    section = acc.section_title(state)
    checkbox = _CHECKBOX_PATTERN.match(trimmed)
    if checkbox:
        text = checkbox.group(2)
        acc.items.append(ChecklistItem(
            id=acc.next_id(),
            text=strip_annotations(text),
            priority=extract_priority(text),
            deadline=extract_deadline(text),
            completed=checkbox.group(1).lower() == "x",
            section=section,
        ))
    elif _BULLET_PATTERN.match(trimmed) and "[" not in trimmed:
        text = _BULLET_PATTERN.sub("", trimmed, count=1)
        acc.items.append(ChecklistItem(
            id=acc.next_id(),
            text=strip_annotations(text, deadline=False),
            priority=extract_priority(text),
            completed=False,
            section=section,
        ))
    return state


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_checklist(
    raw_text: str, config: Optional[ParserConfig] = None
) -> list[ChecklistSection]:
    """Parse an LLM response into checklist sections.

    Args:
        raw_text: The response text, optionally wrapped in ``<DELIVERABLE>``.
        config: Supplies the implicit and fallback section titles.

    Returns:
        The non-empty sections in document order, or a single empty
        fallback section when no item was recognised.
    """
    config = config or DEFAULT_CONFIG
    acc = ChecklistAccumulator(default_title=config.default_section_title)
    state = ScanState.BEFORE_SECTION

    for line in normalize_checklist_text(raw_text).splitlines():
        state = consume_line(state, acc, line)
    acc.flush(state)

    if not acc.sections:
        return [ChecklistSection(title=config.empty_section_title, items=[])]
    return acc.sections


def summarize_checklist(sections: list[ChecklistSection]) -> ChecklistProgress:
    """Count completed items across every section."""
    items = [item for section in sections for item in section.items]
    completed = sum(1 for item in items if item.completed)
    percent = round(completed / len(items) * 100) if items else 0
    return ChecklistProgress(total=len(items), completed=completed, percent=percent)
