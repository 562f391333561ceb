"""Text normalisation for LLM responses.

Isolates the ``<DELIVERABLE>`` payload, removes code-fence markers, markdown
emphasis and heading hashes, and splits a response into its deliverable and
reasoning blocks.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import SeparatedContent


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DELIVERABLE_PATTERN = re.compile(r"<DELIVERABLE>([\s\S]*?)</DELIVERABLE>", re.IGNORECASE)
_REASONING_PATTERN = re.compile(r"<REASONING>([\s\S]*?)</REASONING>", re.IGNORECASE)
_FENCE_PATTERN = re.compile(r"```[\w-]*[ \t]*\n?")
_STAR_BULLET_PATTERN = re.compile(r"^([ \t]*)\*[ \t]+", re.MULTILINE)
_EMPHASIS_PATTERN = re.compile(r"\*\*|\*")
_HEADING_PATTERN = re.compile(r"^([ \t]*)#{1,6}[ \t]*", re.MULTILINE)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def extract_deliverable(text: str) -> Optional[str]:
    """Return the trimmed contents of the first ``<DELIVERABLE>`` block, if any."""
    match = _DELIVERABLE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return None


def isolate_deliverable(text: str) -> str:
    """Return the deliverable payload, or the whole text when there is none."""
    deliverable = extract_deliverable(text)
    return deliverable if deliverable is not None else text


def strip_code_fences(text: str) -> str:
    """Remove ```` ``` ```` fence markers (with language tag), keeping the content."""
    return _FENCE_PATTERN.sub("", text)


def strip_emphasis(text: str) -> str:
    """Remove ``*``/``**`` emphasis. Star bullets are rewritten to ``-`` first."""
    text = _STAR_BULLET_PATTERN.sub(r"\1- ", text)
    return _EMPHASIS_PATTERN.sub("", text)


def strip_headings(text: str) -> str:
    """Remove leading ``#`` heading markers from every line."""
    return _HEADING_PATTERN.sub(r"\1", text)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_text(raw_text: str) -> str:
    """Normalise a raw LLM response for workflow extraction.

    The ``<DELIVERABLE>`` block is located in the original text before any
    stripping; when present only its contents are kept. Never returns
    ``None``: empty input yields an empty string.
    """
    if not raw_text:
        return ""
    text = isolate_deliverable(raw_text)
    text = strip_code_fences(text)
    text = strip_emphasis(text)
    text = strip_headings(text)
    return text.strip()


def normalize_checklist_text(raw_text: str) -> str:
    """Lighter normalisation for checklists.

    Section headers (``##``) and star bullets carry structure on the checklist
    path, so only the deliverable is isolated and fence markers removed.
    """
    if not raw_text:
        return ""
    return strip_code_fences(isolate_deliverable(raw_text)).strip()


def split_response(text: str) -> SeparatedContent:
    """Split a response into its ``<DELIVERABLE>`` and ``<REASONING>`` blocks.

    Both blocks must be present; otherwise the original text is returned
    untouched as ``remaining``.
    """
    deliverable_match = _DELIVERABLE_PATTERN.search(text or "")
    reasoning_match = _REASONING_PATTERN.search(text or "")

    if deliverable_match and reasoning_match:
        return SeparatedContent(
            deliverable=deliverable_match.group(1).strip(),
            reasoning=reasoning_match.group(1).strip(),
            remaining=None,
        )
    return SeparatedContent(remaining=text)
