"""Shared pytest fixtures for the deliverable parser test suite.

Provides reusable fixtures for:
- Sample LLM responses in each workflow format
- Sample checklist responses
- Response files on disk for the CLI and async loader
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Workflow responses
# ---------------------------------------------------------------------------

@pytest.fixture
def linear_response() -> str:
    """A plain step-by-step process with sub-bullets under the first step."""
    return textwrap.dedent("""\
        Here is the onboarding process you asked for.

        Step 1: Collect employee documents
        - ID card
        - Tax forms
        Step 2: Set up accounts
        Step 3: Schedule orientation
    """)


@pytest.fixture
def decision_response() -> str:
    """A decision-tree deliverable followed by a reasoning block."""
    return textwrap.dedent("""\
        <DELIVERABLE>
        Step 1: Receive the expense claim
        Step 2: Manager decision on the claim
        - If yes, pay out
        - If no, return to employee
        Step 3: Archive the receipt
        </DELIVERABLE>

        <REASONING>
        Decision trees make the approval explicit.
        </REASONING>
    """)


@pytest.fixture
def parallel_response() -> str:
    """Four concurrent workstreams, one more than the default branch cap."""
    return textwrap.dedent("""\
        Run these workstreams in parallel:
        1. Legal drafts the contract
        2. Finance prepares the budget
        3. IT provisions laptops
        4. HR announces the hire
    """)


@pytest.fixture
def approval_response() -> str:
    """A sequential flow gated by a review step."""
    return textwrap.dedent("""\
        1. Submit the budget request
        2. Review by department head
        3. Final approval from CFO
        4. Release funds
    """)


@pytest.fixture
def json_workflow_response() -> str:
    """A response that already carries a JSON graph inside a code fence."""
    return textwrap.dedent("""\
        ```json
        {"nodes": [{"id": "a", "type": "start", "label": "Begin"},
                   {"id": "b", "title": "Do work"},
                   {"id": "c", "type": "end"}],
         "edges": [{"source": "a", "target": "b"},
                   {"source": "b", "target": "c", "label": "done"}],
         "layout": "parallel-workflow"}
        ```
    """)


# ---------------------------------------------------------------------------
# Checklist responses
# ---------------------------------------------------------------------------

@pytest.fixture
def checklist_response() -> str:
    """Two sections mixing checkboxes, plain bullets and prose."""
    return textwrap.dedent("""\
        # Tax Season Checklist

        Some intro text from the assistant.

        ## Documents
        - [ ] Gather W-2 forms (high priority) due: Jan 31
        - [x] Download bank statements
        - [X] Collect receipts (low priority)

        Remember to keep copies!

        ### Filing
        - [ ] File taxes (high priority) due: April 15
        - Book a call with the accountant (medium priority)
        * Double-check deductions
    """)


# ---------------------------------------------------------------------------
# Files on disk
# ---------------------------------------------------------------------------

@pytest.fixture
def response_file(tmp_path: Path, decision_response: str) -> Path:
    """The decision-tree response saved as markdown."""
    path = tmp_path / "response.md"
    path.write_text(decision_response, encoding="utf-8")
    return path


@pytest.fixture
def checklist_file(tmp_path: Path, checklist_response: str) -> Path:
    """The checklist response saved as markdown."""
    path = tmp_path / "checklist.md"
    path.write_text(checklist_response, encoding="utf-8")
    return path
