"""Deliverable parser configuration.

Typed configuration for the parsing core. Settings use a Pydantic v2 model so
the renderability caps are validated at construction time and can be
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ParserConfig(BaseModel):
    """Tuning knobs for workflow and checklist extraction.

    The default caps match the node width of the diagram renderer.
    """

    label_max_length: int = Field(
        default=50, ge=1, description="Maximum node label length before truncation"
    )
    ellipsis: str = Field(default="...", description="Suffix appended to truncated labels")
    max_substeps: int = Field(default=5, ge=0, description="Sub-steps kept per workflow node")
    max_parallel_branches: int = Field(
        default=3, ge=1, description="Branches fanned out from the start node"
    )
    workflow_chat_mode: str = Field(
        default="workflow", description="Chat mode that enables workflow extraction"
    )
    default_section_title: str = Field(
        default="Tasks", description="Section for items seen before any header"
    )
    empty_section_title: str = Field(
        default="Checklist", description="Section returned when nothing was recognised"
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ParserConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Build a ``ParserConfig`` from environment variables.

        Recognised variables (all optional):
            DP_LABEL_MAX_LENGTH, DP_MAX_SUBSTEPS, DP_MAX_PARALLEL_BRANCHES,
            DP_WORKFLOW_CHAT_MODE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DP_LABEL_MAX_LENGTH"):
            kwargs["label_max_length"] = int(os.environ["DP_LABEL_MAX_LENGTH"])
        if os.environ.get("DP_MAX_SUBSTEPS"):
            kwargs["max_substeps"] = int(os.environ["DP_MAX_SUBSTEPS"])
        if os.environ.get("DP_MAX_PARALLEL_BRANCHES"):
            kwargs["max_parallel_branches"] = int(os.environ["DP_MAX_PARALLEL_BRANCHES"])
        if os.environ.get("DP_WORKFLOW_CHAT_MODE"):
            kwargs["workflow_chat_mode"] = os.environ["DP_WORKFLOW_CHAT_MODE"]
        return cls(**kwargs)


DEFAULT_CONFIG = ParserConfig()
