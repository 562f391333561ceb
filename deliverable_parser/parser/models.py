"""Pydantic v2 models for the deliverable parser.

Defines the structured results produced from free-form LLM responses:
workflow graphs (nodes + edges), hierarchical checklists, and the
visualization envelope handed to the rendering layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class NodeType(str, Enum):
    """Kind of a workflow node."""
    START = "start"
    STEP = "step"
    DECISION = "decision"
    END = "end"


class Priority(str, Enum):
    """Checklist item priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WorkflowFormat(str, Enum):
    """Workflow shape, selecting which edge-synthesis strategy applies."""
    LINEAR = "Linear Process"
    DECISION_TREE = "Decision Tree"
    PARALLEL = "Parallel Workflow"
    APPROVAL = "Approval Workflow"

    @property
    def layout(self) -> str:
        """Renderer hint, e.g. ``'decision-tree'``."""
        return self.value.lower().replace(" ", "-")

    @classmethod
    def from_layout(cls, layout: str) -> Optional["WorkflowFormat"]:
        """Return the format whose layout tag is *layout*, or ``None``."""
        for fmt in cls:
            if fmt.layout == layout:
                return fmt
        return None


# ---------------------------------------------------------------------------
# Workflow Models
# ---------------------------------------------------------------------------

class WorkflowNode(BaseModel):
    """A single node of a workflow diagram."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique node id within the graph")
    type: NodeType = Field(default=NodeType.STEP, description="Node kind")
    label: str = Field(..., description="Display text, truncated for long steps")
    description: Optional[str] = Field(default=None, description="Optional detail line")
    substeps: list[str] = Field(
        default_factory=list, description="Short sub-step bullets, capped for renderability"
    )


class WorkflowEdge(BaseModel):
    """A directed edge between two workflow nodes."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique edge id within the graph")
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")
    label: Optional[str] = Field(default=None, description="Outcome label, e.g. 'Yes'")


class ParsedWorkflow(BaseModel):
    """A complete workflow graph plus its layout hint."""
    model_config = ConfigDict(frozen=True)

    nodes: list[WorkflowNode] = Field(default_factory=list, description="Graph nodes")
    edges: list[WorkflowEdge] = Field(default_factory=list, description="Graph edges")
    layout: str = Field(default="linear-process", description="Renderer layout hint")

    def node_ids(self) -> set[str]:
        """Return the ids of every node in the graph."""
        return {node.id for node in self.nodes}

    def outgoing(self, node_id: str) -> list[WorkflowEdge]:
        """Return the edges leaving *node_id*, in graph order."""
        return [edge for edge in self.edges if edge.source == node_id]


class VisualizationConfig(BaseModel):
    """The ``config`` block of a workflow visualization."""
    model_config = ConfigDict(frozen=True)

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)
    layout: str = Field(default="linear-process")


class VisualizationData(BaseModel):
    """Generic visualization envelope handed to the rendering layer."""
    model_config = ConfigDict(frozen=True)

    type: Literal["workflow"] = Field(default="workflow")
    title: str = Field(..., description="Chart title, e.g. 'Decision Tree Workflow'")
    data: list[Any] = Field(default_factory=list, description="Unused for workflows")
    config: VisualizationConfig = Field(..., description="Nodes, edges, and layout")


# ---------------------------------------------------------------------------
# Checklist Models
# ---------------------------------------------------------------------------

class ChecklistItem(BaseModel):
    """A single checklist entry."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Id unique within one parse call")
    text: str = Field(..., description="Item text with annotations stripped")
    priority: Priority = Field(default=Priority.MEDIUM, description="Item priority")
    deadline: Optional[str] = Field(default=None, description="Free-text deadline")
    completed: bool = Field(default=False, description="True only for '[x]' items")
    section: str = Field(..., description="Title of the owning section")


class ChecklistSection(BaseModel):
    """A titled group of checklist items."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Section title")
    items: list[ChecklistItem] = Field(default_factory=list, description="Section items")


class ChecklistProgress(BaseModel):
    """Completion summary across every section of a checklist."""
    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    percent: int = Field(default=0, ge=0, le=100)


# ---------------------------------------------------------------------------
# Response Splitting
# ---------------------------------------------------------------------------

class SeparatedContent(BaseModel):
    """An LLM response split into its deliverable and reasoning blocks."""
    model_config = ConfigDict(frozen=True)

    deliverable: Optional[str] = Field(default=None)
    reasoning: Optional[str] = Field(default=None)
    remaining: Optional[str] = Field(
        default=None, description="The original text when the blocks are not both present"
    )


# ---------------------------------------------------------------------------
# Workflow Input Interpretation
# ---------------------------------------------------------------------------

class StructuredInput(BaseModel):
    """A response that already carried a JSON node/edge graph."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    workflow: ParsedWorkflow


class TextDerived(BaseModel):
    """A response that must go through text-based extraction."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


WorkflowInput = Annotated[Union[StructuredInput, TextDerived], Field(discriminator="kind")]
