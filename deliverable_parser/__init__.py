"""Deliverable parser.

Rule-based extraction of workflow graphs and checklists from LLM responses.
"""

from deliverable_parser.config import ParserConfig
from deliverable_parser.parser import parse_checklist, parse_workflow

__all__ = ["ParserConfig", "parse_checklist", "parse_workflow"]

__version__ = "0.1.0"
