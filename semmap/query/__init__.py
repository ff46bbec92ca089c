"""Read-only operations over a built semantic map."""

from .engine import run_query, score_element
from .impact import DEPENDENCY_KINDS, analyze_impact, risk_for
from .navigation import DEFAULT_LIMIT, navigation_suggestions
from .traversal import Direction, TraversalStep, breadth_first

__all__ = [
    "DEFAULT_LIMIT",
    "DEPENDENCY_KINDS",
    "Direction",
    "TraversalStep",
    "analyze_impact",
    "breadth_first",
    "navigation_suggestions",
    "risk_for",
    "run_query",
    "score_element",
]
