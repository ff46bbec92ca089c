"""Breadth-first traversal over typed relationship edges."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterable, Iterator, List, Optional, Set

from ..models import CodeRelationship, RelationshipKind
from ..store import SemanticMap


class Direction(str, Enum):
    OUTGOING = "outgoing"  # follow source -> target
    INCOMING = "incoming"  # follow target -> source
    BOTH = "both"


@dataclass
class TraversalStep:
    """One edge examined while expanding a frontier node."""

    depth: int
    relationship: CodeRelationship
    origin_id: str
    node_id: str
    discovered: bool


def breadth_first(
    semantic_map: SemanticMap,
    start_ids: Iterable[str],
    *,
    direction: Direction = Direction.BOTH,
    max_depth: Optional[int] = None,
    kinds: Optional[Collection[RelationshipKind]] = None,
) -> Iterator[TraversalStep]:
    """Walk the graph level by level from ``start_ids``.

    Every edge touching a frontier node (in the requested direction) is
    yielded once per examination; ``discovered`` is True only the first time
    the neighbouring node is reached. Start nodes count as visited, and no
    node is expanded twice, so cycles terminate.
    """
    visited: Set[str] = set()
    frontier: deque[str] = deque()
    for start_id in start_ids:
        if start_id not in visited:
            visited.add(start_id)
            frontier.append(start_id)

    depth = 0
    while frontier and (max_depth is None or depth < max_depth):
        depth += 1
        next_frontier: deque[str] = deque()
        while frontier:
            current = frontier.popleft()
            for relationship, neighbour in _neighbours(semantic_map, current, direction):
                if kinds is not None and relationship.kind not in kinds:
                    continue
                discovered = neighbour not in visited
                if discovered:
                    visited.add(neighbour)
                    next_frontier.append(neighbour)
                yield TraversalStep(
                    depth=depth,
                    relationship=relationship,
                    origin_id=current,
                    node_id=neighbour,
                    discovered=discovered,
                )
        frontier = next_frontier


def _neighbours(
    semantic_map: SemanticMap, element_id: str, direction: Direction
) -> List[tuple[CodeRelationship, str]]:
    pairs: List[tuple[CodeRelationship, str]] = []
    if direction in (Direction.OUTGOING, Direction.BOTH):
        pairs.extend((rel, rel.target_id) for rel in semantic_map.outgoing(element_id))
    if direction in (Direction.INCOMING, Direction.BOTH):
        pairs.extend((rel, rel.source_id) for rel in semantic_map.incoming(element_id))
    return pairs


__all__ = ["Direction", "TraversalStep", "breadth_first"]
