"""Map derivation phases run after every file has been extracted."""

from __future__ import annotations

from typing import Callable, List, Sequence, Set

from .base import MapPhase
from .clusters import ClusterBuilder
from .concepts import ConceptExtractor
from .layers import LayerIdentifier
from .relationships import RelationshipBuilder

# Order matters: layers read the import edges built by the relationship phase.
_PHASE_FACTORIES: dict[str, Callable[[], MapPhase]] = {
    "relationships": RelationshipBuilder,
    "clusters": ClusterBuilder,
    "layers": LayerIdentifier,
    "concepts": ConceptExtractor,
}


def default_phases(enabled: Sequence[str] | None = None) -> List[MapPhase]:
    """Return instantiated phases in pipeline order, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}
        unknown = enabled_set - set(_PHASE_FACTORIES)
        if unknown:
            missing = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown map phases requested: {missing}")

    return [
        factory()
        for name, factory in _PHASE_FACTORIES.items()
        if enabled_set is None or name in enabled_set
    ]


__all__ = [
    "ClusterBuilder",
    "ConceptExtractor",
    "LayerIdentifier",
    "MapPhase",
    "RelationshipBuilder",
    "default_phases",
]
