"""Base class for map derivation phases."""

from abc import ABC, abstractmethod

from ..config import MapConfig
from ..store import SemanticMap


class MapPhase(ABC):
    """Contract for phases that run over the complete element set."""

    name: str = "phase"

    def supports(self, config: MapConfig) -> bool:
        """Return True when this phase should run for the given configuration."""
        return True

    @abstractmethod
    def run(self, semantic_map: SemanticMap, config: MapConfig) -> int:
        """Mutate the map in place and return how many items the phase produced."""
