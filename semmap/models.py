"""Core data models shared across semmap components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ElementKind(str, Enum):
    """Kinds of code constructs recorded in a semantic map."""

    FILE = "file"
    DIRECTORY = "directory"
    MODULE = "module"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    FUNCTION = "function"
    METHOD = "method"
    VARIABLE = "variable"
    CONSTANT = "constant"
    ENUM = "enum"
    IMPORT = "import"
    EXPORT = "export"
    COMPONENT = "component"
    HOOK = "hook"
    TEST = "test"
    CONFIG = "config"


class RelationshipKind(str, Enum):
    """Kinds of directed edges between elements."""

    IMPORTS = "imports"
    EXPORTS = "exports"
    CALLS = "calls"
    IMPLEMENTS = "implements"
    EXTENDS = "extends"
    USES = "uses"
    DEFINES = "defines"
    CONTAINS = "contains"
    TESTS = "tests"
    DEPENDS_ON = "depends_on"
    SIMILAR_TO = "similar_to"
    OVERRIDES = "overrides"
    REFERENCES = "references"
    INSTANTIATES = "instantiates"


class ClusterCategory(str, Enum):
    """Coarse purpose assigned to a semantic cluster."""

    FEATURE = "feature"
    MODULE = "module"
    LAYER = "layer"
    UTILITY = "utility"
    DATA_MODEL = "data_model"
    API = "api"
    UI = "ui"
    BUSINESS_LOGIC = "business_logic"
    INFRASTRUCTURE = "infrastructure"
    TESTING = "testing"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class SourceLocation:
    """1-based span of an element inside its file."""

    start_line: int
    end_line: int
    start_column: Optional[int] = None
    end_column: Optional[int] = None


@dataclass
class CodeElement:
    """A code construct discovered in one file."""

    id: str
    kind: ElementKind
    name: str
    qualified_name: str
    file_path: str
    location: SourceLocation
    language: str
    visibility: Visibility = Visibility.PUBLIC
    metadata: Dict[str, Any] = field(default_factory=dict)
    signature: Optional[str] = None
    documentation: Optional[str] = None


@dataclass
class CodeRelationship:
    """Directed, typed and weighted edge between two element ids."""

    id: str
    kind: RelationshipKind
    source_id: str
    target_id: str
    strength: float = 1.0
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SemanticCluster:
    """Named grouping of elements sharing a directory and vocabulary."""

    id: str
    name: str
    description: str
    category: ClusterCategory
    elements: List[str] = field(default_factory=list)
    coherence: float = 0.0
    keywords: List[str] = field(default_factory=list)


@dataclass
class ArchitecturalLayer:
    """Architectural tier inferred from path conventions."""

    id: str
    name: str
    description: str
    level: int
    elements: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)


@dataclass
class CodeConcept:
    """Recurring name fragment treated as a cross-cutting topic."""

    id: str
    name: str
    keywords: List[str] = field(default_factory=list)
    related_elements: List[str] = field(default_factory=list)
    frequency: int = 0
    importance: float = 0.0


@dataclass
class MapStatistics:
    """Running counters describing a built map."""

    total_files: int = 0
    total_elements: int = 0
    total_relationships: int = 0
    total_clusters: int = 0
    elements_by_type: Dict[str, int] = field(default_factory=dict)
    relationships_by_type: Dict[str, int] = field(default_factory=dict)
    average_cluster_size: float = 0.0
    coverage_percent: float = 0.0


@dataclass
class SemanticQuery:
    """Filters, ranking input and expansion options for a map query.

    ``relationship_types`` is accepted for callers but does not narrow the
    result; relationships only appear when ``include_related`` expands them.
    """

    element_types: List[ElementKind] = field(default_factory=list)
    relationship_types: List[RelationshipKind] = field(default_factory=list)
    text: Optional[str] = None
    clusters: List[str] = field(default_factory=list)
    concepts: List[str] = field(default_factory=list)
    file_paths: List[str] = field(default_factory=list)
    max_results: Optional[int] = None
    include_related: bool = False
    related_depth: int = 1


@dataclass
class SemanticQueryResult:
    elements: List[CodeElement] = field(default_factory=list)
    relationships: List[CodeRelationship] = field(default_factory=list)
    clusters: List[SemanticCluster] = field(default_factory=list)
    concepts: List[CodeConcept] = field(default_factory=list)
    relevance_scores: Dict[str, float] = field(default_factory=dict)
    query_time: float = 0.0


@dataclass
class ImpactAnalysis:
    """Elements reachable backwards from a changed element."""

    changed_element: CodeElement
    directly_affected: List[CodeElement] = field(default_factory=list)
    transitively_affected: List[CodeElement] = field(default_factory=list)
    affected_tests: List[CodeElement] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    recommendations: List[str] = field(default_factory=list)


@dataclass
class NavigationSuggestion:
    from_element: CodeElement
    to_element: CodeElement
    relationship: CodeRelationship
    reason: str
    relevance: float
