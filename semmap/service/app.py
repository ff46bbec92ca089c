"""FastAPI application entrypoint for semmap service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..builder import MapBuildError, SemanticMapBuilder, create_semantic_map_builder
from ..config import ConfigError, MapConfig, load_config
from ..logging import configure_logging
from ..models import (
    CodeElement,
    CodeRelationship,
    ElementKind,
    RelationshipKind,
    SemanticQuery,
)
from ..query import DEFAULT_LIMIT
from ..sources import LocalFileSource

BuilderFactory = Callable[[str, MapConfig], SemanticMapBuilder]


class BuildRequest(BaseModel):
    path: str
    include_paths: Optional[List[str]] = None
    exclude_paths: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    analyze_imports: Optional[bool] = None
    analyze_types: Optional[bool] = None
    build_clusters: Optional[bool] = None
    min_cluster_size: Optional[int] = None
    similarity_threshold: Optional[float] = None
    concurrency: Optional[int] = None


class StatisticsResponse(BaseModel):
    map_id: str
    total_files: int
    total_elements: int
    total_relationships: int
    total_clusters: int
    elements_by_type: Dict[str, int]
    relationships_by_type: Dict[str, int]
    average_cluster_size: float
    coverage_percent: float


class QueryRequest(BaseModel):
    element_types: List[ElementKind] = Field(default_factory=list)
    relationship_types: List[RelationshipKind] = Field(default_factory=list)
    text: Optional[str] = None
    clusters: List[str] = Field(default_factory=list)
    concepts: List[str] = Field(default_factory=list)
    file_paths: List[str] = Field(default_factory=list)
    max_results: Optional[int] = None
    include_related: bool = False
    related_depth: int = 1


class ElementModel(BaseModel):
    id: str
    kind: str
    name: str
    qualified_name: str
    file_path: str
    start_line: int
    end_line: int
    language: str
    visibility: str
    signature: Optional[str] = None
    documentation: Optional[str] = None

    @classmethod
    def from_element(cls, element: CodeElement) -> "ElementModel":
        return cls(
            id=element.id,
            kind=element.kind.value,
            name=element.name,
            qualified_name=element.qualified_name,
            file_path=element.file_path,
            start_line=element.location.start_line,
            end_line=element.location.end_line,
            language=element.language,
            visibility=element.visibility.value,
            signature=element.signature,
            documentation=element.documentation,
        )


class RelationshipModel(BaseModel):
    id: str
    kind: str
    source_id: str
    target_id: str
    strength: float

    @classmethod
    def from_relationship(cls, relationship: CodeRelationship) -> "RelationshipModel":
        return cls(
            id=relationship.id,
            kind=relationship.kind.value,
            source_id=relationship.source_id,
            target_id=relationship.target_id,
            strength=relationship.strength,
        )


class QueryResponse(BaseModel):
    elements: List[ElementModel]
    relationships: List[RelationshipModel]
    clusters: List[str]
    concepts: List[str]
    relevance_scores: Dict[str, float]
    query_time: float


class ImpactResponse(BaseModel):
    changed_element: ElementModel
    directly_affected: List[ElementModel]
    transitively_affected: List[ElementModel]
    affected_tests: List[ElementModel]
    risk_level: str
    recommendations: List[str]


class NavigationModel(BaseModel):
    to_element: ElementModel
    relationship: RelationshipModel
    reason: str
    relevance: float


class HealthResponse(BaseModel):
    status: str


def _default_builder(path: str, config: MapConfig) -> SemanticMapBuilder:
    source = LocalFileSource(path)
    return create_semantic_map_builder(
        config=config, file_reader=source.read_file, file_lister=source.list_files
    )


def create_app(builder_factory: BuilderFactory = _default_builder) -> FastAPI:
    """Create the FastAPI application exposing map build and query operations."""

    app = FastAPI(title="Semantic Map Service", version="1.0.0")
    app.state.builder = None

    def current_builder() -> SemanticMapBuilder:
        builder: Optional[SemanticMapBuilder] = app.state.builder
        if builder is None or builder.get_map() is None:
            raise HTTPException(status_code=409, detail="No semantic map has been built yet")
        return builder

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=StatisticsResponse)
    async def build_map(payload: BuildRequest) -> StatisticsResponse:
        overrides = payload.model_dump(exclude={"path"})
        config = load_config(Path(payload.path)).with_overrides(**overrides)
        builder = builder_factory(payload.path, config)

        loop = asyncio.get_running_loop()
        semantic_map = await loop.run_in_executor(None, builder.build, payload.path)

        previous: Optional[SemanticMapBuilder] = app.state.builder
        if previous is not None and previous is not builder:
            previous.dispose()
        app.state.builder = builder

        stats = semantic_map.stats
        return StatisticsResponse(
            map_id=semantic_map.id,
            total_files=stats.total_files,
            total_elements=stats.total_elements,
            total_relationships=stats.total_relationships,
            total_clusters=stats.total_clusters,
            elements_by_type=stats.elements_by_type,
            relationships_by_type=stats.relationships_by_type,
            average_cluster_size=stats.average_cluster_size,
            coverage_percent=stats.coverage_percent,
        )

    @app.post("/query", response_model=QueryResponse)
    async def query_map(payload: QueryRequest) -> QueryResponse:
        builder = current_builder()
        result = builder.query(SemanticQuery(**payload.model_dump()))
        return QueryResponse(
            elements=[ElementModel.from_element(element) for element in result.elements],
            relationships=[
                RelationshipModel.from_relationship(rel) for rel in result.relationships
            ],
            clusters=[cluster.id for cluster in result.clusters],
            concepts=[concept.id for concept in result.concepts],
            relevance_scores=result.relevance_scores,
            query_time=result.query_time,
        )

    @app.get("/impact/{element_id}", response_model=ImpactResponse)
    async def impact(element_id: str) -> ImpactResponse:
        analysis = current_builder().analyze_impact(element_id)
        if analysis is None:
            raise HTTPException(status_code=404, detail=f"Unknown element: {element_id}")
        return ImpactResponse(
            changed_element=ElementModel.from_element(analysis.changed_element),
            directly_affected=[ElementModel.from_element(e) for e in analysis.directly_affected],
            transitively_affected=[
                ElementModel.from_element(e) for e in analysis.transitively_affected
            ],
            affected_tests=[ElementModel.from_element(e) for e in analysis.affected_tests],
            risk_level=analysis.risk_level.value,
            recommendations=analysis.recommendations,
        )

    @app.get("/navigation/{element_id}", response_model=List[NavigationModel])
    async def navigation(
        element_id: str, limit: int = Query(DEFAULT_LIMIT, ge=0)
    ) -> List[NavigationModel]:
        suggestions = current_builder().get_navigation_suggestions(element_id, limit)
        return [
            NavigationModel(
                to_element=ElementModel.from_element(suggestion.to_element),
                relationship=RelationshipModel.from_relationship(suggestion.relationship),
                reason=suggestion.reason,
                relevance=suggestion.relevance,
            )
            for suggestion in suggestions
        ]

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(MapBuildError)
    async def build_error_handler(_: Any, exc: MapBuildError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, verbose: bool = False
) -> None:  # pragma: no cover - integration path
    import uvicorn

    configure_logging(verbose=verbose)
    app = create_app()
    uvicorn.run(app, host=host, port=port)
