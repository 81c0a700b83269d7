"""FastAPI router for the concept graph, recommendations, and mastery reports."""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from concept_engine import catalog as concept_catalog
from concept_engine import closure, profile_records, recommend, render, report

logger = logging.getLogger(__name__)

router = APIRouter()

Difficulty = Literal["beginner", "intermediate", "advanced"]
Depth = Literal["surface", "intermediate", "deep"]


def get_catalog(request: Request) -> concept_catalog.Catalog:
    """Dependency returning the catalog loaded at startup (built-in one as fallback)."""
    cat = getattr(request.app.state, "catalog", None)
    # An empty loaded catalog is still the active one
    return concept_catalog.CATALOG if cat is None else cat


def _parse_ids(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


class TopicRef(BaseModel):
    id: str
    name: str


class TopicSummary(BaseModel):
    id: str
    name: str
    description: str
    difficulty: Difficulty
    prerequisites: List[str]
    related_topics: List[str]


class TopicDetail(TopicSummary):
    prerequisite_details: List[TopicRef]
    all_prerequisites: List[str]
    dependents: List[str]


class EligibleTopicOut(BaseModel):
    topic_id: str
    name: str
    dependent_count: int


class RecommendationOut(BaseModel):
    topic_id: str
    name: str
    reason: str
    dependent_count: int


class RecommendNextResponse(BaseModel):
    mastered: List[str]
    eligible: List[EligibleTopicOut]
    recommendation: Optional[RecommendationOut] = None


class LearningPathResponse(BaseModel):
    target: TopicRef
    steps: List[TopicRef]


class MasteryRecordIn(BaseModel):
    topic_id: str
    mastered: bool
    depth: Depth = "surface"
    completed_exercise_count: int = Field(0, ge=0)


class ReportRequest(BaseModel):
    records: List[MasteryRecordIn] = []


class ProfileReportRequest(BaseModel):
    concepts_mastered: List[str] = []
    specializations: Dict[str, float] = {}


class ReportEntryOut(BaseModel):
    topic_id: str
    name: str
    completed_exercise_count: int


class ReportResponse(BaseModel):
    mastered_count: int
    total_count: int
    completion_percentage: int
    by_depth: Dict[str, List[ReportEntryOut]]
    ready_to_learn: List[str]
    text: str


def _to_summary(node: concept_catalog.TopicNode) -> TopicSummary:
    return TopicSummary(
        id=node.id,
        name=node.name,
        description=node.description,
        difficulty=node.difficulty,
        prerequisites=list(node.prerequisites),
        related_topics=list(node.related_topics),
    )


def _ref(topic_id: str, cat: concept_catalog.Catalog) -> TopicRef:
    return TopicRef(id=topic_id, name=concept_catalog.topic_name(topic_id, cat))


def _get_topic_or_404(topic_id: str, cat: concept_catalog.Catalog) -> concept_catalog.TopicNode:
    node = concept_catalog.get_topic(topic_id, cat)
    if node is None:
        raise HTTPException(status_code=404, detail="Topic not found")
    return node


def _report_response(records: List[report.MasteryRecord], cat: concept_catalog.Catalog) -> ReportResponse:
    result = report.build_report(records, cat)
    return ReportResponse(
        mastered_count=result.mastered_count,
        total_count=result.total_count,
        completion_percentage=result.completion_percentage,
        by_depth={
            depth: [
                ReportEntryOut(
                    topic_id=e.topic_id,
                    name=e.name,
                    completed_exercise_count=e.completed_exercise_count,
                )
                for e in entries
            ]
            for depth, entries in result.by_depth.items()
        },
        ready_to_learn=result.ready_to_learn,
        text=render.render_report(result),
    )


@router.get("/topics", response_model=List[TopicSummary])
def list_topics(
    difficulty: Optional[Difficulty] = None,
    q: str = "",
    cat: concept_catalog.Catalog = Depends(get_catalog),
) -> List[TopicSummary]:
    """List topics in catalog order; filter by tier and/or keyword."""
    nodes = concept_catalog.search_topics(q, cat) if q.strip() else concept_catalog.list_topics(cat)
    return [_to_summary(n) for n in nodes if difficulty is None or n.difficulty == difficulty]


@router.get("/topics/{topic_id}", response_model=TopicDetail)
def get_topic_detail(topic_id: str, cat: concept_catalog.Catalog = Depends(get_catalog)) -> TopicDetail:
    """Single topic with direct prerequisite names, full prerequisite closure, and dependents."""
    node = _get_topic_or_404(topic_id, cat)
    order = {tid: i for i, tid in enumerate(cat)}
    all_prereqs = sorted(closure.get_prerequisites(topic_id, cat), key=lambda t: (order.get(t, len(order)), t))
    return TopicDetail(
        **_to_summary(node).model_dump(),
        prerequisite_details=[_ref(p, cat) for p in node.prerequisites],
        all_prerequisites=all_prereqs,
        dependents=closure.get_dependents(topic_id, cat),
    )


@router.get("/recommend-next", response_model=RecommendNextResponse)
def recommend_next(mastered: str = "", cat: concept_catalog.Catalog = Depends(get_catalog)) -> RecommendNextResponse:
    """Eligible topics and the single best next topic. mastered = comma-separated topic ids."""
    mastered_ids = _parse_ids(mastered)
    eligible = recommend.eligible_topics(mastered_ids, cat)
    best = recommend.recommend_next(mastered_ids, cat)
    return RecommendNextResponse(
        mastered=mastered_ids,
        eligible=[
            EligibleTopicOut(
                topic_id=e.topic_id,
                name=concept_catalog.topic_name(e.topic_id, cat),
                dependent_count=e.dependent_count,
            )
            for e in eligible
        ],
        recommendation=RecommendationOut(
            topic_id=best.topic_id,
            name=concept_catalog.topic_name(best.topic_id, cat),
            reason=best.reason,
            dependent_count=best.dependent_count,
        ) if best else None,
    )


@router.get("/learning-path/{topic_id}", response_model=LearningPathResponse)
def get_learning_path(
    topic_id: str,
    mastered: str = "",
    cat: concept_catalog.Catalog = Depends(get_catalog),
) -> LearningPathResponse:
    """Ordered list of topics still to learn to reach topic_id."""
    _get_topic_or_404(topic_id, cat)
    steps = closure.learning_path(topic_id, _parse_ids(mastered), cat)
    return LearningPathResponse(target=_ref(topic_id, cat), steps=[_ref(t, cat) for t in steps])


@router.post("/report", response_model=ReportResponse)
def mastery_report(req: ReportRequest, cat: concept_catalog.Catalog = Depends(get_catalog)) -> ReportResponse:
    """Mastery report from explicit per-topic records."""
    records = [
        report.MasteryRecord(
            topic_id=r.topic_id,
            mastered=r.mastered,
            depth=r.depth,
            completed_exercise_count=r.completed_exercise_count,
        )
        for r in req.records
    ]
    return _report_response(records, cat)


@router.post("/report/from-profile", response_model=ReportResponse)
def mastery_report_from_profile(
    req: ProfileReportRequest,
    cat: concept_catalog.Catalog = Depends(get_catalog),
) -> ReportResponse:
    """Mastery report built from a stored profile's mastered ids and specialization levels."""
    records = profile_records.records_from_profile(req.concepts_mastered, req.specializations)
    logger.debug("Built %d records from profile", len(records))
    return _report_response(records, cat)


@router.get("/graph", response_class=PlainTextResponse)
def concept_graph_text(cat: concept_catalog.Catalog = Depends(get_catalog)) -> str:
    """ASCII rendering of the whole graph grouped by difficulty."""
    return render.render_catalog(cat)
