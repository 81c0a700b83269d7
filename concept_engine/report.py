"""Mastery report: overall progress, depth buckets, and what is ready next."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .catalog import CATALOG, Catalog, topic_name
from .recommend import eligible_topics

logger = logging.getLogger(__name__)

DEPTH_TIERS = ("surface", "intermediate", "deep")


@dataclass(frozen=True)
class MasteryRecord:
    topic_id: str
    mastered: bool
    depth: str = "surface"
    completed_exercise_count: int = 0


@dataclass(frozen=True)
class ReportEntry:
    topic_id: str
    name: str
    completed_exercise_count: int


@dataclass
class MasteryReport:
    mastered_count: int
    total_count: int
    completion_percentage: int
    by_depth: Dict[str, List[ReportEntry]] = field(default_factory=dict)
    ready_to_learn: List[str] = field(default_factory=list)


def _percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # Half-up rounding, clamped: unknown ids can push part past whole
    return max(0, min(100, math.floor(100 * part / whole + 0.5)))


def build_report(records: Iterable[MasteryRecord], catalog: Catalog = CATALOG) -> MasteryReport:
    """Summarize a learner's mastery records against the catalog.

    Records for ids missing from the catalog still count toward progress and
    their depth bucket; they are displayed under their raw id.
    """
    records = list(records)
    mastered_records = [r for r in records if r.mastered]
    mastered = {r.topic_id for r in mastered_records}

    by_depth: Dict[str, List[ReportEntry]] = {tier: [] for tier in DEPTH_TIERS}
    for r in mastered_records:
        depth = r.depth
        if depth not in by_depth:
            logger.warning("Unknown mastery depth %r for %s; treating as surface", depth, r.topic_id)
            depth = "surface"
        by_depth[depth].append(
            ReportEntry(r.topic_id, topic_name(r.topic_id, catalog), r.completed_exercise_count)
        )

    return MasteryReport(
        mastered_count=len(mastered),
        total_count=len(catalog),
        completion_percentage=_percentage(len(mastered), len(catalog)),
        by_depth=by_depth,
        ready_to_learn=[topic_name(e.topic_id, catalog) for e in eligible_topics(mastered, catalog)],
    )
