"""
Eligibility and next-topic recommendation.

A topic is eligible when it is not mastered and every one of its
prerequisites is. Eligible topics are scored by how many topics list them as
a direct prerequisite; the recommendation is the best-scoring one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional

from .catalog import CATALOG, Catalog, TopicNode
from .closure import get_dependents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibleTopic:
    topic_id: str
    dependent_count: int


@dataclass(frozen=True)
class Recommendation:
    topic_id: str
    reason: str
    dependent_count: int


def is_eligible(node: TopicNode, mastered: AbstractSet[str]) -> bool:
    if node.id in mastered:
        return False
    return all(prereq in mastered for prereq in node.prerequisites)


def eligible_topics(mastered: Iterable[str], catalog: Catalog = CATALOG) -> List[EligibleTopic]:
    """Every unmastered topic whose prerequisites are all mastered, in catalog order."""
    done = frozenset(mastered)
    return [
        EligibleTopic(node.id, len(get_dependents(node.id, catalog)))
        for node in catalog.values()
        if is_eligible(node, done)
    ]


def recommend_next(mastered: Iterable[str], catalog: Catalog = CATALOG) -> Optional[Recommendation]:
    """Pick the eligible topic that unlocks the most dependents.

    Ties go to the topic that comes first in catalog order. Returns None when
    nothing is eligible (everything mastered, or no reachable entry point).
    """
    best: Optional[EligibleTopic] = None
    for candidate in eligible_topics(mastered, catalog):
        # Strict > keeps the earliest topic on ties
        if best is None or candidate.dependent_count > best.dependent_count:
            best = candidate

    if best is None:
        logger.debug("No eligible topics to recommend")
        return None
    return Recommendation(
        topic_id=best.topic_id,
        reason=f"Unlocks {best.dependent_count} dependent topics",
        dependent_count=best.dependent_count,
    )
