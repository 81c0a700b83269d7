"""Turn a stored learner profile into mastery records.

The profile itself (mastered concept ids plus a per-concept specialization
level) is loaded and saved elsewhere; this module only reads values handed to
it and builds fresh records on every call.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional

from .report import MasteryRecord


def depth_for_level(level: float) -> str:
    """Specialization level -> mastery depth (one level per solved exercise)."""
    if level >= 3:
        return "deep"
    if level >= 2:
        return "intermediate"
    return "surface"


def mastered_set(concepts_mastered: Iterable[str]) -> FrozenSet[str]:
    return frozenset(concepts_mastered or ())


def records_from_profile(
    concepts_mastered: Iterable[str],
    specializations: Optional[Dict[str, float]] = None,
) -> List[MasteryRecord]:
    """Mastered concepts first (profile order, de-duplicated), then concepts
    that only have a specialization level."""
    levels = dict(specializations or {})
    records: List[MasteryRecord] = []
    seen = set()

    for cid in concepts_mastered or ():
        if cid in seen:
            continue
        seen.add(cid)
        level = levels.get(cid, 0) or 0
        records.append(MasteryRecord(cid, True, depth_for_level(level), int(level)))

    for cid, level in levels.items():
        if cid in seen:
            continue
        seen.add(cid)
        level = level or 0
        records.append(MasteryRecord(cid, False, depth_for_level(level), int(level)))

    return records
