"""Transitive prerequisites, direct dependents, and learning paths."""

from __future__ import annotations

from typing import Iterable, List, Set

from .catalog import CATALOG, Catalog, topological_order


def get_prerequisites(topic_id: str, catalog: Catalog = CATALOG) -> Set[str]:
    """All prerequisites of a topic, transitively, excluding the topic itself.

    Unknown ids have no prerequisites. A node is expanded at most once, so a
    cycle yields an incomplete set instead of unbounded recursion.
    """
    visited: Set[str] = set()
    found: Set[str] = set()
    stack = [topic_id]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        node = catalog.get(current)
        if node is None:
            continue
        for prereq in node.prerequisites:
            found.add(prereq)
            if prereq not in visited:
                stack.append(prereq)
    found.discard(topic_id)
    return found


def get_dependents(topic_id: str, catalog: Catalog = CATALOG) -> List[str]:
    """Topics that list topic_id as a direct prerequisite, in catalog order."""
    return [tid for tid, node in catalog.items() if topic_id in node.prerequisites]


def learning_path(target_id: str, mastered: Iterable[str] = (), catalog: Catalog = CATALOG) -> List[str]:
    """Ordered topics still to learn before (and including) target_id.

    Every topic appears after all of its prerequisites. Topics stuck on a
    prerequisite cycle are appended last, in catalog order.
    """
    if target_id not in catalog:
        return []
    done = set(mastered)
    needed = {tid for tid in get_prerequisites(target_id, catalog) if tid in catalog}
    needed.add(target_id)
    needed -= done

    ordered, cyclic = topological_order(catalog)
    return [tid for tid in ordered + cyclic if tid in needed]
