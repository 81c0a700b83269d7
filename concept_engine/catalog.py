"""
CS concept catalog: topics, difficulty tiers, and prerequisite edges.

The catalog is built once at import (or from a JSON file at startup) and is
exposed as a read-only mapping keyed by topic id. Iteration order is insertion
order; the recommendation tie-break and all rendering depend on it.
"""
from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DIFFICULTY_TIERS = ("beginner", "intermediate", "advanced")


@dataclass(frozen=True)
class TopicNode:
    id: str
    name: str
    description: str
    difficulty: str
    prerequisites: Tuple[str, ...] = ()
    related_topics: Tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if self.difficulty not in DIFFICULTY_TIERS:
            raise ValueError(f"Topic {self.id!r} has unknown difficulty {self.difficulty!r}")
        # Accept lists from JSON/tests but store tuples so the node stays hashable
        object.__setattr__(self, "prerequisites", tuple(self.prerequisites))
        object.__setattr__(self, "related_topics", tuple(self.related_topics))


Catalog = Mapping[str, TopicNode]


def build_catalog(topics: Iterable[TopicNode]) -> Catalog:
    """Return a read-only id -> TopicNode mapping. Raises ValueError on duplicate ids."""
    by_id = {}
    for node in topics:
        if node.id in by_id:
            raise ValueError(f"Duplicate topic id {node.id!r}")
        by_id[node.id] = node
    return MappingProxyType(by_id)


_TOPICS = [
    # Fundamentals
    TopicNode(
        "basic-types",
        "Basic Types",
        "Understanding integers, floats, strings, booleans, and type representation in memory",
        "beginner",
        (),
        ("type-systems", "memory-management"),
    ),
    TopicNode(
        "control-flow",
        "Control Flow",
        "If statements, loops, conditional execution, and control structures",
        "beginner",
        ("basic-types",),
        ("algorithms", "recursion"),
    ),
    TopicNode(
        "functions-and-scope",
        "Functions and Scope",
        "Function definitions, scope, closures, and variable lifetime",
        "beginner",
        ("control-flow",),
        ("recursion", "higher-order-functions"),
    ),
    # Core concepts
    TopicNode(
        "recursion",
        "Recursion",
        "Recursive functions, call stacks, base cases, and recursive problem solving",
        "intermediate",
        ("functions-and-scope",),
        ("algorithms", "data-structures"),
    ),
    TopicNode(
        "memory-management",
        "Memory Management",
        "Stack vs heap, allocation/deallocation, ownership, and memory safety",
        "intermediate",
        ("basic-types",),
        ("pointers-references", "garbage-collection"),
    ),
    TopicNode(
        "pointers-references",
        "Pointers and References",
        "Pointer arithmetic, dereferencing, reference semantics, and aliasing",
        "intermediate",
        ("memory-management",),
        ("memory-leak", "null-reference"),
    ),
    # Data structures
    TopicNode(
        "data-structures",
        "Data Structures",
        "Arrays, linked lists, trees, graphs, hash tables, and collections",
        "intermediate",
        ("recursion",),
        ("algorithms", "optimization"),
    ),
    TopicNode(
        "algorithms",
        "Algorithms",
        "Sorting, searching, traversal, and algorithm analysis (Big-O notation)",
        "intermediate",
        ("data-structures",),
        ("optimization", "performance-bottleneck"),
    ),
    # Type systems
    TopicNode(
        "type-systems",
        "Type Systems",
        "Static vs dynamic typing, type inference, generics, and type safety",
        "intermediate",
        ("basic-types",),
        ("type-mismatch", "null-reference"),
    ),
    TopicNode(
        "pattern-matching",
        "Pattern Matching",
        "Destructuring, exhaustiveness checking, and match expressions",
        "intermediate",
        ("type-systems",),
        ("error-handling", "null-reference"),
    ),
    # Concurrency & async
    TopicNode(
        "async-await",
        "Async/Await",
        "Asynchronous programming, promises, futures, and non-blocking I/O",
        "intermediate",
        ("functions-and-scope",),
        ("concurrency", "error-handling"),
    ),
    TopicNode(
        "concurrency",
        "Concurrency",
        "Threads, processes, race conditions, deadlocks, and synchronization primitives",
        "advanced",
        ("memory-management", "async-await"),
        ("atomics", "locks", "race-conditions"),
    ),
    TopicNode(
        "atomics",
        "Atomic Operations",
        "Atomic reads/writes, compare-and-swap, memory ordering, and lock-free programming",
        "advanced",
        ("concurrency",),
        ("locks", "race-conditions"),
    ),
    TopicNode(
        "locks",
        "Locks and Synchronization",
        "Mutexes, semaphores, readers-writer locks, and synchronization strategies",
        "advanced",
        ("atomics",),
        ("race-conditions", "deadlock"),
    ),
    # Error handling & testing
    TopicNode(
        "error-handling",
        "Error Handling",
        "Exceptions, error codes, error propagation, and recovery",
        "intermediate",
        ("control-flow",),
        ("pattern-matching", "testing"),
    ),
    TopicNode(
        "testing",
        "Testing",
        "Unit tests, integration tests, mocks, test-driven development, and coverage",
        "intermediate",
        ("functions-and-scope",),
        ("error-handling", "debugging"),
    ),
    TopicNode(
        "debugging",
        "Debugging",
        "Debugging techniques, logging, profiling, and problem diagnosis",
        "intermediate",
        ("testing",),
        ("error-handling", "performance-bottleneck"),
    ),
    # Advanced topics
    TopicNode(
        "optimization",
        "Optimization",
        "Performance optimization, caching, memoization, and profiling",
        "advanced",
        ("algorithms", "testing"),
        ("performance-bottleneck", "memory-management"),
    ),
    TopicNode(
        "api-design",
        "API Design",
        "Interface design, contracts, versioning, and API compatibility",
        "intermediate",
        ("type-systems",),
        ("error-handling", "testing"),
    ),
    TopicNode(
        "garbage-collection",
        "Garbage Collection",
        "GC algorithms, mark-and-sweep, reference counting, and memory pressure",
        "advanced",
        ("memory-management",),
        ("optimization", "performance-bottleneck"),
    ),
    # Problem categories
    TopicNode(
        "race-conditions",
        "Race Conditions",
        "Detecting, debugging, and fixing race conditions in concurrent code",
        "advanced",
        ("locks", "atomics"),
        ("concurrency", "testing"),
    ),
    TopicNode(
        "deadlock",
        "Deadlock",
        "Understanding, detecting, and resolving deadlock scenarios",
        "advanced",
        ("locks",),
        ("race-conditions", "concurrency"),
    ),
    TopicNode(
        "null-reference",
        "Null Reference",
        "Understanding null/undefined, null safety, optional types, and defensive coding",
        "intermediate",
        ("type-systems",),
        ("error-handling", "pattern-matching"),
    ),
    TopicNode(
        "type-mismatch",
        "Type Mismatch",
        "Type checking, casting, coercion, and handling type incompatibilities",
        "intermediate",
        ("type-systems",),
        ("api-design", "null-reference"),
    ),
    TopicNode(
        "memory-leak",
        "Memory Leak",
        "Detecting, preventing, and fixing memory leaks and resource leaks",
        "intermediate",
        ("memory-management", "pointers-references"),
        ("garbage-collection", "testing"),
    ),
    TopicNode(
        "performance-bottleneck",
        "Performance Bottleneck",
        "Profiling, identifying, and optimizing performance issues",
        "advanced",
        ("algorithms", "optimization"),
        ("testing", "debugging"),
    ),
]

CATALOG: Catalog = build_catalog(_TOPICS)

# Capstones whose full learning paths are shown alongside the rendered graph
RECOMMENDED_PATH_TARGETS = ("race-conditions", "performance-bottleneck", "debugging")


def get_topic(topic_id: str, catalog: Catalog = CATALOG) -> Optional[TopicNode]:
    return catalog.get(topic_id)


def topic_name(topic_id: str, catalog: Catalog = CATALOG) -> str:
    """Display name for a topic id; unknown ids display as themselves."""
    node = catalog.get(topic_id)
    return node.name if node else topic_id


def list_topics(catalog: Catalog = CATALOG, difficulty: Optional[str] = None) -> List[TopicNode]:
    """All topics in catalog order, optionally limited to one difficulty tier."""
    return [n for n in catalog.values() if difficulty is None or n.difficulty == difficulty]


def search_topics(keyword: str, catalog: Catalog = CATALOG) -> List[TopicNode]:
    """Case-insensitive substring search over topic names and descriptions."""
    needle = (keyword or "").strip().lower()
    if not needle:
        return list(catalog.values())
    return [
        n for n in catalog.values()
        if needle in n.name.lower() or needle in n.description.lower()
    ]


def topological_order(catalog: Catalog = CATALOG) -> Tuple[List[str], List[str]]:
    """Kahn's algorithm over prerequisite edges, drained in catalog order.

    Returns (ordered_ids, cyclic_ids). Prerequisites missing from the catalog
    are ignored. cyclic_ids are the topics that never became free: they sit on
    a cycle or depend on one.
    """
    in_degree = {tid: 0 for tid in catalog}
    dependents = {tid: [] for tid in catalog}
    for tid, node in catalog.items():
        for prereq in set(node.prerequisites):
            if prereq in catalog:
                in_degree[tid] += 1
                dependents[prereq].append(tid)

    frontier = deque(tid for tid, deg in in_degree.items() if deg == 0)
    ordered: List[str] = []
    while frontier:
        current = frontier.popleft()
        ordered.append(current)
        for dep in dependents[current]:
            in_degree[dep] -= 1
            if in_degree[dep] == 0:
                frontier.append(dep)

    done = set(ordered)
    cyclic = [tid for tid in catalog if tid not in done]
    return ordered, cyclic


def validate_catalog(catalog: Catalog = CATALOG, strict: bool = False) -> List[str]:
    """Check prerequisite references and acyclicity.

    Problems are logged as warnings and returned. With strict=True a cycle
    raises ValueError instead.
    """
    problems: List[str] = []
    for tid, node in catalog.items():
        for prereq in node.prerequisites:
            if prereq not in catalog:
                problems.append(f"{tid}: unknown prerequisite {prereq!r}")
            elif prereq == tid:
                problems.append(f"{tid}: lists itself as a prerequisite")

    _, cyclic = topological_order(catalog)
    if cyclic:
        msg = f"prerequisite cycle involving: {', '.join(cyclic)}"
        if strict:
            logger.error("Catalog rejected, %s", msg)
            raise ValueError(f"Catalog is not acyclic: {msg}")
        problems.append(msg)

    for problem in problems:
        logger.warning("Catalog check: %s", problem)
    return problems


def _optional_str(entry: dict, key: str, tid: str) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Topic {tid!r}: {key} must be a string")
    return value


def _id_list(entry: dict, key: str, tid: str) -> Tuple[str, ...]:
    value = entry.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Topic {tid!r}: {key} must be a list of topic ids")
    return tuple(value)


def load_catalog_file(path) -> Catalog:
    """Load a JSON array of topic objects into an immutable catalog."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read catalog file {path}: {e}") from e
    if not isinstance(raw, list):
        raise ValueError(f"Catalog file {path} must contain a JSON array of topics")

    topics = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"Catalog entry {i} is not an object")
        try:
            tid = entry["id"]
            difficulty = entry["difficulty"]
        except KeyError as e:
            raise ValueError(f"Catalog entry {i} is missing field {e}") from e
        if not isinstance(tid, str) or not tid:
            raise ValueError(f"Catalog entry {i} has a non-string id {tid!r}")
        if not isinstance(difficulty, str):
            raise ValueError(f"Topic {tid!r} has a non-string difficulty {difficulty!r}")
        topics.append(
            TopicNode(
                id=tid,
                name=_optional_str(entry, "name", tid) or tid,
                description=_optional_str(entry, "description", tid),
                difficulty=difficulty,
                prerequisites=_id_list(entry, "prerequisites", tid),
                related_topics=_id_list(entry, "related_topics", tid),
            )
        )
    catalog = build_catalog(topics)
    logger.info(f"Loaded {len(catalog)} topics from {path}")
    return catalog
