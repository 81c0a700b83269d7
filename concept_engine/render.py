"""Plain-text rendering of the concept graph and mastery reports."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .catalog import CATALOG, DIFFICULTY_TIERS, RECOMMENDED_PATH_TARGETS, Catalog, TopicNode, topic_name
from .closure import learning_path
from .report import MasteryReport

_WIDTH = 64
_RULE = "═" * 63


def _banner(title: str) -> List[str]:
    return [
        "╔" + "═" * _WIDTH + "╗",
        "║ " + title.ljust(_WIDTH - 1) + "║",
        "╚" + "═" * _WIDTH + "╝",
    ]


def _section(title: str) -> str:
    head = f"┌─ {title} "
    return head + "─" * max(1, _WIDTH - len(head)) + "┐"


def group_by_difficulty(catalog: Catalog = CATALOG) -> Dict[str, List[TopicNode]]:
    """Topics grouped by tier, each topic in exactly one group, catalog order within."""
    groups: Dict[str, List[TopicNode]] = {tier: [] for tier in DIFFICULTY_TIERS}
    for node in catalog.values():
        groups[node.difficulty].append(node)
    return groups


def render_learning_path(target_id: str, mastered: Iterable[str] = (), catalog: Catalog = CATALOG) -> str:
    path = learning_path(target_id, mastered, catalog)
    if not path:
        return f"Nothing left to learn for {topic_name(target_id, catalog)}.\n"
    lines = [f"Path to {topic_name(target_id, catalog)}:"]
    lines += [f"  {i}. {topic_name(tid, catalog)}" for i, tid in enumerate(path, 1)]
    return "\n".join(lines) + "\n"


def render_catalog(catalog: Catalog = CATALOG, path_targets: Iterable[str] = RECOMMENDED_PATH_TARGETS) -> str:
    """ASCII view of the graph by difficulty tier, plus computed learning paths."""
    lines = [""] + _banner("CS CONCEPTS DEPENDENCY GRAPH - Learning Path") + [""]

    for tier, nodes in group_by_difficulty(catalog).items():
        if not nodes:
            continue
        lines.append(_section(f"{tier.upper()} LEVEL"))
        for i, node in enumerate(nodes):
            prefix = "└" if i == len(nodes) - 1 else "├"
            lines.append(f"{prefix}─ {node.name}")
            if node.prerequisites:
                names = ", ".join(topic_name(p, catalog) for p in node.prerequisites)
                lines.append(f"   requires: {names}")
            else:
                lines.append("   (no prerequisites)")
        lines.append("")

    targets = [t for t in path_targets if t in catalog]
    if targets:
        lines += _banner("RECOMMENDED LEARNING PATHS") + [""]
        for target in targets:
            lines.append(render_learning_path(target, (), catalog))

    return "\n".join(lines) + "\n"


def render_report(report: MasteryReport) -> str:
    lines = [
        _RULE,
        "                    MASTERY REPORT",
        _RULE,
        "",
        f"Overall Progress: {report.mastered_count}/{report.total_count} concepts "
        f"({report.completion_percentage}%)",
        "",
    ]

    for depth, title, mark in (
        ("deep", "Deep Understanding:", "✓"),
        ("intermediate", "Intermediate Understanding:", "◐"),
        ("surface", "Surface Understanding:", "○"),
    ):
        lines.append(title)
        for entry in report.by_depth.get(depth, []):
            count = entry.completed_exercise_count
            lines.append(f"  {mark} {entry.name} ({count} exercise{'' if count == 1 else 's'})")
        lines.append("")

    if report.ready_to_learn:
        lines.append("Ready to Learn Next:")
        lines += [f"  → {name}" for name in report.ready_to_learn]
        lines.append("")

    lines.append(_RULE)
    return "\n".join(lines) + "\n"
