"""Concept mastery engine: prerequisite graph, recommendations, and reports.

The core logic (catalog, closure, eligibility, reporting, rendering) stays
pure and framework-agnostic so it can be exercised from tests and the
FastAPI router alike.
"""

from . import catalog, closure, recommend, report, render, profile_records  # noqa: F401
