"""Orchestration package for batch certificate matching."""

from .match_logger import MatchLogger
from .match_orchestrator import (
    ASSIGNMENT_COLUMNS,
    MatchOrchestrator,
    apply_review_decisions,
    find_shared_certificates,
    match_recipients,
    write_assignments_csv,
)

__all__ = [
    "MatchLogger",
    "MatchOrchestrator",
    "ASSIGNMENT_COLUMNS",
    "apply_review_decisions",
    "find_shared_certificates",
    "match_recipients",
    "write_assignments_csv",
]
