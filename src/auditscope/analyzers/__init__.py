"""
AuditScope Analyzers Package

This package contains the audit time heuristic:
- Source Document: Lexical signals read from contract text
- Audit Time: Base, complexity and upgradeability scoring
"""

from .audit_time import (
    EstimateBreakdown,
    ScoringMode,
    calculate_base_time,
    calculate_complexity_time,
    estimate,
    estimate_upgradeability_time,
)
from .source_document import SourceDocument

__all__ = [
    'EstimateBreakdown',
    'ScoringMode',
    'SourceDocument',
    'calculate_base_time',
    'calculate_complexity_time',
    'estimate',
    'estimate_upgradeability_time',
]
