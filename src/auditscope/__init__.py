"""
AuditScope - manual audit time estimation for Solidity contracts.

Resolves the compiler version a contract declares, compiles it to get its
function inventory and scores the result against a tunable weight table.
"""

from .analyzers import EstimateBreakdown, ScoringMode
from .estimator import AuditEstimator, EstimateResult
from .exceptions import (
    AuditScopeError,
    CatalogUnreachable,
    CompileDiagnostics,
    CompilerLoadFailed,
    InvalidConfig,
    MissingVersionDeclaration,
    SourceUnreadable,
    VersionNotFound,
)

__version__ = "0.1.0"

__all__ = [
    'AuditEstimator',
    'EstimateResult',
    'EstimateBreakdown',
    'ScoringMode',
    'AuditScopeError',
    'CatalogUnreachable',
    'CompileDiagnostics',
    'CompilerLoadFailed',
    'InvalidConfig',
    'MissingVersionDeclaration',
    'SourceUnreadable',
    'VersionNotFound',
]
