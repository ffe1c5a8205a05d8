"""
Exception hierarchy for AuditScope.

This module defines all custom exceptions used throughout the codebase.
Every exception is terminal for the estimate it was raised from.
"""
from typing import Any, List, Optional


class AuditScopeError(Exception):
    """Base exception for all AuditScope-specific exceptions."""
    pass


class MissingVersionDeclaration(AuditScopeError):
    """Raised when the source has no `pragma solidity` declaration."""

    def __init__(self, message: str = "No 'pragma solidity' version declaration found in source"):
        super().__init__(message)


class VersionNotFound(AuditScopeError):
    """Raised when the version catalog has no build for a constraint."""

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"No compiler release found for version constraint '{constraint}'")


class CatalogUnreachable(AuditScopeError):
    """Raised when the version catalog cannot be fetched or parsed."""

    def __init__(self, url: str, cause: Any = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Could not load compiler version catalog from {url}: {cause}")


class CompilerLoadFailed(AuditScopeError):
    """Raised when the compiler for a resolved version cannot be loaded."""

    def __init__(self, version: str, cause: Any = None):
        self.version = version
        self.cause = cause
        super().__init__(f"Failed to load compiler {version}: {cause}")


class CompileDiagnostics(AuditScopeError):
    """Raised when compilation reports one or more errors.

    Carries every error diagnostic, not just the first one.
    """

    def __init__(self, diagnostics: List[Any]):
        self.diagnostics = list(diagnostics)
        lines = [f"Compilation failed with {len(self.diagnostics)} error(s):"]
        lines.extend(f"- {d}" for d in self.diagnostics)
        super().__init__("\n".join(lines))


class InvalidConfig(AuditScopeError):
    """Raised when a weight overlay cannot be read, parsed or validated."""

    def __init__(self, path: Optional[str], cause: Any = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Invalid configuration in {path}: {cause}")


class SourceUnreadable(AuditScopeError):
    """Raised when a contract or import file cannot be read from disk."""

    def __init__(self, path: str, cause: Any = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read source file {path}: {cause}")
