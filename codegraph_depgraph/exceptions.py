"""
Depgraph Exception Hierarchy

Standardized exception hierarchy for dependency graph extraction.

Usage guide:
    1. Recoverable errors (one file, one grammar) -> log and continue
    2. Unrecoverable errors (corrupt baseline, bad filter) -> raise
    3. External errors (git, filesystem) -> wrap into a custom exception

Example:
    try:
        repo = Repo(path)
    except GitCommandError as e:
        raise SourceError("Git repository unreadable") from e
"""

from typing import Any


class DepgraphError(Exception):
    """Base exception for all depgraph errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize depgraph error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Parsing Errors
# ============================================================


class ParsingError(DepgraphError):
    """Parser and grammar failures."""

    pass


class GrammarUnavailableError(ParsingError):
    """Neither the native nor the portable backend can supply a grammar."""

    def __init__(self, grammar: str, details: dict[str, Any] | None = None):
        super().__init__(f"Grammar unavailable: {grammar}", details)
        self.grammar = grammar


class ExtractionError(ParsingError):
    """A single file could not be parsed or its tree could not be walked."""

    def __init__(self, file_path: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(f"Failed to extract {file_path}: {message}", details)
        self.file_path = file_path


# ============================================================
# Validation Errors
# ============================================================


class ValidationError(DepgraphError):
    """Input validation failures."""

    pass


class GraphFormatError(ValidationError):
    """Malformed persisted graph or diff document."""

    pass


class InvalidLanguageFilterError(ValidationError):
    """Unknown language in a language filter."""

    def __init__(self, language: str, supported: list[str]):
        super().__init__(
            f"Unknown language filter: {language}",
            {"supported": supported},
        )
        self.language = language


# ============================================================
# Source Errors
# ============================================================


class SourceError(DepgraphError):
    """Filesystem or version-control source failures."""

    pass
