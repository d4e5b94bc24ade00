"""Exception hierarchy for contribution search."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class ContributionSearchError(Exception):
    """Base exception for contribution search errors."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(ContributionSearchError):
    """Raised when caller input is missing or malformed."""

    field_name: str
    value: object = None

    def __str__(self) -> str:
        return f"Invalid {self.field_name}: {self.value!r}\n{self.message}"


@dataclass
class NotFoundError(ContributionSearchError):
    """Raised when a cached search result is absent or expired."""

    search_id: str

    def __str__(self) -> str:
        return f"Search results not found or expired: {self.search_id}\n{self.message}"


@dataclass
class InternalError(ContributionSearchError):
    """Raised when matching or aggregation fails unexpectedly."""


@dataclass
class SourceReadError(ContributionSearchError):
    """Raised when a source file cannot be read."""

    source_path: Path

    def __str__(self) -> str:
        return f"Failed to read source: {self.source_path}\n{self.message}"


@dataclass
class DataDirectoryError(ContributionSearchError):
    """Raised when the data directory is missing or holds no source files."""

    path: Path
    pattern: str = "*.txt"

    def __str__(self) -> str:
        return f"No source files matching {self.pattern!r} in {self.path}\n{self.message}"
