"""
Error taxonomy for the SBOM analyzer.
"""

from .exceptions import (
    SBOMAnalyzerError, RepositoryError, GitHubAPIError, RepositoryNotFoundError,
    RepositoryForbiddenError, InvalidRepositoryURLError, SelectionError,
    SelectionLimitError, EmptySelectionError, SBOMGenerationError, ExportError
)

__all__ = [
    "SBOMAnalyzerError",
    "RepositoryError",
    "GitHubAPIError",
    "RepositoryNotFoundError",
    "RepositoryForbiddenError",
    "InvalidRepositoryURLError",
    "SelectionError",
    "SelectionLimitError",
    "EmptySelectionError",
    "SBOMGenerationError",
    "ExportError"
]
