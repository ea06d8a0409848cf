"""
Custom exceptions for the SBOM analyzer system.
"""

from typing import Optional, Dict, Any


class SBOMAnalyzerError(Exception):
    """
    Base exception for all SBOM analyzer errors.

    This is the root exception class that all other custom exceptions
    inherit from, providing common functionality and attributes.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize SBOM analyzer error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class RepositoryError(SBOMAnalyzerError):
    """
    Exception for repository-related errors.

    Raised when a repository cannot be resolved, reached or read.
    """

    def __init__(
        self,
        message: str,
        repository: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize repository error.

        Args:
            message: Error message
            repository: Slug or raw input of the repository that caused the error
            operation: Operation that failed (probe, fetch_info, etc.)
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context') or {}
        if repository:
            context['repository'] = repository
        if operation:
            context['operation'] = operation

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.repository = repository
        self.operation = operation


class GitHubAPIError(RepositoryError):
    """A GitHub API call failed with a non-2xx status or a transport error."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        kwargs.setdefault('error_code', f"HTTP_{status_code}" if status_code else "TRANSPORT")
        super().__init__(message, **kwargs)
        self.status_code = status_code


class RepositoryNotFoundError(GitHubAPIError):
    """GitHub answered 404 for the repository."""

    def __init__(self, message: str = "Repository not found", **kwargs):
        super().__init__(message, status_code=404, **kwargs)


class RepositoryForbiddenError(GitHubAPIError):
    """GitHub answered 403; the repository may be private or the rate limit exhausted."""

    def __init__(self, message: str = "Access forbidden (might be private)", **kwargs):
        super().__init__(message, status_code=403, **kwargs)


class InvalidRepositoryURLError(RepositoryError):
    """No ``owner/repo`` slug could be derived from the user input."""

    def __init__(self, message: str = "Invalid GitHub repository URL", **kwargs):
        kwargs.setdefault('error_code', "INVALID_INPUT")
        super().__init__(message, **kwargs)


class SelectionError(SBOMAnalyzerError):
    """Exception for repository selection precondition failures."""


class SelectionLimitError(SelectionError):
    """Selecting another repository would exceed the selection limit."""

    def __init__(self, limit: int, **kwargs):
        kwargs.setdefault('error_code', "SELECTION_LIMIT")
        kwargs.setdefault('context', {'limit': limit})
        super().__init__(f"Maximum {limit} repositories can be selected", **kwargs)
        self.limit = limit


class EmptySelectionError(SelectionError):
    """An operation that needs selected repositories was invoked without any."""

    def __init__(self, message: str = "No repositories selected", **kwargs):
        kwargs.setdefault('error_code', "EMPTY_SELECTION")
        super().__init__(message, **kwargs)


class SBOMGenerationError(SBOMAnalyzerError):
    """
    Exception for SBOM generation errors.

    Raised when an SBOM document cannot be rendered for a repository.
    """

    def __init__(
        self,
        message: str,
        sbom_format: Optional[str] = None,
        tool: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or {}
        if sbom_format:
            context['sbom_format'] = sbom_format
        if tool:
            context['tool'] = tool

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.sbom_format = sbom_format
        self.tool = tool


class ExportError(SBOMAnalyzerError):
    """
    Exception for export errors.

    Raised when SBOM files or reports cannot be written, or when there is
    nothing to export.
    """

    def __init__(
        self,
        message: str,
        output_path: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or {}
        if output_path:
            context['output_path'] = output_path

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.output_path = output_path
