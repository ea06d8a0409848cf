"""
Base classes and shared helpers for SBOM document formatters.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Tuple

from ..models import RepositoryRecord, ScannerTool


class SBOMFormat(Enum):
    """Supported SBOM output formats."""
    CYCLONEDX = "cyclonedx"
    SPDX = "spdx"

    @property
    def display_name(self) -> str:
        return "CycloneDX" if self is SBOMFormat.CYCLONEDX else "SPDX"

    @classmethod
    def parse(cls, value) -> 'SBOMFormat':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown SBOM format: {value}. Valid formats: {[f.value for f in cls]}")


def split_dependency(dependency: str) -> Tuple[str, str]:
    """
    Split ``name@version`` into its parts.

    Scoped npm names (``@scope/pkg@1.0.0``) keep their leading ``@``. A
    missing version comes back as ``"unknown"``.
    """
    separator = dependency.rfind("@")
    if separator <= 0:
        return dependency, "unknown"

    name, version = dependency[:separator], dependency[separator + 1:]
    return name, version or "unknown"


def isoformat_utc(timestamp: datetime) -> str:
    """Render a timestamp the way JavaScript's ``toISOString`` does."""
    return timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp.microsecond // 1000:03d}Z"


class BaseFormatter(ABC):
    """Abstract base class for format-specific SBOM formatters."""

    @abstractmethod
    def format_sbom(
        self,
        tool: ScannerTool,
        repo: RepositoryRecord,
        dependencies: List[str],
        timestamp: datetime
    ) -> Dict[str, Any]:
        """
        Render a dependency list into an SBOM document.

        Args:
            tool: Scanner credited with the document
            repo: Repository the dependencies belong to
            dependencies: ``name@version`` strings
            timestamp: Creation time (UTC)

        Returns:
            JSON-serializable SBOM document
        """
        pass

    @property
    @abstractmethod
    def sbom_format(self) -> SBOMFormat:
        """The format this formatter produces."""
        pass
