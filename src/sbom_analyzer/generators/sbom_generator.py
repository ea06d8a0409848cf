"""
Main SBOM generator that renders a scanner's dependency list into every
supported document format.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Dict, Any, Optional

from ..error_handling import SBOMGenerationError
from ..models import RepositoryRecord, ScannerTool
from .base_generator import BaseFormatter, SBOMFormat
from .cyclonedx_formatter import CycloneDXFormatter
from .spdx_formatter import SPDXFormatter

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SBOMGenerator:
    """
    Produces CycloneDX and SPDX documents for a (tool, repository) pair.

    Both documents of one call share a single creation timestamp taken from
    the injected clock.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the SBOM generator.

        Args:
            clock: Callable returning the current UTC time
        """
        self.clock = clock or _utc_now

        self._formatters: Dict[SBOMFormat, BaseFormatter] = {
            SBOMFormat.CYCLONEDX: CycloneDXFormatter(),
            SBOMFormat.SPDX: SPDXFormatter(),
        }

        self._generation_statistics = {
            "sboms_generated": 0,
            "components_processed": 0
        }

    @property
    def supported_formats(self) -> List[SBOMFormat]:
        return list(self._formatters)

    def generate(self, tool: ScannerTool, repo: RepositoryRecord, dependencies: List[str]) -> Dict[str, Dict[str, Any]]:
        """
        Render the dependency list in every supported format.

        Args:
            tool: Scanner credited with the output
            repo: Repository the dependencies belong to
            dependencies: ``name@version`` strings

        Returns:
            Mapping of format name (``cyclonedx``, ``spdx``) to document

        Raises:
            SBOMGenerationError: If a formatter fails
        """
        tool = ScannerTool.parse(tool)
        timestamp = self.clock()
        documents = {}

        for sbom_format, formatter in self._formatters.items():
            try:
                documents[sbom_format.value] = formatter.format_sbom(tool, repo, dependencies, timestamp)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise SBOMGenerationError(
                    f"Failed to generate {sbom_format.display_name} document for {repo.full_name}",
                    sbom_format=sbom_format.value,
                    tool=tool.value,
                    cause=e
                ) from e

        self._generation_statistics["sboms_generated"] += len(documents)
        self._generation_statistics["components_processed"] += len(dependencies)

        logger.info(f"Generated {len(documents)} SBOM documents for {repo.full_name} ({tool.value}, {len(dependencies)} components)")
        return documents

    def generate_and_store(self, catalog, tool: ScannerTool, repo: RepositoryRecord,
                           dependencies: List[str]) -> Dict[str, Dict[str, Any]]:
        """Generate every format and save each document into the catalog."""
        documents = self.generate(tool, repo, dependencies)
        for sbom_format, document in documents.items():
            catalog.save_sbom(tool, repo.id, sbom_format, document)
        return documents

    def get_statistics(self) -> Dict[str, Any]:
        return self._generation_statistics.copy()
