"""
CycloneDX formatter for simulated scanner output.
"""

import logging
from datetime import datetime
from typing import Dict, Any, List
from urllib.parse import quote

from ..models import RepositoryRecord, ScannerTool
from .base_generator import BaseFormatter, SBOMFormat, split_dependency, isoformat_utc

logger = logging.getLogger(__name__)


class CycloneDXFormatter(BaseFormatter):
    """
    Formatter for CycloneDX JSON documents (specification version 1.4).

    Every dependency becomes a ``library`` component with an npm package URL
    and an empty ``dependsOn`` entry.
    """

    def __init__(self):
        self.spec_version = "1.4"

    @property
    def sbom_format(self) -> SBOMFormat:
        return SBOMFormat.CYCLONEDX

    def format_sbom(
        self,
        tool: ScannerTool,
        repo: RepositoryRecord,
        dependencies: List[str],
        timestamp: datetime
    ) -> Dict[str, Any]:
        tool = ScannerTool.parse(tool)

        document = {
            "bomFormat": "CycloneDX",
            "specVersion": self.spec_version,
            "version": 1,
            "metadata": {
                "timestamp": isoformat_utc(timestamp),
                "tools": [
                    {
                        "vendor": tool.vendor,
                        "name": tool.value,
                        "version": tool.version
                    }
                ],
                "component": {
                    "type": "application",
                    "bom-ref": repo.full_name,
                    "name": repo.name,
                    "version": "1.0.0",
                    "purl": f"pkg:github/{repo.full_name}",
                    "description": repo.description
                }
            },
            "components": [self._format_component(dep) for dep in dependencies],
            "dependencies": [{"ref": dep, "dependsOn": []} for dep in dependencies]
        }

        logger.debug(f"Generated CycloneDX document for {repo.full_name} with {len(dependencies)} components")
        return document

    def _format_component(self, dependency: str) -> Dict[str, Any]:
        name, version = split_dependency(dependency)
        return {
            "type": "library",
            "bom-ref": dependency,
            "name": name,
            "version": version,
            "purl": f"pkg:npm/{self._purl_name(name)}@{version}"
        }

    @staticmethod
    def _purl_name(name: str) -> str:
        # purl requires the scope's "@" to be percent-encoded
        if name.startswith("@"):
            return quote(name[0]) + name[1:]
        return name
