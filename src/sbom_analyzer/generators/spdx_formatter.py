"""
SPDX formatter for simulated scanner output.
"""

import logging
import re
from datetime import datetime
from typing import Dict, Any, List

from ..models import RepositoryRecord, ScannerTool
from .base_generator import BaseFormatter, SBOMFormat, split_dependency, isoformat_utc

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


class SPDXFormatter(BaseFormatter):
    """
    Formatter for SPDX JSON documents (specification version 2.3).

    The repository is the root package; each dependency is a package the
    root ``CONTAINS``.
    """

    def __init__(self, organization: str = "SBOM Analyzer",
                 namespace_base: str = "https://sbom.example.com"):
        self.spdx_version = "SPDX-2.3"
        self.data_license = "CC0-1.0"
        self.organization = organization
        self.namespace_base = namespace_base.rstrip("/")

    @property
    def sbom_format(self) -> SBOMFormat:
        return SBOMFormat.SPDX

    def format_sbom(
        self,
        tool: ScannerTool,
        repo: RepositoryRecord,
        dependencies: List[str],
        timestamp: datetime
    ) -> Dict[str, Any]:
        tool = ScannerTool.parse(tool)
        root_id = self._root_spdx_id(repo)
        epoch_ms = int(timestamp.timestamp() * 1000)

        packages = [
            {
                "SPDXID": root_id,
                "name": repo.name,
                "versionInfo": "1.0.0",
                "downloadLocation": repo.url,
                "filesAnalyzed": False,
                "description": repo.description
            }
        ]
        relationships = []

        for dependency in dependencies:
            name, version = split_dependency(dependency)
            package_id = self._package_spdx_id(name)
            packages.append({
                "SPDXID": package_id,
                "name": name,
                "versionInfo": version,
                "downloadLocation": "NOASSERTION",
                "filesAnalyzed": False
            })
            relationships.append({
                "spdxElementId": root_id,
                "relationshipType": "CONTAINS",
                "relatedSpdxElement": package_id
            })

        document = {
            "spdxVersion": self.spdx_version,
            "dataLicense": self.data_license,
            "SPDXID": "SPDXRef-DOCUMENT",
            "name": f"SBOM for {repo.name} generated by {tool.value}",
            "documentNamespace": f"{self.namespace_base}/{repo.full_name}/{tool.value}/{epoch_ms}",
            "creationInfo": {
                "created": isoformat_utc(timestamp),
                "creators": [f"Tool: {tool.value}", f"Organization: {self.organization}"]
            },
            "packages": packages,
            "relationships": relationships
        }

        logger.debug(f"Generated SPDX document for {repo.full_name} with {len(dependencies)} packages")
        return document

    @staticmethod
    def _root_spdx_id(repo: RepositoryRecord) -> str:
        return f"SPDXRef-{repo.full_name.replace('/', '-', 1)}"

    @staticmethod
    def _package_spdx_id(name: str) -> str:
        return f"SPDXRef-{_NON_ALPHANUMERIC.sub('-', name)}"
