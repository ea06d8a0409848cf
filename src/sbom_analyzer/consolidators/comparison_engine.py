"""
Comparison of the dependency sets each scanner reports for the selection.
"""

import logging
from typing import Iterable, List, Optional

from ..models import RepositoryRecord, ScannerTool, ComparisonResult
from ..scanners import DependencySynthesizer

logger = logging.getLogger(__name__)


class ComparisonEngine:
    """
    Unions each tool's synthesized dependencies across repositories and
    reports what the two tools agree and disagree on.
    """

    def __init__(self, synthesizer: Optional[DependencySynthesizer] = None):
        self.synthesizer = synthesizer or DependencySynthesizer()

    def compare(self, repositories: Iterable[RepositoryRecord], synthesizer=None) -> ComparisonResult:
        """
        Compare Syft and OWASP output over the given repositories.

        Args:
            repositories: Selected repository records
            synthesizer: Object with ``synthesize(repo, tool)``; defaults to the engine's own

        Returns:
            ComparisonResult whose lists keep the unions' insertion order
        """
        synthesizer = synthesizer or self.synthesizer

        # dicts as ordered sets
        syft_deps = {}
        owasp_deps = {}
        repo_count = 0

        for repo in repositories:
            syft_deps.update(dict.fromkeys(synthesizer.synthesize(repo, ScannerTool.SYFT)))
            owasp_deps.update(dict.fromkeys(synthesizer.synthesize(repo, ScannerTool.OWASP)))
            repo_count += 1

        common = [dep for dep in syft_deps if dep in owasp_deps]
        missing_from_owasp = [dep for dep in syft_deps if dep not in owasp_deps]
        missing_from_syft = [dep for dep in owasp_deps if dep not in syft_deps]

        logger.info(f"Compared {repo_count} repositories: {len(syft_deps)} Syft, {len(owasp_deps)} OWASP, "
                    f"{len(common)} common, {len(missing_from_owasp) + len(missing_from_syft)} missing")

        return ComparisonResult(
            syft_total=len(syft_deps),
            owasp_total=len(owasp_deps),
            common=common,
            missing_from_owasp=missing_from_owasp,
            missing_from_syft=missing_from_syft
        )
