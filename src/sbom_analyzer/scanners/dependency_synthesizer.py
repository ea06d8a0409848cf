"""
Simulated scanner output: per-tool dependency lists for a repository.
"""

import logging
import random
from typing import List, Optional, Iterable

from ..models import RepositoryRecord, ScannerTool

logger = logging.getLogger(__name__)

EXTRA_PACKAGES = [
    "lodash", "axios", "moment", "chalk", "uuid", "dotenv", "jest", "mocha",
    "sinon", "nyc", "eslint", "webpack", "babel", "typescript", "react",
    "redux", "angular",
]

DEFAULT_DEPENDENCY_TARGET = 50
MAX_EXTRA_DEPENDENCIES = 4


def _unique(items: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))


class DependencySynthesizer:
    """
    Produces the dependency list a scanner would report for a repository.

    Real dependencies parsed from the repository's manifest and the
    scanner's override packages are always included verbatim; the rest is
    random padding drawn from a fixed package pool.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source; pass a seeded ``random.Random`` for reproducible output
        """
        self.rng = rng or random.Random()

    def _random_dependency(self) -> str:
        package = self.rng.choice(EXTRA_PACKAGES)
        version = f"{self.rng.randint(1, 5)}.{self.rng.randint(0, 9)}.{self.rng.randint(0, 9)}"
        return f"{package}@{version}"

    def synthesize(self, repo: RepositoryRecord, tool: ScannerTool) -> List[str]:
        """
        Generate the dependency list for one repository and scanner.

        Args:
            repo: Repository record
            tool: Scanner to simulate

        Returns:
            De-duplicated ``name@version`` strings (override entries may be bare names)
        """
        tool = ScannerTool.parse(tool)
        overrides = tool.override_packages(repo.full_name)

        if repo.parsed_dependencies:
            dependencies = _unique(list(repo.parsed_dependencies) + overrides)
            for _ in range(self.rng.randint(0, MAX_EXTRA_DEPENDENCIES)):
                dependencies.append(self._random_dependency())
        else:
            dependencies = list(overrides)
            target = repo.dependencies or DEFAULT_DEPENDENCY_TARGET
            while len(dependencies) < target:
                dependencies.append(self._random_dependency())

        dependencies = _unique(dependencies)
        logger.debug(f"Synthesized {len(dependencies)} {tool.value} dependencies for {repo.full_name}")
        return dependencies
