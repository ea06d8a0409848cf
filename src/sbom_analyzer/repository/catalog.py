"""
In-memory catalog of registered repositories, the user's selection and the
SBOM artifacts generated for them.
"""

import logging
import random
from typing import Dict, Any, List, Optional

from ..config import CatalogConfig, get_config
from ..error_handling import SBOMAnalyzerError, RepositoryError, InvalidRepositoryURLError, SelectionLimitError
from ..models import RepositoryRecord, GitHubSnapshot, ScannerTool, ChallengeLog, ChallengeLogEntry
from ..scanners import parse_package_json, PACKAGE_JSON
from .github_client import GitHubClient
from .url_utils import (
    extract_repo_full_name, generate_repo_id, format_number, format_size,
    estimate_dependencies, detect_language
)

logger = logging.getLogger(__name__)


class RepositoryCatalog:
    """
    Registered repositories keyed by an identifier derived from the raw input.

    Also holds the selection set (bounded by ``max_selection``), the SBOM
    artifact store ``sboms[tool][repo_id][format]`` and the challenge log.
    """

    def __init__(
        self,
        github_client: Optional[GitHubClient] = None,
        rng: Optional[random.Random] = None,
        config: Optional[CatalogConfig] = None
    ):
        """
        Initialize the catalog.

        Args:
            github_client: GitHub API client instance
            rng: Random source for estimates and mock records
            config: Catalog configuration (defaults to the application config)
        """
        config = config or get_config().catalog

        self.github_client = github_client or GitHubClient()
        self.rng = rng or random.Random()
        self.max_selection = config.max_selection
        self.mock_fallback = config.mock_fallback

        self.repositories: Dict[str, RepositoryRecord] = {}
        self._selected: Dict[str, None] = {}
        self.sboms: Dict[str, Dict[str, Dict[str, Any]]] = {tool.value: {} for tool in ScannerTool}
        self.challenges = ChallengeLog()

    # ------------------------------------------------------------------
    # Repository management
    # ------------------------------------------------------------------

    def add_repository(self, url: str) -> Optional[RepositoryRecord]:
        """
        Register a repository from a GitHub URL or ``owner/repo`` slug.

        Args:
            url: Raw user input

        Returns:
            The new record, or None if the input was already registered

        Raises:
            SBOMAnalyzerError: Only when mock fallback is disabled and fetching fails
        """
        repo_id = generate_repo_id(url)
        if repo_id in self.repositories:
            logger.info(f"Repository already registered: {url}")
            return None

        try:
            record = self._fetch_repository_record(url, repo_id)
        except Exception as e:
            if not self.mock_fallback:
                if isinstance(e, SBOMAnalyzerError):
                    raise
                raise RepositoryError(
                    f"Unexpected repository data: {e}", repository=url, operation="fetch", cause=e
                ) from e
            logger.warning(f"Falling back to mock data for {url}: {e}")
            record = self._create_mock_record(url, repo_id)

        self.repositories[repo_id] = record
        return record

    def _fetch_repository_record(self, url: str, repo_id: str) -> RepositoryRecord:
        full_name = extract_repo_full_name(url)
        if not full_name:
            raise InvalidRepositoryURLError(repository=url, operation="extract_slug")

        accessibility = self.github_client.check_repository_accessibility(full_name)
        if not accessibility.accessible:
            raise accessibility.to_error(full_name)

        repo_info = self.github_client.fetch_repository_info(full_name)

        try:
            languages = self.github_client.fetch_languages(full_name)
        except SBOMAnalyzerError as e:
            logger.debug(f"Languages unavailable for {full_name}: {e}")
            languages = {}
        # First reported language, not the one with the most bytes
        primary_language = next(iter(languages), "Unknown")

        manifest_files = self.github_client.fetch_dependency_files(full_name)

        dependency_count = 0
        parsed_dependencies: List[str] = []
        for manifest in manifest_files:
            if manifest.name != PACKAGE_JSON:
                continue
            parsed = parse_package_json(manifest.decode())
            dependency_count += parsed.dependency_count
            parsed_dependencies.extend(parsed.dependencies)

        stars = repo_info.get("stargazers_count", 0) or 0
        if dependency_count == 0:
            dependency_count = estimate_dependencies(stars, self.rng)

        license_info = repo_info.get("license") or {}

        return RepositoryRecord(
            id=repo_id,
            url=repo_info.get("html_url") or f"https://github.com/{full_name}",
            full_name=full_name,
            name=repo_info.get("name") or full_name.split("/")[-1],
            owner=(repo_info.get("owner") or {}).get("login") or full_name.split("/")[0],
            language=primary_language,
            stars=format_number(stars),
            forks=format_number(repo_info.get("forks_count", 0) or 0),
            dependencies=dependency_count,
            description=repo_info.get("description") or "No description",
            license=license_info.get("name") or "Not specified",
            size=format_size(repo_info.get("size", 0) or 0),
            manifest_files=[manifest.name for manifest in manifest_files],
            parsed_dependencies=parsed_dependencies,
            created_at=repo_info.get("created_at"),
            updated_at=repo_info.get("updated_at"),
            github_data=GitHubSnapshot.from_api(repo_info)
        )

    def _create_mock_record(self, url: str, repo_id: str) -> RepositoryRecord:
        """Synthesize a minimal record when the GitHub API could not be used."""
        full_name = extract_repo_full_name(url) or url.strip()
        name_parts = full_name.split("/")
        owner = name_parts[0]
        repo_name = name_parts[1] if len(name_parts) > 1 and name_parts[1] else "unknown"

        return RepositoryRecord(
            id=repo_id,
            url=f"https://github.com/{full_name}",
            full_name=full_name,
            name=repo_name,
            owner=owner,
            language=detect_language(repo_name, self.rng),
            stars=format_number(self.rng.randrange(1000, 51000)),
            forks=format_number(self.rng.randrange(100, 10100)),
            dependencies=self.rng.randrange(20, 170),
            description="Open source project",
            is_mock=True
        )

    def get_repository(self, repo_id: str) -> Optional[RepositoryRecord]:
        return self.repositories.get(repo_id)

    def remove_repository(self, repo_id: str) -> Optional[RepositoryRecord]:
        """
        Remove a repository, its selection and its artifacts. Unknown ids are ignored.

        Returns:
            The removed record, if there was one
        """
        record = self.repositories.pop(repo_id, None)
        self._selected.pop(repo_id, None)
        for tool_store in self.sboms.values():
            tool_store.pop(repo_id, None)

        if record:
            logger.info(f"Removed repository: {record.full_name}")
        return record

    def clear_repositories(self) -> int:
        """Remove every repository, the whole selection and all artifacts."""
        count = len(self.repositories)
        self.repositories.clear()
        self._selected.clear()
        self.sboms = {tool.value: {} for tool in ScannerTool}
        logger.info(f"Removed all {count} repositories")
        return count

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_selection(self, repo_id: str) -> bool:
        """
        Select or deselect a repository.

        Returns:
            True if the repository is selected afterwards

        Raises:
            SelectionLimitError: If selecting would exceed ``max_selection``
        """
        if repo_id in self._selected:
            del self._selected[repo_id]
            return False

        if len(self._selected) >= self.max_selection:
            raise SelectionLimitError(self.max_selection)

        self._selected[repo_id] = None
        return True

    def is_selected(self, repo_id: str) -> bool:
        return repo_id in self._selected

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def selected_repositories(self) -> List[RepositoryRecord]:
        """Selected records, in selection order."""
        return [self.repositories[repo_id] for repo_id in self._selected if repo_id in self.repositories]

    # ------------------------------------------------------------------
    # SBOM artifacts
    # ------------------------------------------------------------------

    def save_sbom(self, tool: ScannerTool, repo_id: str, sbom_format: str, document: Dict[str, Any]) -> None:
        """Store a generated document and mark the repository as scanned."""
        tool = ScannerTool.parse(tool)
        self.sboms[tool.value].setdefault(repo_id, {})[sbom_format] = document

        record = self.repositories.get(repo_id)
        if record:
            record.scanned = True

    def get_sbom(self, tool: ScannerTool, repo_id: str, sbom_format: str) -> Optional[Dict[str, Any]]:
        tool = ScannerTool.parse(tool)
        return self.sboms[tool.value].get(repo_id, {}).get(sbom_format)

    def artifact_count(self, tool: ScannerTool) -> int:
        """Number of repositories with at least one artifact for the tool."""
        return len(self.sboms[ScannerTool.parse(tool).value])

    # ------------------------------------------------------------------
    # Challenge log
    # ------------------------------------------------------------------

    def add_challenge(self, title: str, description: str, solved: bool = False, solution: str = "") -> ChallengeLogEntry:
        return self.challenges.add(title, description, solved, solution)

    def __len__(self) -> int:
        return len(self.repositories)

    def __contains__(self, repo_id: str) -> bool:
        return repo_id in self.repositories
