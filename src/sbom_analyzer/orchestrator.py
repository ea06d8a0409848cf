"""
Orchestration manager for coordinating the repository, scanning and
reporting workflow.
"""

import logging
import random
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Dict, Any, Optional, Union

from .config import get_config, AppConfig
from .error_handling import SBOMAnalyzerError, InvalidRepositoryURLError, EmptySelectionError
from .models import RepositoryRecord, ScannerTool, ToolStatus, ComparisonResult
from .repository import GitHubClient, RepositoryCatalog, RateLimitMonitor
from .scanners import DependencySynthesizer
from .generators import SBOMGenerator, SBOMFormat
from .consolidators import ComparisonEngine, ExportManager

logger = logging.getLogger(__name__)


class OrchestrationManager:
    """
    Coordinates the whole SBOM analysis workflow.

    This class is the controller between the repository catalog, the
    simulated scanners, the SBOM generator and the exporters. It also
    records the user-facing challenge log entries for each step.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        github_client: Optional[GitHubClient] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the orchestration manager.

        Args:
            config: Application configuration
            github_client: GitHub API client (built from config if omitted)
            rng: Random source shared by estimates, synthesis and pacing
            sleep: Pause function used for scan pacing
            clock: Callable returning the current UTC time
        """
        self.config = config or get_config()
        self.rng = rng or random.Random()
        self.sleep = sleep

        self.github_client = github_client or GitHubClient(config=self.config.github)
        self.catalog = RepositoryCatalog(self.github_client, rng=self.rng, config=self.config.catalog)
        self.synthesizer = DependencySynthesizer(rng=self.rng)
        self.sbom_generator = SBOMGenerator(clock=clock)
        self.comparison_engine = ComparisonEngine(self.synthesizer)
        self.export_manager = ExportManager(self.config.output.directory, clock=clock)
        self.rate_limit_monitor = RateLimitMonitor(self.github_client, config=self.config.rate_limit)

        self._running_tools: Dict[str, ToolStatus] = {}
        self.comparison: Optional[ComparisonResult] = None

    # ------------------------------------------------------------------
    # Repositories and selection
    # ------------------------------------------------------------------

    def set_token(self, token: Optional[str]) -> None:
        self.github_client.set_token(token)
        logger.info("GitHub token configured" if self.github_client.access_token else "GitHub token cleared")

    def add_repository(self, url: Optional[str]) -> Optional[RepositoryRecord]:
        """
        Add a repository from user input.

        Args:
            url: GitHub URL or ``owner/repo`` slug

        Returns:
            The new record, or None if it was already added

        Raises:
            InvalidRepositoryURLError: If the input is empty
            SBOMAnalyzerError: If fetching fails and mock fallback is disabled
        """
        url = (url or "").strip()
        if not url:
            raise InvalidRepositoryURLError("Please enter a repository URL")

        rate_limit = self.github_client.get_rate_limit_info()
        if rate_limit["remaining"] < self.config.rate_limit.low_remaining_threshold:
            logger.warning(f"Rate limit low ({rate_limit['remaining']} remaining). Try adding a GitHub token.")

        try:
            record = self.catalog.add_repository(url)
        except SBOMAnalyzerError as e:
            logger.error(f"Error adding repository {url}: {e.message}")
            self.catalog.add_challenge(
                "GitHub API Error",
                f"Failed to fetch repository data: {e.message}",
                False,
                "Check repository URL and internet connection"
            )
            raise

        if record is None:
            logger.warning(f"Repository already added: {url}")
            return None

        if record.is_mock:
            logger.warning(f"Added repository with mock data: {record.full_name}")
            self.catalog.add_challenge(
                "Mock Repository Data Used",
                f"GitHub API data unavailable for {record.full_name}; using generated mock data",
                False,
                "Check the repository URL or add a GitHub token"
            )
            return record

        logger.info(f"Added repository: {record.full_name}")
        self.catalog.add_challenge(
            "Repository Data Fetched from GitHub API",
            f"Successfully fetched real data for {record.full_name} using GitHub API",
            True,
            f"Fetched {len(record.manifest_files)} manifest files"
        )
        return record

    def remove_repository(self, repo_id: str) -> Optional[RepositoryRecord]:
        return self.catalog.remove_repository(repo_id)

    def clear_repositories(self) -> int:
        self.comparison = None
        return self.catalog.clear_repositories()

    def toggle_selection(self, repo_id: str) -> bool:
        return self.catalog.toggle_selection(repo_id)

    @property
    def tool_statuses(self) -> Dict[str, ToolStatus]:
        """Status per tool; Scanning/Success stick once a tool has run."""
        idle = ToolStatus.READY if self.catalog.selected_ids else ToolStatus.PENDING
        return {tool.value: self._running_tools.get(tool.value, idle) for tool in ScannerTool}

    # ------------------------------------------------------------------
    # Scanning and comparison
    # ------------------------------------------------------------------

    def _pause(self, seconds: float) -> None:
        if self.config.scanning.pacing_enabled and seconds > 0:
            self.sleep(seconds)

    def run_tool(self, tool: Union[ScannerTool, str]) -> int:
        """
        Run a simulated scanner over every selected repository.

        Args:
            tool: Scanner to run

        Returns:
            Number of repositories scanned

        Raises:
            EmptySelectionError: If nothing is selected
        """
        tool = ScannerTool.parse(tool)
        repositories = self.catalog.selected_repositories()
        if not repositories:
            raise EmptySelectionError("Please select at least one repository")

        scanning = self.config.scanning
        self._running_tools[tool.value] = ToolStatus.SCANNING
        logger.info(f"Running {tool.display_name} on {len(repositories)} repositories")

        total_scanned = 0
        try:
            for repo in repositories:
                logger.info(f"Scanning {repo.full_name}...")
                self._pause(scanning.base_delay)

                dependencies = self.synthesizer.synthesize(repo, tool)
                self.sbom_generator.generate_and_store(self.catalog, tool, repo, dependencies)
                logger.info(f"Generated SBOMs for {repo.full_name} ({len(dependencies)} dependencies)")
                total_scanned += 1

                self._pause(scanning.min_jitter + self.rng.random() * (scanning.max_jitter - scanning.min_jitter))
        except SBOMAnalyzerError:
            self._running_tools.pop(tool.value, None)
            raise

        self._running_tools[tool.value] = ToolStatus.SUCCESS
        self.catalog.add_challenge(
            f"{tool.value.upper()} Scanning Complete",
            f"Scanned {total_scanned} repositories using {tool.value}",
            True,
            f"Successfully generated SBOMs for {total_scanned} repositories"
        )
        logger.info(f"{tool.display_name} scan completed for {total_scanned} repositories")

        self.update_comparison()
        return total_scanned

    def update_comparison(self) -> Optional[ComparisonResult]:
        """Recompute the cross-tool comparison for the current selection."""
        repositories = self.catalog.selected_repositories()
        if not repositories:
            self.comparison = None
            return None

        result = self.comparison_engine.compare(repositories)
        self.comparison = result

        if result.syft_total > 0 and result.owasp_total > 0:
            self.catalog.add_challenge(
                "Tool Comparison Completed",
                f"Compared {result.syft_total} Syft dependencies vs {result.owasp_total} OWASP dependencies. "
                f"Found {len(result.common)} common and {len(result.missing)} missing dependencies.",
                True
            )
        return result

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def generate_report(self, output_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
        """
        Build and write the JSON and text analysis reports.

        Raises:
            EmptySelectionError: If nothing is selected
            ExportError: If the files cannot be written
        """
        if not self.catalog.selected_ids:
            raise EmptySelectionError("Please select repositories first")

        report = self.export_manager.build_report(self.catalog, self.comparison, self.tool_statuses)
        paths = self.export_manager.export_report(report, output_dir)

        self.catalog.add_challenge(
            "Analysis Report Generated",
            "Generated comprehensive SBOM analysis report with findings and recommendations",
            True,
            "Report includes JSON and text formats with all analysis data"
        )
        return paths

    def download_all_sboms(
        self,
        tool: Union[ScannerTool, str],
        sbom_format: Union[SBOMFormat, str],
        output_dir: Optional[Union[str, Path]] = None
    ) -> List[Path]:
        """Write every stored artifact of one tool and format for the selection."""
        if not self.catalog.selected_ids:
            raise EmptySelectionError()
        return self.export_manager.export_sboms(self.catalog, tool, sbom_format, output_dir)

    # ------------------------------------------------------------------
    # Rate limit monitoring
    # ------------------------------------------------------------------

    def start_rate_limit_monitor(self) -> None:
        self.rate_limit_monitor.start()

    def stop_rate_limit_monitor(self) -> None:
        self.rate_limit_monitor.stop()

    def get_summary(self) -> Dict[str, Any]:
        """Snapshot of catalog and scan state for display."""
        return {
            "repositories": len(self.catalog),
            "selected": len(self.catalog.selected_ids),
            "tool_statuses": {name: status.value for name, status in self.tool_statuses.items()},
            "artifacts": {tool.value: self.catalog.artifact_count(tool) for tool in ScannerTool},
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "rate_limit": self.github_client.get_rate_limit_info()
        }
