"""
Export manager for generated SBOMs and the analysis report.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Any, List, Mapping, Optional, Union

from ..error_handling import ExportError
from ..generators import SBOMFormat
from ..generators.base_generator import isoformat_utc
from ..models import ComparisonResult, ScannerTool, ToolStatus
from ..config import get_config

logger = logging.getLogger(__name__)

REPORT_TITLE = "SBOM Generation Analysis Report"
REPORT_PROJECT = "GitHub Repository SBOM Analysis"
REPORT_VERSION = "1.0"

RECOMMENDATIONS = [
    "Use both Syft and OWASP Dependency-Check for comprehensive coverage",
    "Regularly update SBOMs as dependencies change",
    "Integrate SBOM generation into CI/CD pipelines",
    "Monitor for vulnerabilities in discovered dependencies",
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExportManager:
    """
    Writes SBOM artifacts and the analysis report to disk.

    The JSON report and its plain-text rendering are pure presentation over
    catalog state that has already been computed.
    """

    def __init__(self, output_dir: Optional[Union[str, Path]] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize export manager.

        Args:
            output_dir: Default output directory (defaults to config)
            clock: Callable returning the current UTC time
        """
        self.output_dir = Path(output_dir) if output_dir else Path(get_config().output.directory)
        self.clock = clock or _utc_now

        self._export_statistics = {
            "files_created": 0,
            "total_size_bytes": 0
        }

    # ------------------------------------------------------------------
    # Analysis report
    # ------------------------------------------------------------------

    def build_report(
        self,
        catalog,
        comparison: Optional[ComparisonResult],
        tool_statuses: Mapping[str, ToolStatus]
    ) -> Dict[str, Any]:
        """
        Assemble the analysis report for the current selection.

        Args:
            catalog: RepositoryCatalog holding the selection and artifacts
            comparison: Latest comparison result (None counts as empty)
            tool_statuses: Status per tool name

        Returns:
            JSON-serializable report
        """
        comparison = comparison or ComparisonResult()
        selected = catalog.selected_repositories()

        def status_of(tool: ScannerTool) -> str:
            status = tool_statuses.get(tool.value, ToolStatus.PENDING)
            return status.value if isinstance(status, ToolStatus) else str(status)

        return {
            "metadata": {
                "title": REPORT_TITLE,
                "generated": isoformat_utc(self.clock()),
                "project": REPORT_PROJECT,
                "version": REPORT_VERSION
            },
            "repositories": [
                {
                    "name": repo.name,
                    "fullName": repo.full_name,
                    "url": repo.url,
                    "language": repo.language,
                    "stars": repo.stars,
                    "forks": repo.forks,
                    "dependencies": repo.dependencies,
                    "scanned": repo.scanned
                }
                for repo in selected
            ],
            "analysis": {
                "summary": {
                    "totalRepositories": len(selected),
                    "totalDependencies": {
                        "syft": comparison.syft_total,
                        "owasp": comparison.owasp_total
                    },
                    "commonDependencies": len(comparison.common),
                    "missingDependencies": len(comparison.missing)
                },
                "toolComparison": {
                    tool.value: {
                        "totalDependencies": comparison.syft_total if tool is ScannerTool.SYFT else comparison.owasp_total,
                        "status": status_of(tool)
                    }
                    for tool in ScannerTool
                },
                "recommendations": list(RECOMMENDATIONS)
            },
            "challenges": catalog.challenges.to_list(),
            "generatedSBOMs": {
                "syft": catalog.artifact_count(ScannerTool.SYFT),
                "owasp": catalog.artifact_count(ScannerTool.OWASP),
                "formats": [sbom_format.display_name for sbom_format in SBOMFormat]
            }
        }

    def render_text_report(self, report: Dict[str, Any]) -> str:
        """Render the plain-text version of a report built by ``build_report``."""
        summary = report["analysis"]["summary"]
        tool_comparison = report["analysis"]["toolComparison"]
        generated = report["generatedSBOMs"]

        lines = [
            "SBOM GENERATION ANALYSIS REPORT",
            "===============================",
            f"Generated: {report['metadata']['generated']}",
            "",
            f"REPOSITORIES ANALYZED ({len(report['repositories'])}):"
        ]
        for repo in report["repositories"]:
            lines.append(f"  • {repo['fullName']} - {repo['language']} "
                         f"({repo['stars']} stars, {repo['dependencies']} dependencies)")

        lines += [
            "",
            "ANALYSIS SUMMARY:",
            "  Total Dependencies Found:",
            f"    - Syft: {summary['totalDependencies']['syft']}",
            f"    - OWASP: {summary['totalDependencies']['owasp']}",
            f"  Common Dependencies: {summary['commonDependencies']}",
            f"  Missing Dependencies: {summary['missingDependencies']}",
            "",
            "TOOL STATUS:",
            f"  Syft: {tool_comparison['syft']['status']}",
            f"  OWASP: {tool_comparison['owasp']['status']}",
            "",
            f"CHALLENGES DOCUMENTED ({len(report['challenges'])}):"
        ]
        for challenge in report["challenges"]:
            marker = "✅" if challenge["solved"] else "⚠️"
            lines.append(f"  {marker} {challenge['title']}: {challenge['description']}")

        lines += ["", "RECOMMENDATIONS:"]
        lines += [f"  • {recommendation}" for recommendation in report["analysis"]["recommendations"]]

        lines += [
            "",
            "SBOMs GENERATED:",
            f"  • Syft: {generated['syft']} repositories",
            f"  • OWASP: {generated['owasp']} repositories",
            f"  • Formats: {', '.join(generated['formats'])}",
            "",
            "---",
            "Generated by SBOM Generator & Analyzer"
        ]
        return "\n".join(lines)

    def export_report(self, report: Dict[str, Any], output_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
        """
        Write the report as JSON and plain text.

        Args:
            report: Report built by ``build_report``
            output_dir: Target directory (defaults to the manager's)

        Returns:
            Paths keyed by ``json`` and ``text``

        Raises:
            ExportError: If a file cannot be written
        """
        output_dir = self._ensure_output_dir(output_dir)
        base_filename = f"sbom-analysis-report-{self.clock().strftime('%Y-%m-%d')}"

        json_path = output_dir / f"{base_filename}.json"
        text_path = output_dir / f"{base_filename}.txt"

        self._write_file(json_path, json.dumps(report, indent=2, ensure_ascii=False))
        self._write_file(text_path, self.render_text_report(report))

        logger.info(f"Exported analysis report to {json_path} and {text_path}")
        return {"json": json_path, "text": text_path}

    # ------------------------------------------------------------------
    # SBOM artifacts
    # ------------------------------------------------------------------

    def export_sboms(
        self,
        catalog,
        tool: ScannerTool,
        sbom_format: Union[SBOMFormat, str],
        output_dir: Optional[Union[str, Path]] = None
    ) -> List[Path]:
        """
        Write one file per selected repository that has the requested artifact.

        Files are named ``<owner>-<repo>-<tool>-<format>.json``.

        Returns:
            Paths of the files written

        Raises:
            ExportError: If no selected repository has the artifact
        """
        tool = ScannerTool.parse(tool)
        sbom_format = SBOMFormat.parse(sbom_format)
        output_dir = self._ensure_output_dir(output_dir)

        written = []
        for repo in catalog.selected_repositories():
            document = catalog.get_sbom(tool, repo.id, sbom_format.value)
            if document is None:
                logger.debug(f"No {tool.value} {sbom_format.value} SBOM for {repo.full_name}")
                continue

            filename = f"{repo.full_name.replace('/', '-', 1)}-{tool.value}-{sbom_format.value}.json"
            file_path = output_dir / filename
            self._write_file(file_path, json.dumps(document, indent=2, ensure_ascii=False))
            written.append(file_path)

        if not written:
            raise ExportError(
                f"No {tool.display_name} {sbom_format.display_name} SBOMs to export. Run the scan first.",
                output_path=str(output_dir)
            )

        logger.info(f"Exported {len(written)} {tool.value} {sbom_format.value} SBOMs to {output_dir}")
        return written

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_output_dir(self, output_dir: Optional[Union[str, Path]]) -> Path:
        output_dir = Path(output_dir) if output_dir else self.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Cannot create output directory {output_dir}",
                              output_path=str(output_dir), cause=e) from e
        return output_dir

    def _write_file(self, file_path: Path, content: str) -> None:
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise ExportError(f"Failed to write {file_path}", output_path=str(file_path), cause=e) from e

        file_size = file_path.stat().st_size
        self._export_statistics["files_created"] += 1
        self._export_statistics["total_size_bytes"] += file_size
        logger.debug(f"Wrote {file_path} ({file_size} bytes)")

    def get_export_statistics(self) -> Dict[str, Any]:
        """Get export statistics."""
        stats = self._export_statistics.copy()
        stats["total_size_mb"] = stats["total_size_bytes"] / (1024 * 1024)
        return stats
