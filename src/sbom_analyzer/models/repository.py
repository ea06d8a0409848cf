"""
Repository data model for registered GitHub repositories.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
import json


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GitHubSnapshot:
    """Selected raw metadata captured from the GitHub repository payload."""

    id: Optional[int] = None
    private: bool = False
    archived: bool = False
    disabled: bool = False
    open_issues: int = 0
    default_branch: str = "main"

    @classmethod
    def from_api(cls, repo_info: Dict[str, Any]) -> 'GitHubSnapshot':
        return cls(
            id=repo_info.get("id"),
            private=repo_info.get("private", False),
            archived=repo_info.get("archived", False),
            disabled=repo_info.get("disabled", False),
            open_issues=repo_info.get("open_issues_count", 0),
            default_branch=repo_info.get("default_branch", "main")
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "private": self.private,
            "archived": self.archived,
            "disabled": self.disabled,
            "open_issues": self.open_issues,
            "default_branch": self.default_branch
        }


@dataclass
class RepositoryRecord:
    """
    Represents a GitHub repository registered in the catalog.

    Display counts (``stars``, ``forks``, ``size``) are kept in their
    human-formatted form. ``dependencies`` is either the number of
    dependencies parsed from a manifest or a popularity-based estimate.
    ``is_mock`` marks records synthesized after the GitHub API could not
    be used, so they can be told apart from real data.
    """

    id: str
    url: str
    full_name: str
    name: str
    owner: str
    language: str = "Unknown"
    stars: str = "0"
    forks: str = "0"
    dependencies: int = 0
    description: str = "No description"
    license: str = "Not specified"
    size: Optional[str] = None
    manifest_files: List[str] = field(default_factory=list)
    parsed_dependencies: List[str] = field(default_factory=list)
    scanned: bool = False
    added_at: str = field(default_factory=_utc_now_iso)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    github_data: Optional[GitHubSnapshot] = None
    is_mock: bool = False

    @property
    def is_private(self) -> bool:
        return bool(self.github_data and self.github_data.private)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the record to the dictionary shape used in exported reports.

        Returns:
            Dictionary representation of the repository
        """
        return {
            "id": self.id,
            "url": self.url,
            "fullName": self.full_name,
            "name": self.name,
            "owner": self.owner,
            "language": self.language,
            "stars": self.stars,
            "forks": self.forks,
            "dependencies": self.dependencies,
            "description": self.description,
            "license": self.license,
            "size": self.size,
            "manifestFiles": list(self.manifest_files),
            "parsedDependencies": list(self.parsed_dependencies),
            "scanned": self.scanned,
            "addedAt": self.added_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "githubData": self.github_data.to_dict() if self.github_data else None,
            "isMock": self.is_mock
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
