"""
GitHub REST API client with token authentication and rate limit tracking.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional, List

import requests

from ..config import GitHubConfig, get_config
from ..error_handling import (
    GitHubAPIError, RepositoryNotFoundError, RepositoryForbiddenError
)
from ..models import RateLimitState

logger = logging.getLogger(__name__)

# Probed one at a time, in this order
MANIFEST_FILES = [
    "package.json",        # Node.js
    "requirements.txt",    # Python
    "pom.xml",             # Java Maven
    "build.gradle",        # Java Gradle
    "Gemfile",             # Ruby
    "Cargo.toml",          # Rust
    "composer.json",       # PHP
    "go.mod",              # Go
    "pyproject.toml",      # Python (modern)
    "yarn.lock",           # Node.js (Yarn)
    "package-lock.json",   # Node.js (npm)
    "Pipfile",             # Python (Pipenv)
    "Podfile",             # iOS
    "build.sbt",           # Scala
    "project.clj",         # Clojure
]


@dataclass
class AccessibilityResult:
    """Outcome of probing whether a repository can be read."""
    accessible: bool
    reason: Optional[str] = None
    status_code: Optional[int] = None

    def to_error(self, full_name: str) -> GitHubAPIError:
        """Map a failed probe to the matching exception."""
        if self.status_code == 404:
            return RepositoryNotFoundError(repository=full_name, operation="probe")
        if self.status_code == 403:
            return RepositoryForbiddenError(repository=full_name, operation="probe")
        return GitHubAPIError(
            f"Cannot access repository: {self.reason}",
            status_code=self.status_code,
            repository=full_name,
            operation="probe"
        )


@dataclass
class ManifestFile:
    """A dependency manifest found in the repository root."""
    name: str
    path: str
    content: Optional[str] = None
    encoding: Optional[str] = None
    size: int = 0

    def decode(self) -> Optional[str]:
        """Decode base64 content, or None if there is nothing decodable."""
        if not self.content or self.encoding not in (None, "base64"):
            return None
        try:
            return base64.b64decode(self.content.replace("\n", "")).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None


class GitHubClient:
    """
    GitHub API client for repository metadata, languages and manifest files.

    Every response (successful or not) refreshes the rate limit state from
    its headers. Requests are issued sequentially and never retried or
    throttled locally; callers decide how to handle failures.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        config: Optional[GitHubConfig] = None
    ):
        """
        Initialize GitHub API client.

        Args:
            access_token: GitHub personal access token
            base_url: GitHub API base URL
            session: Pre-built requests session (mainly for tests)
            config: GitHub configuration (defaults to the application config)
        """
        config = config or get_config().github

        self.base_url = base_url or config.api_base_url
        self.timeout = config.timeout
        self.rate_limit = RateLimitState()

        self.session = session or requests.Session()
        self.access_token: Optional[str] = None
        self.set_token(access_token if access_token is not None else config.access_token)

    def set_token(self, token: Optional[str]) -> None:
        """
        Set or clear the access token used for every request.

        Args:
            token: Token string; surrounding whitespace is trimmed and an empty value clears it
        """
        token = token.strip() if token else None
        self.access_token = token or None
        self._setup_session()

    def _setup_session(self) -> None:
        """Set up the requests session headers and authentication."""
        self.session.headers.update({
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "github-sbom-analyzer/1.0"
        })

        if self.access_token:
            self.session.headers["Authorization"] = f"token {self.access_token}"
        else:
            self.session.headers.pop("Authorization", None)

    def _get(self, endpoint: str) -> requests.Response:
        """
        Issue a GET request and record rate limit headers.

        Raises:
            GitHubAPIError: On transport errors
        """
        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        try:
            response = self.session.request("GET", url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Request to {url} failed: {e}", cause=e)

        self.rate_limit.update_from_headers(response.headers)
        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    def _raise_for_status(self, response: requests.Response, full_name: str, operation: str) -> None:
        if response.ok:
            return
        if response.status_code == 404:
            raise RepositoryNotFoundError(repository=full_name, operation=operation)
        if response.status_code == 403:
            raise RepositoryForbiddenError(repository=full_name, operation=operation)
        raise GitHubAPIError(
            f"GitHub API error: {response.status_code} {response.reason or ''}".rstrip(),
            status_code=response.status_code,
            repository=full_name,
            operation=operation
        )

    def check_repository_accessibility(self, full_name: str) -> AccessibilityResult:
        """
        Probe whether the repository can be read.

        Args:
            full_name: Repository slug (``owner/repo``)

        Returns:
            AccessibilityResult with a human-readable reason when not accessible
        """
        try:
            response = self._get(f"/repos/{full_name}")
        except GitHubAPIError as e:
            return AccessibilityResult(accessible=False, reason=str(e.cause or e.message))

        if response.status_code == 404:
            return AccessibilityResult(False, "Repository not found", 404)
        if response.status_code == 403:
            return AccessibilityResult(False, "Access forbidden (might be private)", 403)
        if response.ok:
            return AccessibilityResult(True, status_code=response.status_code)

        return AccessibilityResult(False, f"HTTP {response.status_code}", response.status_code)

    def fetch_repository_info(self, full_name: str) -> Dict[str, Any]:
        """
        Get the repository payload from ``GET /repos/{full_name}``.

        Raises:
            GitHubAPIError: If repository information cannot be retrieved
        """
        response = self._get(f"/repos/{full_name}")
        self._raise_for_status(response, full_name, "fetch_info")

        try:
            repo_info = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"Malformed repository payload for {full_name}", repository=full_name,
                operation="fetch_info", cause=e
            )
        if not isinstance(repo_info, dict):
            raise GitHubAPIError(
                f"Malformed repository payload for {full_name}", repository=full_name,
                operation="fetch_info"
            )

        logger.info(f"Retrieved information for repository: {full_name}")
        return repo_info

    def fetch_languages(self, full_name: str) -> Dict[str, int]:
        """
        Get the language name -> byte count mapping, in the order GitHub reports it.

        Raises:
            GitHubAPIError: If the languages cannot be retrieved
        """
        response = self._get(f"/repos/{full_name}/languages")
        self._raise_for_status(response, full_name, "fetch_languages")

        try:
            languages = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"Malformed languages payload for {full_name}", repository=full_name,
                operation="fetch_languages", cause=e
            )
        if not isinstance(languages, dict):
            raise GitHubAPIError(
                f"Malformed languages payload for {full_name}", repository=full_name,
                operation="fetch_languages"
            )
        return languages

    def fetch_file_content(self, full_name: str, file_path: str) -> Optional[str]:
        """
        Get the decoded content of a single file.

        Returns:
            File content as string or None if it cannot be retrieved
        """
        try:
            response = self._get(f"/repos/{full_name}/contents/{file_path.lstrip('/')}")
        except GitHubAPIError as e:
            logger.debug(f"Could not fetch {full_name}:{file_path}: {e}")
            return None

        if not response.ok:
            return None

        try:
            data = response.json()
        except ValueError:
            logger.debug(f"Undecodable contents payload for {full_name}:{file_path}")
            return None
        if not isinstance(data, dict):
            return None
        return ManifestFile(
            name=file_path, path=file_path,
            content=data.get("content"), encoding=data.get("encoding")
        ).decode()

    def fetch_dependency_files(self, full_name: str) -> List[ManifestFile]:
        """
        Probe the well-known manifest filenames in the repository root.

        Files that do not answer HTTP 200 are skipped silently.

        Args:
            full_name: Repository slug

        Returns:
            Manifest files found, in probe order
        """
        found_files = []

        for file_name in MANIFEST_FILES:
            try:
                response = self._get(f"/repos/{full_name}/contents/{file_name}")
            except GitHubAPIError:
                continue

            if response.status_code != 200:
                continue

            try:
                data = response.json()
            except ValueError:
                continue

            if not isinstance(data, dict):
                continue

            found_files.append(ManifestFile(
                name=file_name,
                path=file_name,
                content=data.get("content"),
                encoding=data.get("encoding"),
                size=data.get("size", 0)
            ))

        logger.info(f"Found {len(found_files)} dependency files in {full_name}")
        return found_files

    def get_rate_limit_info(self) -> Dict[str, Any]:
        """Get current rate limit information."""
        return self.rate_limit.info()
