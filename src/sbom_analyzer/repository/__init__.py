"""
GitHub access and the in-memory repository catalog.
"""

from .github_client import GitHubClient, AccessibilityResult, ManifestFile, MANIFEST_FILES
from .catalog import RepositoryCatalog
from .rate_limit_monitor import RateLimitMonitor

__all__ = [
    "GitHubClient",
    "AccessibilityResult",
    "ManifestFile",
    "MANIFEST_FILES",
    "RepositoryCatalog",
    "RateLimitMonitor"
]
