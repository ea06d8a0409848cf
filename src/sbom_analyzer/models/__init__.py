"""
Data models for the SBOM analyzer system.
"""

from .repository import RepositoryRecord, GitHubSnapshot
from .rate_limit import RateLimitState
from .challenge import ChallengeLog, ChallengeLogEntry
from .tool import ScannerTool, ToolStatus
from .comparison import ComparisonResult

__all__ = [
    "RepositoryRecord",
    "GitHubSnapshot",
    "RateLimitState",
    "ChallengeLog",
    "ChallengeLogEntry",
    "ScannerTool",
    "ToolStatus",
    "ComparisonResult"
]
