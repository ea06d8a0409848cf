"""
GitHub API rate limit state as last reported by the server.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"


@dataclass
class RateLimitState:
    """
    Remaining-call count and reset time (epoch milliseconds).

    Values only ever come from response headers; nothing here counts
    requests locally.
    """

    remaining: int = 60
    reset: int = 0

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """
        Update from rate limit headers when they are present.

        Args:
            headers: Response headers (case-insensitive mapping as returned by requests)
        """
        remaining = self._parse_header(headers, REMAINING_HEADER)
        if remaining is not None:
            self.remaining = remaining

        reset = self._parse_header(headers, RESET_HEADER)
        if reset is not None:
            self.reset = reset * 1000

    @staticmethod
    def _parse_header(headers: Mapping[str, str], name: str) -> Optional[int]:
        value = headers.get(name)
        if not value:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring malformed {name} header: {value!r}")
            return None

    def info(self, now_ms: Optional[int] = None) -> Dict[str, Any]:
        """
        Summarize the current state.

        Args:
            now_ms: Current time in epoch milliseconds (defaults to wall clock)

        Returns:
            Dictionary with remaining, reset, reset_in (seconds) and a formatted line
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        reset_in = max(0, (self.reset - now_ms) // 1000)
        minutes, seconds = divmod(reset_in, 60)

        return {
            "remaining": self.remaining,
            "reset": self.reset,
            "reset_in": reset_in,
            "formatted": f"Remaining: {self.remaining}, Resets in: {minutes}m {seconds}s"
        }
