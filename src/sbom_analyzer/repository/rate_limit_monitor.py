"""
Background observer that warns when the GitHub rate limit runs low.
"""

import logging
import threading
from typing import Optional

from ..config import RateLimitConfig, get_config
from .github_client import GitHubClient

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """
    Periodically re-reads the client's rate limit state.

    Purely observational: it logs a warning below the threshold and never
    delays or blocks requests.
    """

    def __init__(self, github_client: GitHubClient, config: Optional[RateLimitConfig] = None):
        config = config or get_config().rate_limit

        self.github_client = github_client
        self.warning_threshold = config.warning_threshold
        self.check_interval = config.check_interval

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check(self) -> bool:
        """
        Inspect the current rate limit once.

        Returns:
            True if the remaining count is below the warning threshold
        """
        info = self.github_client.get_rate_limit_info()
        if info["remaining"] < self.warning_threshold:
            logger.warning(f"GitHub API rate limit low: {info['remaining']} requests remaining")
            return True
        return False

    def _run(self) -> None:
        while not self._stop_event.wait(self.check_interval):
            self.check()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="rate-limit-monitor", daemon=True)
        self._thread.start()
        logger.debug(f"Rate limit monitor started (every {self.check_interval}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
