import unittest

from sbom_analyzer.config import GitHubConfig, RateLimitConfig
from sbom_analyzer.models import RateLimitState
from sbom_analyzer.repository import GitHubClient, RateLimitMonitor

from tests.helpers import FakeSession


class TestRateLimitState(unittest.TestCase):
    def test_only_present_headers_update(self) -> None:
        state = RateLimitState()
        state.update_from_headers({"x-ratelimit-remaining": "30", "x-ratelimit-reset": "100"})
        state.update_from_headers({"x-ratelimit-remaining": "29"})
        state.update_from_headers({})

        self.assertEqual(state.remaining, 29)
        self.assertEqual(state.reset, 100000)

    def test_malformed_header_is_ignored(self) -> None:
        state = RateLimitState(remaining=12)
        state.update_from_headers({"x-ratelimit-remaining": "lots"})
        self.assertEqual(state.remaining, 12)

    def test_info_formatting(self) -> None:
        info = RateLimitState(remaining=7, reset=200000).info(now_ms=75000)

        self.assertEqual(info["reset_in"], 125)
        self.assertEqual(info["formatted"], "Remaining: 7, Resets in: 2m 5s")

    def test_reset_in_past_is_zero(self) -> None:
        self.assertEqual(RateLimitState(reset=1000).info(now_ms=5000)["reset_in"], 0)


class TestRateLimitMonitor(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GitHubClient(session=FakeSession(), config=GitHubConfig())
        self.monitor = RateLimitMonitor(self.client, RateLimitConfig(warning_threshold=10, check_interval=60))
        self.addCleanup(self.monitor.stop)

    def test_warns_below_threshold(self) -> None:
        self.client.rate_limit.remaining = 9

        with self.assertLogs("sbom_analyzer.repository.rate_limit_monitor", level="WARNING") as logs:
            self.assertTrue(self.monitor.check())
        self.assertIn("9 requests remaining", logs.output[0])

    def test_quiet_at_threshold(self) -> None:
        self.client.rate_limit.remaining = 10
        self.assertFalse(self.monitor.check())

    def test_never_touches_the_network(self) -> None:
        self.client.rate_limit.remaining = 1
        self.monitor.check()
        self.assertEqual(self.client.session.calls, [])

    def test_thread_lifecycle(self) -> None:
        self.monitor.start()
        thread = self.monitor._thread
        self.assertTrue(self.monitor.running)
        self.assertTrue(thread.daemon)

        self.monitor.start()
        self.assertIs(self.monitor._thread, thread)

        self.monitor.stop(timeout=5)
        self.assertFalse(self.monitor.running)
        self.assertFalse(thread.is_alive())
