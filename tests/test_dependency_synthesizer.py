import random
import re
import unittest

from sbom_analyzer.models import ScannerTool
from sbom_analyzer.scanners import DependencySynthesizer, EXTRA_PACKAGES, parse_package_json

from tests.helpers import make_record

RANDOM_ENTRY = re.compile(r"^(?P<name>[a-z]+)@[1-5]\.[0-9]\.[0-9]$")


class TestSynthesizeWithParsedDependencies(unittest.TestCase):
    def test_parsed_dependencies_always_present(self) -> None:
        repo = make_record(parsed_dependencies=["left-pad@1.0.0", "chalk@2.0.0"], dependencies=2)

        for seed in range(30):
            synthesizer = DependencySynthesizer(random.Random(seed))
            for tool in ScannerTool:
                with self.subTest(seed=seed, tool=tool):
                    result = synthesizer.synthesize(repo, tool)
                    self.assertIn("left-pad@1.0.0", result)
                    self.assertIn("chalk@2.0.0", result)
                    self.assertEqual(result[:2], ["left-pad@1.0.0", "chalk@2.0.0"])

    def test_adds_at_most_four_random_entries(self) -> None:
        repo = make_record(parsed_dependencies=["left-pad@1.0.0"])

        for seed in range(30):
            result = DependencySynthesizer(random.Random(seed)).synthesize(repo, ScannerTool.SYFT)
            extras = result[1:]
            self.assertLessEqual(len(extras), 4)
            for entry in extras:
                match = RANDOM_ENTRY.match(entry)
                self.assertIsNotNone(match, entry)
                self.assertIn(match.group("name"), EXTRA_PACKAGES)

    def test_override_packages_are_unioned(self) -> None:
        repo = make_record("expressjs/express", parsed_dependencies=["express@4.18.2"])

        result = DependencySynthesizer(random.Random(1)).synthesize(repo, ScannerTool.OWASP)

        for name in ScannerTool.OWASP.override_packages("expressjs/express"):
            self.assertIn(name, result)
        self.assertEqual(len(result), len(set(result)))


class TestSynthesizeWithoutParsedDependencies(unittest.TestCase):
    def test_pads_to_recorded_count(self) -> None:
        repo = make_record(dependencies=12)

        result = DependencySynthesizer(random.Random(3)).synthesize(repo, ScannerTool.SYFT)

        # duplicates drawn while padding are dropped afterwards
        self.assertLessEqual(len(result), 12)
        self.assertEqual(len(result), len(set(result)))
        for entry in result:
            self.assertRegex(entry, RANDOM_ENTRY)

    def test_zero_count_uses_default_target(self) -> None:
        repo = make_record(dependencies=0)
        result = DependencySynthesizer(random.Random(5)).synthesize(repo, ScannerTool.OWASP)
        self.assertGreater(len(result), 12)
        self.assertLessEqual(len(result), 50)

    def test_overrides_start_the_list(self) -> None:
        repo = make_record("pallets/flask", dependencies=10)
        overrides = ScannerTool.SYFT.override_packages("pallets/flask")

        result = DependencySynthesizer(random.Random(2)).synthesize(repo, ScannerTool.SYFT)

        self.assertEqual(result[:len(overrides)], overrides)

    def test_unknown_repository_has_no_overrides(self) -> None:
        self.assertEqual(ScannerTool.SYFT.override_packages("acme/widget"), [])


class TestParsePackageJson(unittest.TestCase):
    def test_counts_both_sections(self) -> None:
        parsed = parse_package_json('{"dependencies": {"a": "1"}, "devDependencies": {"b": "2", "c": "3"}}')
        self.assertEqual(parsed.dependency_count, 3)
        self.assertEqual(parsed.dependencies, ["a@1", "b@2", "c@3"])

    def test_bad_input_contributes_nothing(self) -> None:
        for content in [None, "", "{oops", "[1, 2]", '{"dependencies": "nope"}']:
            with self.subTest(content=content):
                parsed = parse_package_json(content)
                self.assertEqual(parsed.dependency_count, 0)
                self.assertEqual(parsed.dependencies, [])
