import random
import unittest

from sbom_analyzer.repository.url_utils import (
    extract_repo_full_name, generate_repo_id, format_number, format_size,
    estimate_dependencies, detect_language, FALLBACK_LANGUAGES
)


class TestExtractRepoFullName(unittest.TestCase):
    def test_all_input_forms_normalize_to_same_slug(self) -> None:
        inputs = [
            "facebook/react",
            "facebook/react.git",
            "  facebook/react  ",
            "https://github.com/facebook/react",
            "https://github.com/facebook/react.git",
            "http://github.com/facebook/react",
            "github.com/facebook/react",
            "https://github.com/facebook/react/tree/main/packages",
        ]
        for value in inputs:
            with self.subTest(value=value):
                self.assertEqual(extract_repo_full_name(value), "facebook/react")

    def test_github_url_without_repo_segment(self) -> None:
        self.assertIsNone(extract_repo_full_name("https://github.com/facebook"))

    def test_blank_input(self) -> None:
        self.assertIsNone(extract_repo_full_name("   "))
        self.assertIsNone(extract_repo_full_name(".git"))


class TestGenerateRepoId(unittest.TestCase):
    def test_is_deterministic(self) -> None:
        url = "https://github.com/facebook/react"
        self.assertEqual(generate_repo_id(url), generate_repo_id(url))

    def test_depends_on_raw_input(self) -> None:
        self.assertNotEqual(generate_repo_id("facebook/react"),
                            generate_repo_id("https://github.com/facebook/react"))

    def test_no_collision_when_only_punctuation_differs(self) -> None:
        self.assertNotEqual(generate_repo_id("a/b-c"), generate_repo_id("a/bc"))

    def test_has_no_padding_or_slashes(self) -> None:
        repo_id = generate_repo_id("ab")
        self.assertNotIn("=", repo_id)
        self.assertNotIn("/", repo_id)


class TestFormatting(unittest.TestCase):
    def test_format_number(self) -> None:
        self.assertEqual(format_number(999), "999")
        self.assertEqual(format_number(1000), "1.0k")
        self.assertEqual(format_number(12345), "12.3k")

    def test_format_size(self) -> None:
        self.assertEqual(format_size(512), "512 KB")
        self.assertEqual(format_size(2048), "2.0 MB")


class TestEstimateDependencies(unittest.TestCase):
    def test_bands(self) -> None:
        bands = [
            (60000, 200, 300),
            (20000, 100, 150),
            (5000, 50, 80),
            (500, 20, 40),
            (50, 5, 15),
        ]
        for seed in range(25):
            rng = random.Random(seed)
            for stars, low, high in bands:
                with self.subTest(seed=seed, stars=stars):
                    estimate = estimate_dependencies(stars, rng)
                    self.assertGreaterEqual(estimate, low)
                    self.assertLess(estimate, high)

    def test_band_edges_are_exclusive(self) -> None:
        rng = random.Random(1)
        self.assertLess(estimate_dependencies(50000, rng), 150)
        self.assertLess(estimate_dependencies(100, rng), 15)


class TestDetectLanguage(unittest.TestCase):
    def test_name_hint(self) -> None:
        self.assertEqual(detect_language("awesome-py-tools"), "Python")
        self.assertEqual(detect_language("node-js-starter"), "JavaScript")

    def test_fallback_is_from_fixed_list(self) -> None:
        self.assertIn(detect_language("widget", random.Random(3)), FALLBACK_LANGUAGES)
