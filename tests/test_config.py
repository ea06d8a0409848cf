import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml

from sbom_analyzer.config import ConfigManager, AppConfig, get_config_manager, reset_config_manager


class ConfigTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmpdir, ignore_errors=True)

        env = patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def write_config(self, data) -> Path:
        path = self.tmpdir / "config.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path


class TestDefaults(ConfigTestCase):
    def test_defaults(self) -> None:
        config = ConfigManager().get_config()

        self.assertIsNone(config.github.access_token)
        self.assertEqual(config.github.api_base_url, "https://api.github.com")
        self.assertEqual(config.catalog.max_selection, 5)
        self.assertTrue(config.catalog.mock_fallback)
        self.assertEqual(config.scanning.tools, ["syft", "owasp"])
        self.assertEqual(config.rate_limit.warning_threshold, 10)
        self.assertEqual(config.rate_limit.low_remaining_threshold, 5)
        self.assertEqual(config.output.formats, ["cyclonedx", "spdx"])


class TestSources(ConfigTestCase):
    def test_file_overrides_defaults(self) -> None:
        path = self.write_config({"scanning": {"pacing_enabled": False}, "output": {"directory": "/tmp/out"}})

        config = ConfigManager(path).get_config()

        self.assertFalse(config.scanning.pacing_enabled)
        self.assertEqual(config.output.directory, "/tmp/out")
        self.assertEqual(config.scanning.base_delay, 0.5)

    def test_env_overrides_file(self) -> None:
        path = self.write_config({"catalog": {"max_selection": 3}})
        os.environ.update({
            "SBOM_MAX_SELECTION": "1",
            "SBOM_MOCK_FALLBACK": "false",
            "SBOM_FORMATS": "spdx",
            "GITHUB_TOKEN": "12345",
            "GITHUB_TIMEOUT": "5",
        })

        config = ConfigManager(path).get_config()

        self.assertEqual(config.catalog.max_selection, 1)
        self.assertFalse(config.catalog.mock_fallback)
        self.assertEqual(config.output.formats, ["spdx"])
        self.assertEqual(config.github.access_token, "12345")
        self.assertEqual(config.github.timeout, 5)

    def test_variable_substitution(self) -> None:
        os.environ["MY_TOKEN"] = "from-env"
        path = self.write_config({"github": {"access_token": "${MY_TOKEN}"}})

        self.assertEqual(ConfigManager(path).get_config().github.access_token, "from-env")

    def test_broken_file_is_ignored(self) -> None:
        path = self.tmpdir / "config.yaml"
        path.write_text("github: [unclosed", encoding="utf-8")

        self.assertEqual(ConfigManager(path).get_config().catalog.max_selection, 5)


class TestValidation(ConfigTestCase):
    def test_invalid_values_rejected(self) -> None:
        cases = [
            {"output": {"formats": ["xml"]}},
            {"scanning": {"tools": ["grype"]}},
            {"logging": {"level": "LOUD"}},
            {"catalog": {"max_selection": 0}},
            {"scanning": {"min_jitter": 2.0, "max_jitter": 1.0}},
        ]
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    ConfigManager(self.write_config(data)).get_config()


class TestSerialization(ConfigTestCase):
    def test_to_dict_masks_token(self) -> None:
        config = AppConfig()
        config.github.access_token = "secret"

        self.assertEqual(config.to_dict()["github"]["access_token"], "********")
        self.assertEqual(config.to_dict(mask_secrets=False)["github"]["access_token"], "secret")

    def test_save_config_drops_token(self) -> None:
        os.environ["GITHUB_TOKEN"] = "secret"
        target = self.tmpdir / "saved.yaml"

        ConfigManager().save_config(target)

        with open(target, encoding="utf-8") as f:
            saved = yaml.safe_load(f)
        self.assertNotIn("access_token", saved["github"])
        self.assertEqual(saved["catalog"]["max_selection"], 5)


class TestGlobalManager(ConfigTestCase):
    def test_reset(self) -> None:
        reset_config_manager()
        self.addCleanup(reset_config_manager)

        first = get_config_manager()
        self.assertIs(get_config_manager(), first)

        reset_config_manager()
        self.assertIsNot(get_config_manager(), first)
