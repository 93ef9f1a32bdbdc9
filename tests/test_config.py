"""Tests for the configuration module."""

import os
import tempfile
import unittest
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import yaml

from penny_trends.analysis.symbols import SymbolExtractor
from penny_trends.config import Config, RateLimitConfig, ScoringConfig


class TestConfig(unittest.TestCase):
    """Test cases for the Config class."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_path = os.path.join(self.temp_dir.name, "config.yaml")
        self.env_path = os.path.join(self.temp_dir.name, ".env")

        self.sample_config = {
            "subreddits": ["pennystocks", "SmallStreetBets"],
            "rate_limit": {
                "max_attempts": 3,
                "initial_backoff_sec": 1,
                "source_delay_sec": 5,
            },
            "scoring": {
                "top_n": 10,
                "positive_keywords": ["MOON", "Rocket"],
                "extra_excluded_symbols": ["ABCD"],
            },
            "storage": {"backend": "sqlalchemy", "database_url": "sqlite:///tmp.db"},
            "polling": {"poll_interval_sec": 60},
            "unknown_section": {"ignored": True},
        }

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.sample_config, f)

        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("REDDIT_CLIENT_ID=test_client_id\n")
            f.write("REDDIT_CLIENT_SECRET=test_client_secret\n")
            f.write("REDDIT_USER_AGENT=test_user_agent\n")

        self.env_patch = patch.dict(os.environ, {}, clear=True)
        self.env_patch.start()

    def tearDown(self):
        self.env_patch.stop()
        self.temp_dir.cleanup()

    def test_load_from_files(self):
        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.client_id, "test_client_id")
        self.assertEqual(config.client_secret, "test_client_secret")
        self.assertEqual(config.user_agent, "test_user_agent")

        self.assertEqual(config.subreddits, ["pennystocks", "SmallStreetBets"])
        self.assertEqual(config.rate_limit.max_attempts, 3)
        self.assertEqual(config.rate_limit.initial_backoff_sec, 1)
        self.assertEqual(config.rate_limit.source_delay_sec, 5)
        # Untouched keys keep their defaults
        self.assertEqual(config.rate_limit.backoff_factor, 2.0)

        self.assertEqual(config.scoring.top_n, 10)
        self.assertEqual(config.scoring.positive_keywords, ("moon", "rocket"))
        self.assertIn("ABCD", config.scoring.excluded_symbols)
        self.assertIn("CEO", config.scoring.excluded_symbols)

        self.assertEqual(config.storage.backend, "sqlalchemy")
        self.assertEqual(config.storage.key, "stocks")
        self.assertEqual(config.polling.poll_interval_sec, 60)
        self.assertEqual(config.polling.update_interval_sec, 900)

    def test_missing_yaml_uses_defaults(self):
        config = Config.from_files(os.path.join(self.temp_dir.name, "absent.yaml"), self.env_path)

        self.assertEqual(
            config.subreddits,
            ["pennystocks", "wallstreetbets", "10xPennyStocks", "SmallStreetBets"],
        )
        self.assertEqual(config.rate_limit, RateLimitConfig())
        self.assertEqual(config.validate(), [])

    def test_validate_valid_config(self):
        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.validate(), [])

    def test_validate_invalid_config(self):
        config = Config.from_files(self.config_path, self.env_path)
        config.subreddits = []
        config.storage.backend = "redis"
        config.client_secret = ""

        errors = config.validate()

        self.assertEqual(len(errors), 3)
        self.assertTrue(any("subreddits" in e for e in errors))
        self.assertTrue(any("redis" in e for e in errors))
        self.assertTrue(any("REDDIT_CLIENT_SECRET" in e for e in errors))

    def test_excluded_symbols_are_upper_cased(self):
        self.sample_config["scoring"]["extra_excluded_symbols"] = ["wxyz"]
        self.sample_config["scoring"]["invalid_symbols"] = ["ca"]
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.sample_config, f)

        scoring = Config.from_files(self.config_path, self.env_path).scoring

        self.assertIn("WXYZ", scoring.excluded_symbols)
        self.assertNotIn("wxyz", scoring.excluded_symbols)
        self.assertEqual(scoring.invalid_symbols, frozenset({"CA"}))
        self.assertEqual(SymbolExtractor(scoring).extract("WXYZ and ABC"), ["ABC"])

    def test_scoring_config_is_immutable(self):
        scoring = ScoringConfig()

        with self.assertRaises(FrozenInstanceError):
            scoring.top_n = 5
        self.assertIsInstance(scoring.excluded_symbols, frozenset)


if __name__ == "__main__":
    unittest.main()
