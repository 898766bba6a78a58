"""
Tests for configuration loading and environment overrides.
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from core.config_loader import (
    AppConfig, MatchingConfig, SignalWeights, WorkerConfig, load_config, apply_env_overrides
)

ENV_KEYS = ("DATABASE_URL", "CRON_SECRET", "MATCH_ENGINE_URL")


def _clean_env():
    return {k: v for k, v in os.environ.items() if k not in ENV_KEYS}


class TestEnvOverrides(unittest.TestCase):
    def test_no_env_leaves_data_untouched(self):
        data = {'database': {'url': 'sqlite://'}}
        with patch.dict(os.environ, _clean_env(), clear=True):
            self.assertEqual(apply_env_overrides(data), {'database': {'url': 'sqlite://'}})

    def test_database_url(self):
        with patch.dict(os.environ, {**_clean_env(), "DATABASE_URL": "postgresql://db/prod"}, clear=True):
            data = apply_env_overrides({})
        self.assertEqual(data['database']['url'], "postgresql://db/prod")

    def test_cron_secret_replaces_null_section(self):
        with patch.dict(os.environ, {**_clean_env(), "CRON_SECRET": "s3cret"}, clear=True):
            data = apply_env_overrides({'cron': None})
        self.assertEqual(data['cron'], {'secret': 's3cret'})

    def test_endpoint_url_from_base(self):
        with patch.dict(os.environ, {**_clean_env(), "MATCH_ENGINE_URL": "https://engine.example.com/"}, clear=True):
            data = apply_env_overrides({})
        self.assertEqual(
            data['schedule']['endpoint_url'],
            "https://engine.example.com/cron/recompute-matches"
        )


class TestLoadConfig(unittest.TestCase):
    def _write(self, text):
        handle = tempfile.NamedTemporaryFile('w', suffix='.yaml', delete=False)
        handle.write(text)
        handle.close()
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_defaults_fill_missing_sections(self):
        path = self._write("database:\n  url: sqlite://\n")
        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_config(path)

        self.assertEqual(config.database.url, "sqlite://")
        self.assertEqual(config.worker.batch_size, 50)
        self.assertEqual(config.worker.sweep_limit, 20)
        self.assertEqual(config.worker.max_attempts, 5)
        self.assertIsNone(config.cron.secret)
        self.assertEqual(config.matching.baseline_hours_per_week, 40.0)
        self.assertEqual(config.matching.signal_weights.skills, 0.30)

    def test_env_wins_over_yaml(self):
        path = self._write("database:\n  url: sqlite://\ncron:\n  secret: from-yaml\n")
        with patch.dict(os.environ, {**_clean_env(), "CRON_SECRET": "from-env"}, clear=True):
            config = load_config(path)

        self.assertEqual(config.cron.secret, "from-env")

    def test_missing_database_is_invalid(self):
        path = self._write("worker:\n  batch_size: 10\n")
        with patch.dict(os.environ, _clean_env(), clear=True):
            with self.assertRaises(ValidationError):
                load_config(path)

    def test_repo_config_loads(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_config("config.yaml")

        self.assertIsInstance(config, AppConfig)
        self.assertAlmostEqual(sum(config.matching.signal_weights.as_dict().values()), 1.0)


class TestSignalWeights(unittest.TestCase):
    def test_merge_ignores_unknown_and_none(self):
        merged = SignalWeights().merged({'skills': 0.5, 'luck': 3.0, 'trust': None})

        self.assertEqual(merged.skills, 0.5)
        self.assertEqual(merged.trust, 0.10)
        self.assertNotIn('luck', merged.as_dict())

    def test_merge_does_not_mutate(self):
        weights = SignalWeights()
        weights.merged({'skills': 0.9})

        self.assertEqual(weights.skills, 0.30)

    def test_zero_total_rejected(self):
        zeros = {name: 0.0 for name in SignalWeights().as_dict()}

        with self.assertRaises(ValidationError):
            MatchingConfig(signal_weights=zeros)

    def test_negative_weight_rejected(self):
        with self.assertRaises(ValidationError):
            SignalWeights(skills=-0.1)


class TestWorkerConfig(unittest.TestCase):
    def test_dead_state_can_be_disabled(self):
        self.assertIsNone(WorkerConfig(max_attempts=None).max_attempts)

    def test_priority_bounds(self):
        with self.assertRaises(ValidationError):
            WorkerConfig(default_priority=11)


if __name__ == '__main__':
    unittest.main()
