from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from infrastructure.config import AppConfig


class AppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig.from_env()

        self.assertEqual(config.store, "sqlite")
        self.assertEqual(config.db_path, "savepet.db")
        self.assertEqual(config.character_name, "머니펫")
        self.assertEqual(config.cors_origins, ["http://localhost:3000"])

    def test_overrides(self) -> None:
        env = {
            "SAVEPET_STORE": "Memory",
            "SAVEPET_CHARACTER_NAME": "저금이",
            "SAVEPET_CORS_ORIGINS": "http://a.test, http://b.test,",
        }
        with patch.dict(os.environ, env, clear=True):
            config = AppConfig.from_env()

        self.assertEqual(config.store, "memory")
        self.assertEqual(config.character_name, "저금이")
        self.assertEqual(config.cors_origins, ["http://a.test", "http://b.test"])

    def test_unknown_store_is_rejected(self) -> None:
        with patch.dict(os.environ, {"SAVEPET_STORE": "redis"}, clear=True):
            with self.assertRaises(ValueError):
                AppConfig.from_env()


if __name__ == "__main__":
    unittest.main()
