# -*- coding:utf-8 -*-
# Made by Kei Choi(hanul93@gmail.com)

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from isextract.iscore import config, isconst

KEYS = ("ISEXTRACT_MAX_ENTRIES", "ISEXTRACT_RESYNC_LIMIT", "ISEXTRACT_ZERO_LENGTH_CAP", "ISEXTRACT_WORKERS")
NO_ENV = Path("/nonexistent/isextract/.env")


class Test_Config(unittest.TestCase):
    def setUp(self):
        self.env = mock.patch.dict(os.environ)
        self.env.start()
        for key in KEYS:
            os.environ.pop(key, None)

    def tearDown(self):
        self.env.stop()
        config.reload_config()

    def test_defaults(self):
        cfg = config.Config.from_env(NO_ENV)
        self.assertEqual(cfg.max_entries, isconst.IS_DEFAULT_MAX_ENTRIES)
        self.assertEqual(cfg.resync_limit, 0)
        self.assertEqual(cfg.zero_length_cap, 100 * 1024)
        self.assertEqual(cfg.workers, 0)
        self.assertFalse(cfg.env_loaded)
        self.assertGreaterEqual(cfg.worker_count, 1)

    def test_environment(self):
        os.environ["ISEXTRACT_MAX_ENTRIES"] = "100"
        os.environ["ISEXTRACT_RESYNC_LIMIT"] = "0x1000"
        os.environ["ISEXTRACT_WORKERS"] = "3"
        cfg = config.Config.from_env(NO_ENV)
        self.assertEqual(cfg.max_entries, 100)
        self.assertEqual(cfg.resync_limit, 0x1000)
        self.assertEqual(cfg.worker_count, 3)

    def test_invalid_values(self):
        os.environ["ISEXTRACT_MAX_ENTRIES"] = "0"
        os.environ["ISEXTRACT_ZERO_LENGTH_CAP"] = "lots"
        os.environ["ISEXTRACT_RESYNC_LIMIT"] = "-5"
        with self.assertLogs("isextract.iscore.config", level="WARNING"):
            cfg = config.Config.from_env(NO_ENV)
        self.assertEqual(cfg.max_entries, isconst.IS_DEFAULT_MAX_ENTRIES)
        self.assertEqual(cfg.zero_length_cap, isconst.IS_DEFAULT_ZERO_LENGTH_CAP)
        self.assertEqual(cfg.resync_limit, isconst.IS_DEFAULT_RESYNC_LIMIT)

    def test_dotenv(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_path = Path(tmp) / ".env"
            env_path.write_text("ISEXTRACT_MAX_ENTRIES=7\nISEXTRACT_ZERO_LENGTH_CAP=2048\n")

            cfg = config.reload_config(env_path)
            self.assertTrue(cfg.env_loaded)
            self.assertEqual(cfg.max_entries, 7)
            self.assertEqual(cfg.zero_length_cap, 2048)
            self.assertIs(config.get_config(), cfg)


if __name__ == "__main__":
    unittest.main()
