# tests/test_logging_config.py

"""Tests for the run-log configuration."""

import logging
import unittest

from sharebox.config.logging_config import LOGGER_NAME, setup_logging
from sharebox.config.settings import Settings


def _handlers() -> list[logging.Handler]:
    return list(logging.getLogger(LOGGER_NAME).handlers)


class TestSetupLogging(unittest.TestCase):
    """setup_logging handler wiring."""

    def setUp(self) -> None:
        self._reset()
        self.addCleanup(self._reset)

    @staticmethod
    def _reset() -> None:
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_run_log_created_in_logs_dir(self) -> None:
        log_path = setup_logging()
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, Settings.LOGS_DIR)
        self.assertRegex(log_path.name, r"^sharebox_\d{8}_\d{6}\.log$")

    def test_stderr_level_defaults_to_warning(self) -> None:
        setup_logging()
        stream_levels = [
            h.level for h in _handlers()
            if not isinstance(h, logging.FileHandler)
        ]
        file_levels = [
            h.level for h in _handlers()
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(stream_levels, [logging.WARNING])
        self.assertEqual(file_levels, [logging.DEBUG])

    def test_explicit_console_level(self) -> None:
        setup_logging("info")
        stream = [
            h for h in _handlers()
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(stream[0].level, logging.INFO)

    def test_unknown_console_level_falls_back(self) -> None:
        setup_logging("chatty")
        stream = [
            h for h in _handlers()
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(stream[0].level, logging.WARNING)

    def test_second_call_reuses_run_log(self) -> None:
        first = setup_logging()
        count = len(_handlers())
        second = setup_logging()
        self.assertEqual(first, second)
        self.assertEqual(len(_handlers()), count)

    def test_module_loggers_propagate(self) -> None:
        log_path = setup_logging()
        logging.getLogger("sharebox.storage").debug("kv write")
        for handler in _handlers():
            handler.flush()
        self.assertIn("[sharebox.storage]", log_path.read_text("utf-8"))


if __name__ == "__main__":
    unittest.main()
