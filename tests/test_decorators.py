import datetime
import shutil
import tempfile
import unittest
from pathlib import Path

from helpers import RecordingLogger
from Function.decorators import log_execution_time, safe_run
from Function.log_cleanup import clean_old_logs


class _Stage:
    def __init__(self, logger):
        self._logger = logger

    @safe_run
    @log_execution_time
    def ok(self, value):
        return value * 2

    @safe_run
    def fail(self):
        raise RuntimeError("boom")


class DecoratorTests(unittest.TestCase):
    def test_execution_time_is_logged_through_instance_logger(self):
        logger = RecordingLogger()

        self.assertEqual(_Stage(logger).ok(3), 6)
        self.assertTrue(any("_Stage.ok" in m for m in logger.messages("INFO")))

    def test_safe_run_logs_traceback_and_reraises(self):
        logger = RecordingLogger()

        with self.assertRaises(RuntimeError):
            _Stage(logger).fail()

        errors = logger.messages("ERROR")
        self.assertEqual(len(errors), 1)
        self.assertIn("RuntimeError: boom", errors[0])
        self.assertIn("[Traceback]", errors[0])


class LogCleanupTests(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def test_only_expired_log_files_are_removed(self):
        today = datetime.date.today()
        old = self.tmp / f"Log_{(today - datetime.timedelta(days=30)):%Y%m%d}.log"
        fresh = self.tmp / f"Log_{today:%Y%m%d}.log"
        other = self.tmp / "notes.txt"
        broken = self.tmp / "Log_garbage.log"
        for path in (old, fresh, other, broken):
            path.write_text("x", encoding="utf-8")
        logger = RecordingLogger()

        removed = clean_old_logs(str(self.tmp), logger)

        self.assertEqual(removed, 1)
        self.assertFalse(old.exists())
        self.assertTrue(fresh.exists())
        self.assertTrue(other.exists())
        self.assertTrue(broken.exists())
        self.assertTrue(logger.messages("WARNING"))

    def test_missing_directory_is_skipped(self):
        logger = RecordingLogger()

        self.assertEqual(clean_old_logs(str(self.tmp / "nope"), logger), 0)


if __name__ == "__main__":
    unittest.main()
