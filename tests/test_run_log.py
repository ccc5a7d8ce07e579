from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path

from xpost.run_log import RunLogger


class TestRunLogger(unittest.TestCase):
    def test_stream_records_are_jsonl(self) -> None:
        buf = io.StringIO()
        log = RunLogger.to_stream(buf, session_id="s1")
        log.info("started", post="20")
        log.warning("http_retry", reason="rate_limited")
        log.close()

        self.assertFalse(buf.closed)
        records = [json.loads(ln) for ln in buf.getvalue().splitlines()]
        self.assertEqual([r["event"] for r in records], ["started", "http_retry"])
        self.assertEqual([r["level"] for r in records], ["INFO", "WARN"])
        self.assertEqual(records[0]["session_id"], "s1")
        self.assertEqual(records[0]["data"], {"post": "20"})

    def test_exception_includes_error_details(self) -> None:
        buf = io.StringIO()
        log = RunLogger.to_stream(buf)
        try:
            raise ValueError("bad value")
        except ValueError as e:
            log.exception("quote_fetch_failed", exc=e, level=2, post_id="7")

        record = json.loads(buf.getvalue())
        self.assertEqual(record["level"], "ERROR")
        self.assertEqual(record["data"]["level"], 2)
        self.assertEqual(record["data"]["post_id"], "7")
        self.assertEqual(record["data"]["error"]["type"], "ValueError")
        self.assertEqual(record["data"]["error"]["message"], "bad value")
        self.assertIn("Traceback", record["data"]["error"]["traceback"])

    def test_file_logger_appends_when_not_overwriting(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "logs" / "xpost.log"

            with RunLogger.open(path) as log:
                log.info("first")
            with RunLogger.open(path, overwrite=False) as log:
                log.info("second")

            events = [json.loads(ln)["event"] for ln in path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual(events, ["first", "second"])

            with RunLogger.open(path) as log:
                log.info("third")
            events = [json.loads(ln)["event"] for ln in path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual(events, ["third"])

    def test_requires_exactly_one_target(self) -> None:
        with self.assertRaises(ValueError):
            RunLogger()
        with self.assertRaises(ValueError):
            RunLogger("x.log", stream=io.StringIO())


if __name__ == "__main__":
    unittest.main()
