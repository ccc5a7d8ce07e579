from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from raw_posts import envelope, make_raw_post

from xpost.errors import MalformedPayloadError, UpstreamError
from xpost.offline import DirectoryPostFetcher, raw_post_from_json


class TestDirectoryPostFetcher(unittest.TestCase):
    def test_reads_bare_posts_and_envelopes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "1.json").write_text(json.dumps(make_raw_post("1")), encoding="utf-8")
            (root / "2.json").write_text(json.dumps(envelope(make_raw_post("2"))), encoding="utf-8")

            fetcher = DirectoryPostFetcher(root)
            first = fetcher.fetch_post("1")
            second = fetcher.fetch_post("2")

            assert first is not None and second is not None
            self.assertEqual(first.rest_id, "1")
            self.assertEqual(second.rest_id, "2")
            self.assertIsNone(fetcher.fetch_post("3"))

    def test_unreadable_file_is_upstream_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "1.json").write_text("{not json", encoding="utf-8")
            with self.assertRaises(UpstreamError):
                DirectoryPostFetcher(td).fetch_post("1")


class TestRawPostFromJson(unittest.TestCase):
    def test_absent_and_malformed(self) -> None:
        self.assertIsNone(raw_post_from_json(envelope(None)))
        self.assertIsNone(raw_post_from_json({"__typename": "TweetUnavailable"}))
        with self.assertRaises(MalformedPayloadError):
            raw_post_from_json({"rest_id": "1"})


if __name__ == "__main__":
    unittest.main()
