from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from member_lookup import __version__
from member_lookup.cache import SnapshotCache
from member_lookup.config import DEFAULT_CACHE_KEY
from member_lookup.shared import MemberRecord, ParseResult


ROOT = Path(__file__).resolve().parents[1]
CLI = [sys.executable, "-m", "member_lookup.cli"]
SAMPLE = "sample-data/member_export.csv"
UNREACHABLE_URL = "http://127.0.0.1:9/members.csv"


class MemberLookupCliTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmpdir = Path(self._tmp.name)
        self.cache_dir = self.tmpdir / "cache"

    def run_cli(self, *args: str) -> subprocess.CompletedProcess[str]:
        env = {key: value for key, value in os.environ.items() if not key.startswith("MEMBER_LOOKUP_")}
        env["MEMBER_LOOKUP_CACHE_DIR"] = str(self.cache_dir)
        env["MEMBER_LOOKUP_TIMEOUT"] = "2"
        env["PYTHONIOENCODING"] = "utf-8"
        return subprocess.run(
            [*CLI, *args],
            cwd=ROOT,
            capture_output=True,
            text=True,
            encoding="utf-8",
            env=env,
        )

    def seed_cache(self) -> None:
        SnapshotCache(self.cache_dir).save(
            DEFAULT_CACHE_KEY,
            ParseResult([MemberRecord(account_name="Cached Member", account_number="9001")], "2024-04-01"),
        )

    def test_parse_json(self):
        proc = self.run_cli("parse", SAMPLE, "--json")
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertEqual(proc.stderr, "")
        payload = json.loads(proc.stdout)
        self.assertEqual(payload["contract"]["name"], "member_lookup.parse_result")
        self.assertEqual(payload["metadata_date"], "2024-05-01 Export")
        self.assertEqual(payload["header_row_index"], 1)
        self.assertEqual(payload["record_count"], 5)
        self.assertEqual(payload["members"][0]["account_name"], "Doe, Jane")

    def test_parse_text_summary_and_output_file(self):
        output = self.tmpdir / "parsed.json"
        proc = self.run_cli("parse", SAMPLE, "--output", str(output))
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertIn("Member records: 5", proc.stderr)
        self.assertIn("account_name: column 1 (Member Name)", proc.stderr)
        self.assertIn("Parse result written:", proc.stderr)
        self.assertEqual(json.loads(output.read_text(encoding="utf-8"))["record_count"], 5)

    def test_parse_missing_file_returns_exit_1(self):
        proc = self.run_cli("parse", "sample-data/does_not_exist.csv")
        self.assertEqual(proc.returncode, 1)
        self.assertIn("File not found", proc.stderr)

    def test_parse_directory_returns_exit_2(self):
        proc = self.run_cli("parse", "sample-data")
        self.assertEqual(proc.returncode, 2)
        self.assertIn("directory", proc.stderr)

    def test_search_input_file(self):
        proc = self.run_cli("search", "jane", "--input", SAMPLE)
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertIn("Doe, Jane  [CURRENT]", proc.stdout)
        self.assertIn("Found 1 matching records", proc.stderr)

    def test_search_digits_match_separated_numbers_json(self):
        proc = self.run_cli("search", "1002", "--input", SAMPLE, "--json")
        self.assertEqual(proc.returncode, 0, proc.stderr)
        payload = json.loads(proc.stdout)
        self.assertEqual(payload["contract"]["name"], "member_lookup.search_result")
        self.assertEqual(payload["match_count"], 1)
        self.assertEqual(payload["members"][0]["account_number"], "ACC-10-02")

    def test_search_no_match_returns_exit_3(self):
        proc = self.run_cli("search", "zzz", "--input", SAMPLE)
        self.assertEqual(proc.returncode, 3)
        self.assertIn("No matching members", proc.stderr)
        self.assertEqual(proc.stdout, "")

    def test_search_without_cache_returns_exit_5(self):
        proc = self.run_cli("search", "jane")
        self.assertEqual(proc.returncode, 5)
        self.assertIn("No cached member data", proc.stderr)

    def test_search_uses_cached_snapshot(self):
        self.seed_cache()
        proc = self.run_cli("search", "9001", "--json")
        self.assertEqual(proc.returncode, 0, proc.stderr)
        payload = json.loads(proc.stdout)
        self.assertEqual(payload["metadata_date"], "2024-04-01")
        self.assertEqual(payload["members"][0]["account_name"], "Cached Member")

    def test_search_with_invalid_config_returns_exit_1(self):
        config_path = self.tmpdir / "member-lookup.json"
        config_path.write_text(json.dumps({"cache_dir": None}), encoding="utf-8")
        proc = self.run_cli("search", "jane", "--config", str(config_path))
        self.assertEqual(proc.returncode, 1)
        self.assertIn("cache_dir must be a path", proc.stderr)
        self.assertNotIn("Traceback", proc.stderr)

    def test_sync_without_url_or_cache_returns_exit_5(self):
        proc = self.run_cli("sync")
        self.assertEqual(proc.returncode, 5)
        self.assertIn("No sheet URL configured", proc.stderr)
        self.assertIn("Database disconnected", proc.stderr)

    def test_sync_failure_falls_back_to_cache_with_exit_4(self):
        self.seed_cache()
        proc = self.run_cli("sync", "--url", UNREACHABLE_URL, "--json")
        self.assertEqual(proc.returncode, 4, proc.stderr)
        payload = json.loads(proc.stdout)
        summary = payload["run_summary"]
        self.assertEqual(payload["contract"]["name"], "member_lookup.sync_summary")
        self.assertEqual(summary["status"], "cache")
        self.assertEqual(summary["metrics"]["record_count"], 1)
        self.assertEqual(summary["warnings_count"], 1)

    def test_export_xlsx_and_refuse_overwrite(self):
        output = self.tmpdir / "members.xlsx"
        proc = self.run_cli("export", SAMPLE, "--output", str(output))
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertTrue(output.exists())
        self.assertIn("Exported 5 member records", proc.stderr)

        again = self.run_cli("export", SAMPLE, "--output", str(output))
        self.assertEqual(again.returncode, 1)
        self.assertIn("Refusing to overwrite", again.stderr)

    def test_export_unsupported_type_returns_exit_1(self):
        proc = self.run_cli("export", SAMPLE, "--output", str(self.tmpdir / "members.txt"))
        self.assertEqual(proc.returncode, 1)
        self.assertIn("Unsupported export type", proc.stderr)

    def test_config_init_writes_once(self):
        path = self.tmpdir / "member-lookup.json"
        proc = self.run_cli("config", "init", "--path", str(path))
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["cache_key"], DEFAULT_CACHE_KEY)

        again = self.run_cli("config", "init", "--path", str(path))
        self.assertEqual(again.returncode, 1)
        self.assertIn("Refusing to overwrite", again.stderr)

    def test_version(self):
        proc = self.run_cli("version")
        self.assertEqual(proc.returncode, 0)
        self.assertEqual(proc.stdout.strip(), __version__)

    def test_usage_error_returns_exit_1(self):
        proc = self.run_cli("search")
        self.assertEqual(proc.returncode, 1)
        self.assertIn("required", proc.stderr)


if __name__ == "__main__":
    unittest.main()
