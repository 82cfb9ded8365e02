"""Tests for the command line interface."""

import io
import json
from datetime import date

import pytest

from practice_pay.cli import PracticePayCli
from practice_pay.clock import FixedClock

SNAPSHOT = {
    "practices": [
        {"id": "p1", "name": "Maple Dental", "percentage": 40, "payCycle": "bi-weekly"},
    ],
    "entries": [
        {"practiceId": "p1", "entryType": "dailySummary", "date": "2024-03-05", "production": 1000},
        {"practiceId": "p1", "entryType": "dailySummary", "date": "2024-03-20", "production": 2000},
    ],
    "cheques": [{"practiceId": "p1", "amount": 400, "status": "Cleared"}],
    "payments": [{"practiceId": "p1", "amount": 400, "paymentDate": "2024-03-25"}],
}


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path


@pytest.fixture
def run():
    """Run the CLI and return (exit code, parsed JSON output)."""

    def _run(*args):
        out = io.StringIO()
        cli = PracticePayCli(clock=FixedClock(date(2024, 4, 10)), out=out)
        code = cli.run([str(a) for a in args])
        text = out.getvalue()
        return code, json.loads(text) if text else None

    return _run


class TestBalancesCommand:
    def test_balances_use_clock(self, run, snapshot_file):
        code, data = run("balances", snapshot_file)
        assert code == 0
        assert data["today"] == "2024-04-10"
        # 400 + 800 owed, 400 cleared; due on each period end, so overdue
        assert data["items"][0]["balance"] == "800.00"
        assert data["items"][0]["status"] == "Overdue"

    def test_single_practice(self, run, snapshot_file):
        code, data = run("balances", snapshot_file, "--practice-id", "p1", "--today", "2024-03-01")
        assert code == 0
        assert data["balance"]["status"] == "Paid Up"

    def test_unknown_practice(self, run, snapshot_file):
        code, data = run("balances", snapshot_file, "--practice-id", "zzz")
        assert code == 1
        assert data is None

    def test_unreadable_snapshot(self, run, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        code, _ = run("balances", bad)
        assert code == 1

    def test_snapshot_not_utf8(self, run, tmp_path):
        bad = tmp_path / "latin1.json"
        bad.write_bytes(b"\xff\xfe{}")
        code, data = run("balances", bad)
        assert code == 1
        assert data is None


class TestPayCommand:
    def test_month(self, run, snapshot_file):
        code, data = run("pay", snapshot_file, "--practice-id", "p1", "--month", "2024-03")
        assert code == 0
        assert data["calculatedPay"] == "1200.0"
        assert data["payStructure"] == "(Sum of 2 bi-weekly periods)"

    def test_period(self, run, snapshot_file):
        code, data = run(
            "pay", snapshot_file, "--practice-id", "p1", "--start", "2024-03-01", "--end", "2024-03-15"
        )
        assert code == 0
        assert data["calculatedPay"] == "400.0"

    def test_start_without_end(self, run, snapshot_file):
        code, _ = run("pay", snapshot_file, "--practice-id", "p1", "--start", "2024-03-01")
        assert code == 1


class TestCompareCommand:
    def test_compare_with_contributions(self, run, snapshot_file):
        code, data = run("compare", snapshot_file)
        assert code == 0
        assert data["metrics"][0]["totalCalculatedPay"] == "1200.0"
        assert data["contributions"][0]["payContribution"] == "100"


def test_no_command_prints_help(run):
    code, _ = run()
    assert code == 1
