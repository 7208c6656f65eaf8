"""Tests for CLI commands: help, card management, reviews, queues, and config."""

import json
import logging

import pytest
from typer.testing import CliRunner

from cardwise.interface.cli import app

runner = CliRunner()


@pytest.fixture
def store_file(mock_home, tmp_path):
    return tmp_path / "cards.json"


def invoke(store_file, *args):
    return runner.invoke(app, ["--store", str(store_file), *args])


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "spaced-repetition scheduling" in result.stdout
    assert "review" in result.stdout
    assert "preview" in result.stdout


# --- Cards ---


def test_add_and_show(store_file):
    result = invoke(store_file, "add", "atp")
    assert result.exit_code == 0
    assert "Added 'atp'" in result.stdout

    result = invoke(store_file, "show", "atp")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["id"] == "atp"
    assert data["ease_factor"] == 2.5
    assert data["repetitions"] == 0
    assert data["interval"] == 0


def test_add_duplicate_fails(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "add", "atp")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_show_missing_card(store_file):
    result = invoke(store_file, "show", "nope")
    assert result.exit_code == 1
    assert "Card not found" in result.output


def test_remove(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "remove", "atp")
    assert result.exit_code == 0
    assert invoke(store_file, "show", "atp").exit_code == 1


# --- Reviews ---


def test_review_schedules_card(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "review", "atp", "easy")

    assert result.exit_code == 0
    assert "next review in 4 days" in result.stdout
    assert "Repetitions: 1" in result.stdout

    data = json.loads(invoke(store_file, "show", "atp").stdout)
    assert data["interval"] == 4
    assert data["next_review_date"] - data["last_reviewed"] == 4 * 86_400_000


def test_review_unknown_outcome_fails(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "review", "atp", "meh")
    assert result.exit_code == 1
    assert "Unrecognized review outcome" in result.output


def test_review_unknown_outcome_lenient(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "review", "atp", "meh", "--lenient")
    assert result.exit_code == 0
    assert "again -> next review in 1 day" in result.stdout


def test_preview_json(store_file):
    invoke(store_file, "add", "atp")
    invoke(store_file, "review", "atp", "good")

    result = invoke(store_file, "preview", "atp", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"again": 1, "hard": 3, "good": 6, "easy": 8}


def test_preview_labels(store_file):
    invoke(store_file, "add", "atp")
    result = invoke(store_file, "preview", "atp")
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0].split() == ["again", "1", "day"]
    assert lines[3].split() == ["easy", "4", "days"]


# --- Queues ---


def test_due_lists_new_cards_only_until_reviewed(store_file):
    invoke(store_file, "add", "atp")
    invoke(store_file, "add", "adp")
    invoke(store_file, "review", "atp", "good")

    result = invoke(store_file, "due", "--json")
    assert result.exit_code == 0
    assert [c["id"] for c in json.loads(result.stdout)] == ["adp"]


def test_due_empty(store_file):
    result = invoke(store_file, "due")
    assert result.exit_code == 0
    assert "No cards due." in result.stdout


def test_forecast(store_file):
    invoke(store_file, "add", "atp")
    invoke(store_file, "add", "adp")
    invoke(store_file, "review", "atp", "good")

    result = invoke(store_file, "forecast", "--days", "3")
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert len(lines) == 3
    assert lines[0].split() == ["Today", "1"]
    assert lines[1].split()[-1] == "1"


def test_forecast_invalid_days(store_file):
    result = invoke(store_file, "forecast", "--days", "0")
    assert result.exit_code == 2
    assert "Invalid option" in result.output


def test_corrupt_store_reports_error(store_file):
    store_file.write_text("{broken", encoding="utf-8")
    result = invoke(store_file, "due")
    assert result.exit_code == 1
    assert "Could not read store" in result.output


# --- Config ---


def test_config_show(store_file):
    result = invoke(store_file, "config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["store_path"] == str(store_file.resolve())
    assert data["strict_outcomes"] is True


def test_oversized_stored_interval_reports_error(store_file):
    store_file.write_text(
        json.dumps({"cards": ["atp"], "card:atp": {"repetitions": 5, "interval": 10**308}}),
        encoding="utf-8",
    )
    result = invoke(store_file, "review", "atp", "easy")
    assert result.exit_code == 1
    assert "Interval overflowed" in result.output


# --- Verbosity ---


@pytest.mark.parametrize(
    "flags,level",
    [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
)
def test_verbose_flag_sets_log_level(store_file, flags, level):
    result = runner.invoke(app, ["--store", str(store_file), *flags, "due"])
    assert result.exit_code == 0
    assert logging.getLogger("cardwise").level == level
