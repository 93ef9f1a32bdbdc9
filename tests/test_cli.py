"""Tests for the command-line interface."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from penny_trends.cli import app, format_snapshot, run_worker
from penny_trends.config import Config
from penny_trends.models import Snapshot, StockAggregate
from penny_trends.storage.json_store import JsonFileSnapshotStore
from penny_trends.worker import RunResult, SourceWarning, WorkerState

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    config = {
        "subreddits": ["pennystocks"],
        "storage": {"backend": "json", "path": str(tmp_path / "snapshot.json")},
    }
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("REDDIT_CLIENT_ID", "REDDIT_CLIENT_SECRET", "REDDIT_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def snapshot():
    stocks = [
        StockAggregate(symbol="GME", mention_count=5, unique_post_count=2, sentiment_score=0.25),
        StockAggregate(symbol="AMC", mention_count=9, unique_post_count=1, sentiment_score=-0.5),
    ]
    return Snapshot(stocks=stocks, last_updated=1700000000000, source_count=1)


def test_check_config_ok(config_file):
    result = runner.invoke(app, ["check-config", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Subreddits: pennystocks" in result.output
    assert "Configuration OK" in result.output


def test_check_config_errors(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({"subreddits": [], "storage": {"backend": "redis"}}), encoding="utf-8")

    result = runner.invoke(app, ["check-config", "--config", str(path)])

    assert result.exit_code == 1


def test_show_without_snapshot(config_file):
    result = runner.invoke(app, ["show", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "No snapshot stored yet" in result.output


def test_show_sorted_table(config_file, tmp_path, snapshot):
    JsonFileSnapshotStore(str(tmp_path / "snapshot.json")).save(snapshot)

    result = runner.invoke(app, ["show", "--config", str(config_file), "--sort-by", "mentions"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[2].startswith("AMC")
    assert lines[3].startswith("GME")


def test_show_closes_store(config_file):
    store = MagicMock()
    store.load.return_value = None

    with patch("penny_trends.cli.create_store", return_value=store):
        result = runner.invoke(app, ["show", "--config", str(config_file)])

    assert result.exit_code == 1
    store.close.assert_called_once()


def test_format_snapshot_header(snapshot):
    text = format_snapshot(snapshot)

    assert text.splitlines()[0] == "Snapshot ok from 1 subreddits, updated 2023-11-14 22:13:20 UTC"


def test_run_reports_result(config_file, snapshot):
    result_obj = RunResult(
        state=WorkerState.SUCCEEDED,
        snapshot=snapshot,
        warnings=[SourceWarning("wallstreetbets", "NetworkError", "HTTP 503")],
    )

    with patch("penny_trends.cli.setup_logging"), patch("penny_trends.cli.run_worker", AsyncMock(return_value=result_obj)):
        result = runner.invoke(app, ["run", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Published 2 symbols" in result.output


def test_run_failure_exit_code(config_file):
    result_obj = RunResult(state=WorkerState.FAILED, error="PersistenceError: disk full")

    with patch("penny_trends.cli.setup_logging"), patch("penny_trends.cli.run_worker", AsyncMock(return_value=result_obj)):
        result = runner.invoke(app, ["run", "--config", str(config_file)])

    assert result.exit_code == 1


def test_run_worker_closes_store(snapshot):
    store = MagicMock()
    worker = MagicMock()
    worker.run = AsyncMock(return_value=RunResult(state=WorkerState.SUCCEEDED, snapshot=snapshot))

    with patch("penny_trends.cli.create_store", return_value=store), \
            patch("penny_trends.cli.IngestionWorker", return_value=worker):
        result = asyncio.run(run_worker(Config()))

    assert result.succeeded
    store.close.assert_called_once()
