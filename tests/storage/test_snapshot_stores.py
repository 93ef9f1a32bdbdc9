"""Tests for the snapshot store backends."""

import json
import os

import pytest

from penny_trends.config import StorageConfig
from penny_trends.exceptions import PersistenceError
from penny_trends.models import DataSource, Snapshot, StockAggregate
from penny_trends.storage.json_store import JsonFileSnapshotStore
from penny_trends.storage.memory_store import InMemorySnapshotStore
from penny_trends.storage.snapshot_store import create_store
from penny_trends.storage.sqlalchemy_store import SQLAlchemySnapshotStore


@pytest.fixture
def snapshot(make_post, make_comment):
    post = make_post("p1", "$GME to the moon", comments=[make_comment("c1", "GME!", 4)])
    stock = StockAggregate(
        symbol="GME",
        mention_count=1,
        unique_post_count=1,
        unique_user_count=1,
        sentiment_score=0.5,
        trending_score=6.2,
        posts=[post],
        last_updated=1700000000000,
    )
    return Snapshot(stocks=[stock], last_updated=1700000000000, source_count=4)


@pytest.fixture(params=["json", "sqlalchemy", "memory"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonFileSnapshotStore(str(tmp_path / "data" / "snapshot.json"))
    if request.param == "sqlalchemy":
        return SQLAlchemySnapshotStore(f"sqlite:///{tmp_path}/db/snapshots.db")
    return InMemorySnapshotStore()


def test_load_empty_store(store):
    assert store.load() is None


def test_save_then_load(store, snapshot):
    store.save(snapshot)

    loaded = store.load()

    assert loaded == snapshot
    assert loaded.stocks[0].posts[0].comments[0].body == "GME!"


def test_store_usable_after_close(store, snapshot):
    store.save(snapshot)
    store.close()

    assert store.load() == snapshot


def test_save_replaces_previous_snapshot(store, snapshot):
    store.save(snapshot)
    store.save(Snapshot.error(1700000900000, 4))

    loaded = store.load()

    assert loaded.data_source is DataSource.ERROR
    assert loaded.status == "error"
    assert loaded.stocks == []


def test_json_store_wire_format(tmp_path, snapshot):
    path = tmp_path / "snapshot.json"
    JsonFileSnapshotStore(str(path)).save(snapshot)

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert set(payload) == {"stocks", "lastUpdated", "totalSubreddits", "dataSource"}
    assert payload["dataSource"] == "reddit"
    stock = payload["stocks"][0]
    assert stock["uniquePosts"] == 1
    assert stock["sentimentScore"] == 0.5
    assert stock["posts"][0]["created_utc"] == 1700000000.0
    assert stock["userSentiments"] == []


def test_json_store_unreadable_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text("{not json", encoding="utf-8")

    assert JsonFileSnapshotStore(str(path)).load() is None


def test_json_store_write_failure(tmp_path, snapshot):
    path = tmp_path / "snapshot.json"
    store = JsonFileSnapshotStore(str(path))
    os.makedirs(path)

    with pytest.raises(PersistenceError):
        store.save(snapshot)


def test_sqlalchemy_store_keeps_one_row(tmp_path, snapshot):
    from sqlalchemy import func, select

    from penny_trends.storage.sqlalchemy_store import SnapshotRow

    store = SQLAlchemySnapshotStore(f"sqlite:///{tmp_path}/snapshots.db", key="stocks")
    store.save(snapshot)
    store.save(snapshot)

    with store.get_db() as db:
        assert db.execute(select(func.count()).select_from(SnapshotRow)).scalar_one() == 1
    store.close()


def test_sqlalchemy_store_separate_keys(tmp_path, snapshot):
    url = f"sqlite:///{tmp_path}/snapshots.db"
    SQLAlchemySnapshotStore(url, key="stocks").save(snapshot)

    assert SQLAlchemySnapshotStore(url, key="other").load() is None


@pytest.mark.parametrize(
    "backend, expected",
    [("json", JsonFileSnapshotStore), ("sqlalchemy", SQLAlchemySnapshotStore), ("memory", InMemorySnapshotStore)],
)
def test_create_store(tmp_path, backend, expected):
    config = StorageConfig(
        backend=backend,
        path=str(tmp_path / "snapshot.json"),
        database_url=f"sqlite:///{tmp_path}/snapshots.db",
    )

    assert isinstance(create_store(config), expected)


def test_create_store_unknown_backend():
    with pytest.raises(ValueError):
        create_store(StorageConfig(backend="redis"))
