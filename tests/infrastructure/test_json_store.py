import json
from unittest.mock import patch

import pytest

from cardwise.domain.errors import StoreError
from cardwise.infrastructure.adapters.json_store import InMemoryStore, JsonFileStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "cards.json"


def test_missing_file_reads_as_empty(store_path):
    store = JsonFileStore(store_path)
    assert store.get("cards") is None
    assert not store_path.exists()


def test_set_creates_parent_dirs_and_persists(store_path):
    JsonFileStore(store_path).set("card:atp", {"interval": 6})

    assert json.loads(store_path.read_text(encoding="utf-8")) == {"card:atp": {"interval": 6}}
    assert JsonFileStore(store_path).get("card:atp") == {"interval": 6}


def test_remove(store_path):
    store = JsonFileStore(store_path)
    store.set("a", 1)
    store.set("b", 2)
    store.remove("a")
    store.remove("missing")

    assert store.get("a") is None
    assert store.get("b") == 2


def test_corrupt_file_raises_store_error(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError, match="Could not read"):
        JsonFileStore(store_path).get("cards")


def test_non_object_document_raises(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StoreError, match="not a JSON object"):
        JsonFileStore(store_path).get("cards")


def test_failed_write_keeps_previous_document(store_path):
    store = JsonFileStore(store_path)
    store.set("a", 1)

    with patch("os.replace", side_effect=OSError("disk full")):
        with pytest.raises(StoreError, match="disk full"):
            store.set("a", 2)

    assert store.get("a") == 1
    assert [p.name for p in store_path.parent.iterdir()] == ["cards.json"]


def test_in_memory_store_copies_values():
    value = {"interval": 1}
    store = InMemoryStore({"card:atp": value})
    value["interval"] = 99

    fetched = store.get("card:atp")
    fetched["interval"] = 42

    assert store.get("card:atp") == {"interval": 1}


def test_in_memory_remove_missing_is_noop():
    store = InMemoryStore()
    store.remove("nope")
    assert store.get("nope") is None
