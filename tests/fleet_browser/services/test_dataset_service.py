import pytest

from fleet_browser.config.model import CollectionConfig
from fleet_browser.core.exceptions import LoadError, NetworkError, PermissionDeniedError
from fleet_browser.services.dataset_service import DatasetLoader, DatasetManager, normalise_snapshot
from fleet_browser.services.record_store import InMemoryRecordStore


class _FailingStore(InMemoryRecordStore):
    def __init__(self, error):
        super().__init__()
        self.error = error

    def get(self, path):
        raise self.error


class _CountingStore(InMemoryRecordStore):
    def __init__(self, data):
        super().__init__(data)
        self.reads = []

    def get(self, path):
        self.reads.append(path)
        return super().get(path)


def _make_configs():
    return {
        "vehicles": CollectionConfig.from_raw(
            {"id": "vehicles", "name": "מאגר כלים", "path": "/data/data", "identifier_field": "רישוי"},
            source_path=None,
            index=0,
        ),
        "owners": CollectionConfig.from_raw(
            {"id": "owners", "path": "/owner/data_owner"}, source_path=None, index=1
        ),
    }


def _make_store():
    return _CountingStore(
        {
            "data": {"data": [{"רישוי": "1"}, None, {"רישוי": "3"}]},
            "owner": {"data_owner": {"k1": {"חפ": "100"}, "bad": "scalar"}},
        }
    )


def test_normalise_snapshot_shapes():
    assert normalise_snapshot([{"a": 1}, None, {"a": 3}]) == ([{"a": 1}, {"a": 3}], ["0", "2"])
    assert normalise_snapshot({"x": {"a": 1}, "y": 5}) == ([{"a": 1}], ["x"])
    assert normalise_snapshot(None) == ([], [])
    assert normalise_snapshot("scalar") == ([], [])


def test_loader_builds_dataset_with_store_keys():
    loader = DatasetLoader(_make_store())

    ds = loader.from_config(_make_configs()["vehicles"])

    assert ds.name == "מאגר כלים"
    assert ds.path == "/data/data"
    assert ds.identifier_field == "רישוי"
    assert ds.keys == ["0", "2"]
    assert [r["רישוי"] for r in ds] == ["1", "3"]


def test_loader_missing_path_is_empty():
    ds = DatasetLoader(_make_store()).load("/nothing/here")
    assert ds.is_empty
    assert ds.name == "/nothing/here"


@pytest.mark.parametrize("error", [PermissionDeniedError("denied"), NetworkError("timeout")])
def test_loader_wraps_store_failures(error):
    loader = DatasetLoader(_FailingStore(error))
    with pytest.raises(LoadError):
        loader.load("/data/data")


def test_manager_loads_lazily_and_caches():
    store = _make_store()
    manager = DatasetManager(DatasetLoader(store), _make_configs())

    assert "vehicles" in manager
    assert "missing" not in manager
    assert list(manager) == ["vehicles", "owners"]
    assert len(manager) == 2
    assert store.reads == []

    first = manager["owners"]
    second = manager["owners"]

    assert first is second
    assert store.reads == ["/owner/data_owner"]
    assert manager.is_loaded("owners")
    assert not manager.is_loaded("vehicles")


def test_manager_reload_and_replace():
    store = _make_store()
    manager = DatasetManager(DatasetLoader(store), _make_configs())
    ds = manager["vehicles"]

    store.set("/data/data/2/רישוי", "33")
    assert manager["vehicles"] is ds
    assert [r["רישוי"] for r in manager.reload("vehicles")] == ["1", "33"]

    updated = ds.replace_record(0, {"רישוי": "11"})
    manager.replace("vehicles", updated)
    assert manager["vehicles"] is updated

    with pytest.raises(KeyError):
        manager.replace("missing", updated)
    with pytest.raises(KeyError):
        manager["missing"]
    with pytest.raises(KeyError):
        manager.config("missing")
