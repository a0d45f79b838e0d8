import base64

import pytest

from fleet_browser.config.model import CollectionConfig, GlobalConfig
from fleet_browser.core.exceptions import NetworkError, PermissionDeniedError
from fleet_browser.core.query import Query
from fleet_browser.services.dataset_service import DatasetLoader, DatasetManager
from fleet_browser.services.export_service import ExportService
from fleet_browser.services.record_service import RecordService
from fleet_browser.services.record_store import InMemoryRecordStore
from fleet_browser.ui.callbacks.callbacks_io import build_csv_download
from fleet_browser.ui.callbacks.callbacks_utils import LOAD_ERROR_MESSAGE, get_dataset, query_from_store
from fleet_browser.ui.config import AppConfig


class _DownStore(InMemoryRecordStore):
    def get(self, path):
        raise NetworkError("unreachable")


def _make_ctx(store, token_verifier=None):
    cfg = CollectionConfig.from_raw({"id": "vehicles", "path": "/data/data"}, source_path=None, index=0)
    return AppConfig(
        config_root=None,
        global_config=GlobalConfig(ui_title="T", collections=[cfg]),
        datasets=DatasetManager(DatasetLoader(store), {"vehicles": cfg}),
        token_verifier=token_verifier,
    )


def test_get_dataset():
    ctx = _make_ctx(InMemoryRecordStore({"data": {"data": [{"a": 1}]}}))

    ds, error = get_dataset(ctx, "vehicles")
    assert error is None
    assert len(ds) == 1

    assert get_dataset(ctx, None) == (None, None)
    ds, error = get_dataset(ctx, "missing")
    assert ds is None and "missing" in error


def test_get_dataset_reports_load_failure():
    ds, error = get_dataset(_make_ctx(_DownStore()), "vehicles")
    assert ds is None
    assert error == LOAD_ERROR_MESSAGE


def test_query_from_store_checks_collection():
    stored = {"collection": "vehicles", "query": Query(term="x").to_dict()}

    assert query_from_store(stored, "vehicles") == Query(term="x")
    assert query_from_store(stored, "owners") == Query()
    assert query_from_store(None, "vehicles") == Query()


class _FakeVerifier:
    def __init__(self, uids_by_token):
        self.uids_by_token = uids_by_token

    def verify(self, id_token):
        return self.uids_by_token.get(id_token)


def test_identity_requires_a_verified_token():
    ctx = _make_ctx(InMemoryRecordStore(), _FakeVerifier({"good": "u"}))

    assert not ctx.identity(None).capability.can_edit
    assert ctx.identity({"uid": "u", "email": "e", "id_token": "good"}).capability.can_edit
    assert ctx.identity({"uid": "u", "email": "e", "id_token": "good"}).session.uid == "u"


def test_forged_session_cannot_write():
    store = InMemoryRecordStore({"data": {"data": [{"רישוי": "1"}]}})
    ctx = _make_ctx(store, _FakeVerifier({"good": "u"}))

    for forged in ({"uid": "attacker"}, {"uid": "attacker", "id_token": "junk"}, {"uid": "attacker", "id_token": "good"}):
        capability = ctx.identity(forged).capability
        assert not capability.can_edit
        with pytest.raises(PermissionDeniedError):
            RecordService(store).update("/data/data", "0", {"רישוי": "9"}, capability)

    assert store.get("/data/data/0/רישוי") == "1"


def test_identity_without_verifier_is_read_only():
    ctx = _make_ctx(InMemoryRecordStore())
    assert not ctx.identity({"uid": "u", "email": "e", "id_token": "t"}).capability.can_edit


def _make_export_ctx(store):
    ctx = _make_ctx(store)
    ctx.export_service = ExportService(datasets=ctx.datasets)
    return ctx


def test_csv_download_of_filtered_records():
    ctx = _make_export_ctx(InMemoryRecordStore({"data": {"data": [{"a": "x"}, {"a": "y"}]}}))

    download, error = build_csv_download(ctx, "vehicles", Query(term="y"))

    assert error is None
    assert download["filename"].startswith("vehicles_")
    text = base64.b64decode(download["content"]).decode("utf-8-sig")
    assert text.splitlines() == ["a", "y"]


def test_csv_download_reports_load_failure():
    download, error = build_csv_download(_make_export_ctx(_DownStore()), "vehicles", Query())

    assert download is None
    assert error == LOAD_ERROR_MESSAGE
