import json
from pathlib import Path

import pytest

from fleet_browser.config import load_global_config
from fleet_browser.core.exceptions import ConfigError


def _make_config_dir(tmp_path: Path, global_json=None, datasets=None) -> Path:
    # root/
    #   global.json
    #   datasets/
    #     <id>.json
    config_root = tmp_path / "config"
    datasets_dir = config_root / "datasets"
    datasets_dir.mkdir(parents=True)

    if global_json is None:
        global_json = {"ui_title": "Test Fleet"}
    (config_root / "global.json").write_text(json.dumps(global_json), encoding="utf-8")

    if datasets is None:
        datasets = {
            "vehicles": {"name": "רכבים", "path": "/data/data", "identifier_field": "רישוי"},
            "owners": {"name": "בעלים", "path": "/owner/data_owner"},
        }
    for file_id, entry in datasets.items():
        (datasets_dir / f"{file_id}.json").write_text(json.dumps(entry), encoding="utf-8")

    return config_root


def test_load_global_config_from_dir(tmp_path):
    root = _make_config_dir(tmp_path)

    config = load_global_config(root, environ={})

    assert config.ui_title == "Test Fleet"
    # files are read in name order
    assert [c.id for c in config.collections] == ["owners", "vehicles"]
    assert config.default_collection == "owners"
    assert config.collection("vehicles").identifier_field == "רישוי"
    assert config.collection("vehicles").path == "/data/data"
    assert not config.uses_firebase


def test_explicit_ids_and_defaults(tmp_path):
    root = _make_config_dir(
        tmp_path,
        global_json={"ui_title": "T", "default_collection": "cars", "snapshot_file": "snap.json"},
        datasets={"a": {"id": "cars", "path": "/cars", "map": {"exclude": {"רוחב": [32.06]}}}},
    )

    config = load_global_config(root, environ={})
    cars = config.collection("cars")

    assert config.default_collection == "cars"
    assert config.snapshot_file == (root / "snap.json").resolve()
    assert cars.name == "cars"
    assert cars.has_map
    assert cars.map_exclude == {"רוחב": ["32.06"]}
    with pytest.raises(KeyError):
        config.collection("a")


def test_environment_overrides_backend_settings(tmp_path):
    root = _make_config_dir(
        tmp_path,
        global_json={"ui_title": "T", "database_url": "https://file.example", "api_key": "file-key"},
    )

    config = load_global_config(
        root,
        environ={
            "FLEET_BROWSER_DATABASE_URL": "https://env.example",
            "FLEET_BROWSER_CREDENTIALS": "/secrets/sa.json",
        },
    )

    assert config.database_url == "https://env.example"
    assert config.api_key == "file-key"
    assert config.credentials == "/secrets/sa.json"
    assert config.uses_firebase


@pytest.mark.parametrize(
    "global_json, datasets",
    [
        ({"ui_title": "T", "default_collection": "nope"}, None),
        ({"ui_title": "T", "events_collection": "nope"}, None),
        (None, {"a": {"name": "no path"}}),
        (None, {"a": {"id": "same", "path": "/a"}, "b": {"id": "same", "path": "/b"}}),
    ],
)
def test_invalid_config_raises(tmp_path, global_json, datasets):
    root = _make_config_dir(tmp_path, global_json=global_json, datasets=datasets)
    with pytest.raises(ConfigError):
        load_global_config(root, environ={})


def test_missing_or_malformed_global_json(tmp_path):
    with pytest.raises(ConfigError):
        load_global_config(tmp_path, environ={})

    (tmp_path / "global.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_global_config(tmp_path, environ={})

    (tmp_path / "global.json").write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_global_config(tmp_path, environ={})


def test_shipped_config_loads():
    root = Path(__file__).parents[3] / "config"

    config = load_global_config(root, environ={})

    assert {"vehicles", "owners", "recruited"} <= {c.id for c in config.collections}
    assert config.default_collection == "vehicles"
    assert config.events_collection == "recruited"
    assert config.snapshot_file is not None and config.snapshot_file.is_file()
