from fleet_browser.core.geo import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    build_map_frame,
    map_points,
    map_zoom,
)


def _make_records():
    return [
        {"רוחב": "32.0", "אורך": "34.8", "שם": "a"},
        {"רוחב": 31.5, "אורך": 35.0, "שם": "b"},
        {"רוחב": "", "אורך": "34.8", "שם": "missing"},
        {"רוחב": "abc", "אורך": "34.8", "שם": "bad"},
        {"רוחב": "95", "אורך": "34.8", "שם": "out of range"},
        {"רוחב": "32.06", "אורך": "34.7", "שם": "placeholder"},
        {"רוחב": "31.9", "אורך": "34.9", "מקור": "אורך", "שם": "header row"},
    ]


def test_map_points_keeps_valid_coordinates_only():
    points = map_points(
        _make_records(),
        exclude={"מקור": ["אורך"], "רוחב": ["32.06"]},
        label_fields=["שם"],
    )

    assert list(points.columns) == ["lat", "lon", "שם"]
    assert list(points["שם"]) == ["a", "b"]
    assert list(points["lat"]) == [32.0, 31.5]


def test_empty_map_uses_defaults():
    frame = build_map_frame([])

    assert frame.points.empty
    assert frame.center == DEFAULT_CENTER
    assert frame.zoom == DEFAULT_ZOOM


def test_map_center_is_mean_of_points():
    frame = build_map_frame([{"רוחב": 30, "אורך": 34}, {"רוחב": 32, "אורך": 36}])
    assert frame.center == (31.0, 35.0)


def test_map_zoom_steps_by_spread():
    def zoom_for(spread):
        return map_zoom(map_points([{"רוחב": 31, "אורך": 34}, {"רוחב": 31 + spread, "אורך": 34}]))

    assert zoom_for(3) == 7
    assert zoom_for(1.5) == 8
    assert zoom_for(0.75) == 9
    assert zoom_for(0.3) == 10
    assert zoom_for(0.01) == 11
