import json

import pytest

from tapguard.core.exceptions import SnapshotError
from tapguard.observer.snapshot import load_snapshot, parse_snapshot


def _tree():
    return {
        "type": "application",
        "frame": {"x": 0, "y": 0, "width": 430, "height": 932},
        "children": [{"type": "button", "identifier": "ok", "label": "OK"}],
    }


def test_bare_tree():
    root = parse_snapshot(_tree())
    assert root.type == "application"
    assert root.children[0].identifier == "ok"


def test_inspector_envelope():
    root = parse_snapshot({"success": True, "rootElement": _tree(), "elementCount": 2})
    assert root.children[0].label == "OK"


def test_inspector_failure_is_reported():
    with pytest.raises(SnapshotError, match="no simulator"):
        parse_snapshot({"success": False, "rootElement": None, "error": "no simulator"})
    with pytest.raises(SnapshotError):
        parse_snapshot({"success": True, "rootElement": None})


def test_malformed_tree_names_its_source():
    with pytest.raises(SnapshotError) as excinfo:
        parse_snapshot({"children": []}, source="bad.json")
    assert excinfo.value.source == "bad.json"
    assert "bad.json" in str(excinfo.value)


def test_load_from_file(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(_tree()), encoding="utf-8")
    assert load_snapshot(path).children[0].identifier == "ok"


def test_load_missing_or_invalid_file(tmp_path):
    with pytest.raises(SnapshotError):
        load_snapshot(tmp_path / "missing.json")

    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError, match="not valid JSON"):
        load_snapshot(path)


def test_deep_tree_parses_without_recursion():
    data = {"type": "button", "identifier": "leaf"}
    for depth in range(5000):
        data = {"type": "other", "identifier": f"level-{depth}", "children": [data]}
    root = parse_snapshot(data)

    node = root
    while node.children:
        node = node.children[0]
    assert node.identifier == "leaf"
    assert root.to_dict(include_children=True)["children"][0]["identifier"] == "level-4998"


def test_load_too_deep_file(tmp_path):
    path = tmp_path / "deep.json"
    depth = 100000
    path.write_text('{"type": "other", "children": [' * depth + '{"type": "button"}' + "]}" * depth)
    with pytest.raises(SnapshotError, match="nested too deeply"):
        load_snapshot(path)
