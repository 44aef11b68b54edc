import math

import pytest

from tapguard.core.exceptions import InvalidTargetError, SnapshotError
from tapguard.core.schemas import (
    CoordinatesTarget,
    ElementNode,
    Frame,
    IdentifierTarget,
    LabelTarget,
    NotHittableReason,
    PredicateTarget,
    TARGET_KINDS,
    Target,
    TextTarget,
    TypeTarget,
    parse_coordinates,
    parse_target,
)


def test_frame_geometry():
    frame = Frame(10, 20, 30, 40)
    assert frame.area == 1200
    assert frame.center == (25, 40)
    assert frame.contains_point(10, 20)
    assert frame.contains_point(40, 60)
    assert not frame.contains_point(40.1, 60)
    assert Frame(0, 0, 0, 10).is_zero_size
    assert not frame.is_zero_size


def test_frame_viewport_intersection():
    assert Frame(0, 0, 10, 10).intersects_viewport(430, 932)
    assert Frame(-10, -10, 10, 10).intersects_viewport(430, 932)
    assert not Frame(-11, 0, 10, 10).intersects_viewport(430, 932)
    assert not Frame(431, 0, 10, 10).intersects_viewport(430, 932)
    assert not Frame(0, 933, 10, 10).intersects_viewport(430, 932)


def test_frame_rejects_non_numeric_values():
    with pytest.raises(SnapshotError):
        Frame.from_dict({"x": "left"})
    with pytest.raises(SnapshotError):
        Frame.from_dict([1, 2, 3, 4])
    assert Frame.from_dict(None) == Frame()


def test_element_from_inspector_json():
    element = ElementNode.from_dict(
        {
            "type": "textField",
            "identifier": "email",
            "placeholderValue": "Email",
            "frame": {"x": 1, "y": 2, "width": 3, "height": 4},
            "isEnabled": False,
            "isHittable": False,
            "traits": ["button"],
            "children": [{"type": "staticText", "label": "Email"}],
        }
    )
    assert element.placeholder == "Email"
    assert element.frame == Frame(1, 2, 3, 4)
    assert not element.is_enabled
    assert not element.is_hittable
    assert element.is_visible
    assert element.exists
    assert element.children[0].label == "Email"

    data = element.to_dict()
    assert data["placeholderValue"] == "Email"
    assert data["isEnabled"] is False
    assert "children" not in data
    assert element.to_dict(include_children=True)["children"][0]["type"] == "staticText"


@pytest.mark.parametrize("data", [None, "button", {"label": "no type"}, {"type": "x", "children": "nope"}])
def test_element_from_malformed_json(data):
    with pytest.raises(SnapshotError):
        ElementNode.from_dict(data)


def test_elements_compare_by_identity():
    assert ElementNode(type="button") != ElementNode(type="button")


def test_target_from_dict():
    assert Target.from_dict({"type": "identifier", "value": "a"}) == IdentifierTarget("a")
    assert Target.from_dict({"type": "label", "value": "A", "elementType": "button"}) == LabelTarget(
        "A", element_type="button"
    )
    assert Target.from_dict({"type": "coordinates", "value": "10, 20.5"}) == CoordinatesTarget(10, 20.5)
    assert Target.from_dict({"type": "type", "value": "cell", "index": 2}) == TypeTarget("cell", index=2)


@pytest.mark.parametrize(
    "data",
    [
        {"type": "xpath", "value": "//button"},
        {"type": "identifier", "value": 3},
        {"type": "type", "value": "cell", "index": -1},
        {"type": "type", "value": "cell", "index": True},
        {"type": "coordinates", "value": "1"},
    ],
)
def test_target_from_bad_dict(data):
    with pytest.raises(InvalidTargetError):
        Target.from_dict(data)


def test_target_to_dict():
    assert TypeTarget("cell", index=0).to_dict() == {"type": "type", "value": "cell", "index": 0}
    assert CoordinatesTarget(215, 225).to_dict() == {"type": "coordinates", "value": "215,225"}
    assert TextTarget("hi", element_type="button").to_dict() == {
        "type": "text",
        "value": "hi",
        "elementType": "button",
    }


def test_parse_coordinates():
    assert parse_coordinates("215,225") == (215.0, 225.0)
    assert parse_coordinates(" -1.5 , 2 ") == (-1.5, 2.0)
    for bad in ("a,b", "1,2,3", "", "nan,1", "1,inf"):
        with pytest.raises(InvalidTargetError):
            parse_coordinates(bad)
    assert math.isfinite(parse_coordinates("0,0")[0])


def test_parse_target_shorthand():
    assert parse_target("#login-button") == IdentifierTarget("login-button")
    assert parse_target("identifier:login") == IdentifierTarget("login")
    assert parse_target("Label:Log In") == LabelTarget("Log In")
    assert parse_target('predicate:label CONTAINS "log"') == PredicateTarget('label CONTAINS "log"')
    assert parse_target("type:button[2]") == TypeTarget("button", index=2)
    assert parse_target("type:button") == TypeTarget("button")
    assert parse_target("coordinates:1,2") == CoordinatesTarget(1, 2)
    with pytest.raises(InvalidTargetError):
        parse_target("login-button")


def test_reason_renders_as_value():
    assert str(NotHittableReason.OFF_SCREEN) == "off_screen"
    assert len(NotHittableReason) == 7


def test_unknown_target_kind_lists_the_supported_ones():
    with pytest.raises(InvalidTargetError) as excinfo:
        parse_target("xpath://button")
    message = str(excinfo.value)
    assert "Unknown target type: xpath" in message
    for kind in TARGET_KINDS:
        assert kind in message
