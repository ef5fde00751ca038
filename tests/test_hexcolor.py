from __future__ import annotations

import json

import pytest

from prism_color import Color, MalformedHexError
from prism_hexcolor import YAML_TAG, HexColor, HexColorEncoder, register_yaml

CASES = [
    (HexColor(0.0, 0.0, 0.0), "#000000"),
    (HexColor(1.0, 0.0, 0.0), "#ff0000"),
    (HexColor(0.0, 1.0, 0.0), "#00ff00"),
    (HexColor(0.0, 0.0, 1.0), "#0000ff"),
    (HexColor(1.0, 1.0, 1.0), "#ffffff"),
]


@pytest.mark.parametrize("color,text", CASES, ids=[t for _, t in CASES])
def test_scan_and_value(color, text):
    assert HexColor.scan(text) == color
    assert HexColor.scan(text.encode("ascii")) == color
    assert color.value() == text
    assert str(color) == text


def test_scan_returns_hexcolor():
    assert isinstance(HexColor.scan("#f0c"), HexColor)
    assert isinstance(HexColor.scan("#f0c"), Color)


@pytest.mark.parametrize("bad", ["", "#12", "#gggggg", b"\xff\xfe", 42, None])
def test_scan_rejects_malformed(bad):
    with pytest.raises(MalformedHexError):
        HexColor.scan(bad)


def test_json_composite_roundtrip():
    obj = {"name": "John", "color": HexColor(1.0, 0.0, 1.0)}
    raw = json.dumps(obj, cls=HexColorEncoder)
    assert json.loads(raw) == {"name": "John", "color": "#ff00ff"}

    back = json.loads(raw)
    back["color"] = HexColor.scan(back["color"])
    assert back == obj


def test_json_encoder_accepts_plain_color():
    assert json.dumps([Color(0.0, 0.0, 1.0)], cls=HexColorEncoder) == '["#0000ff"]'


def test_json_encoder_still_rejects_unknown_types():
    with pytest.raises(TypeError):
        json.dumps({"x": object()}, cls=HexColorEncoder)


@pytest.fixture()
def yaml_classes():
    yaml = pytest.importorskip("yaml")

    class Dumper(yaml.SafeDumper):
        pass

    class Loader(yaml.SafeLoader):
        pass

    register_yaml(dumper=Dumper, loader=Loader)
    return yaml, Dumper, Loader


def test_yaml_roundtrip(yaml_classes):
    yaml, Dumper, Loader = yaml_classes
    obj = HexColor(0.0, 1.0, 0.0)
    raw = yaml.dump(obj, Dumper=Dumper)
    assert raw.startswith(YAML_TAG)
    assert "#00ff00" in raw
    assert yaml.load(raw, Loader=Loader) == obj


def test_yaml_composite_roundtrip(yaml_classes):
    yaml, Dumper, Loader = yaml_classes
    obj = {"name": "John", "color": HexColor(0.0, 1.0, 0.0)}
    raw = yaml.dump(obj, Dumper=Dumper)
    assert yaml.load(raw, Loader=Loader) == obj


def test_yaml_malformed_value(yaml_classes):
    yaml, _, Loader = yaml_classes
    with pytest.raises(MalformedHexError):
        yaml.load(f"{YAML_TAG} '#nothex'", Loader=Loader)
