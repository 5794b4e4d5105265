import json

from curator.operations import version
from curator.operations.version import VersionInfo, current_version_info


def _sample():
    return VersionInfo(
        curator="abc123",
        jasper="j1",
        poplar_events="pe",
        poplar_recorder="pr",
        cedar_metrics="cm",
    )


def test_json_uses_wire_keys():
    doc = json.loads(_sample().to_json())
    assert doc == {
        "curator": "abc123",
        "jasper_proto": "j1",
        "poplar_proto_events": "pe",
        "poplar_proto_recorder": "pr",
        "cedar_metrics_proto": "cm",
    }


def test_json_key_order_follows_fields():
    doc = json.loads(_sample().to_json())
    assert list(doc) == [
        "curator",
        "jasper_proto",
        "poplar_proto_events",
        "poplar_proto_recorder",
        "cedar_metrics_proto",
    ]


def test_json_is_indented_with_three_spaces():
    lines = _sample().to_json().splitlines()
    assert lines[0] == "{"
    assert lines[1] == '   "curator": "abc123",'
    assert lines[-1] == "}"


def test_text_form():
    text = str(_sample())
    lines = text.split("\n\t")
    assert lines == [
        "Curator Version Info:",
        "Build: abc123",
        "Jasper: j1",
        "PoplarEvents: pe",
        "PoplarRecorder: pr",
        "CedarMetrics: cm",
    ]


def test_current_version_reflects_settings():
    info = current_version_info()
    assert info.curator == version.BUILD_REVISION
    assert info.jasper == version.JASPER_CHECKSUM
    assert info.cedar_metrics == version.CEDAR_METRICS_CHECKSUM


def test_current_version_json_round_trip():
    info = current_version_info()
    doc = json.loads(info.to_json())
    assert doc["curator"] == info.curator
    assert doc["poplar_proto_recorder"] == info.poplar_recorder