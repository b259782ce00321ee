"""Tests for the normalization engine."""

import pytest

from skin_lens import normalize_analysis
from skin_lens.normalization import (
    NormalizationEngine,
    resolve_reading,
    to_flag,
    to_number,
    upstream_warnings,
)
from skin_lens.normalization.attributes import expected_attributes


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1, 1.0),
        ("1", 1.0),
        ({"value": 1, "confidence": 0.8}, 1.0),
        ({"value": "1", "confidence": 0.8}, 1.0),
        (0, 0.0),
        ("0", 0.0),
        ({"value": 0, "confidence": 0.8}, 0.0),
        ({"value": "0", "confidence": 0.8}, 0.0),
    ],
)
def test_flag_attribute_is_canonical_for_every_encoding(raw, expected):
    result = normalize_analysis({"result": {"eye_pouch": raw}}, "advanced")

    reading = result.attributes["eye_pouch"]
    assert reading.value == expected
    assert reading.resolved is True


@pytest.mark.parametrize(
    "raw",
    ["abc", {"confidence": 0.5}, {"value": "x", "confidence": 0.5}, [1, 2], float("nan"), {"value": None}, ""],
)
def test_malformed_field_degrades_to_default(raw):
    result = normalize_analysis({"result": {"eye_pouch": raw, "acne": {"value": "1", "confidence": 0.9}}}, "advanced")

    reading = result.attributes["eye_pouch"]
    assert reading.value == 0.0
    assert reading.confidence is None
    assert reading.resolved is False
    assert result.attributes["acne"].value == 1.0


@pytest.mark.parametrize("raw", [None, [], "garbage", {"result": "garbage"}, {"faces": "x"}, {"faces": [None]}])
@pytest.mark.parametrize("mode", ["basic", "advanced"])
def test_unusable_payload_yields_every_expected_attribute(raw, mode):
    result = normalize_analysis(raw, mode)

    expected_ids = [spec.id for spec in expected_attributes(mode)]
    assert list(result.attributes) == expected_ids
    assert all(reading.value == 0.0 and reading.confidence is None for reading in result.attributes.values())
    assert result.demographics == {}
    assert result.emotion == {}
    assert result.beauty == {}


def test_resolve_reading_tags_source_encoding():
    assert resolve_reading(0.4).kind == "number"
    assert resolve_reading("0.4").kind == "string"
    assert resolve_reading({"value": 0.4, "confidence": 0.7}) == resolve_reading({"value": "0.4", "confidence": 0.7})
    assert resolve_reading({"value": 0.4}).confidence is None
    assert resolve_reading(None).kind == "missing"
    assert resolve_reading({"other": 1}).kind == "malformed"


def test_to_flag_treats_any_nonzero_as_set():
    assert to_flag(2.0) == 1.0
    assert to_flag(-1.0) == 1.0
    assert to_flag(0.0) == 0.0


def test_advanced_scenario_acne_string_value():
    result = normalize_analysis({"result": {"acne": {"value": "1", "confidence": 0.9}, "skin_spot": 0}}, "advanced")

    assert result.attributes["acne"].value == 1.0
    assert result.attributes["acne"].confidence == 0.9
    assert result.attributes["stain"].value == 0.0
    assert result.attributes["stain"].resolved is True


def test_advanced_payload_normalizes_categorical_attributes(advanced_payload):
    result = normalize_analysis(advanced_payload, "advanced")

    skin_type = result.attributes["skin_type"]
    assert skin_type.value == 3.0
    assert skin_type.confidence == 0.82
    assert result.skin_type_label == "Combination"
    assert result.attributes["left_eyelids"].value == 1.0
    assert result.eyelid_labels == {"left": "Parallel double-fold", "right": "Single-fold"}
    assert result.attributes["stain"].value == 1.0
    assert result.attributes["stain"].confidence == 0.75
    assert "health" not in result.attributes


def test_skin_type_plain_value_keeps_integer_code():
    result = normalize_analysis({"result": {"skin_type": {"value": "1", "confidence": 0.6}}}, "advanced")

    assert result.attributes["skin_type"].value == 1.0
    assert result.skin_type_label == "Dry"


def test_basic_payload_reads_skinstatus_and_passthrough(basic_payload):
    result = normalize_analysis(basic_payload, "basic")

    assert result.mode == "basic"
    assert set(result.attributes) == {"health", "acne", "stain", "dark_circle", "wrinkle"}
    assert result.attributes["health"].value == 80.5
    assert result.attributes["stain"].value == 60.0
    # Basic dark_circle is a 0-100 score, not a flag.
    assert result.attributes["dark_circle"].value == 40.0
    assert result.attributes["wrinkle"].resolved is False
    assert result.demographics == {"age": 28, "gender": "Female"}
    assert result.dominant_emotion == "happiness"
    assert result.beauty["female_score"] == 72.3
    assert result.face_attributes["smile"] == {"value": 88.0, "threshold": 50.0}
    assert result.face_attributes["eyegaze"] == {}


def test_basic_wrinkle_composite_is_mean_of_flags():
    payload = {
        "result": {
            "forehead_wrinkle": {"value": "1", "confidence": 0.8},
            "crows_feet": {"value": "0", "confidence": 0.6},
            "eye_finelines": "1",
            "glabella_wrinkle": 0,
        }
    }

    result = normalize_analysis(payload, "basic")

    wrinkle = result.attributes["wrinkle"]
    assert wrinkle.value == 50.0
    assert wrinkle.confidence == pytest.approx(0.7)
    assert wrinkle.resolved is True


def test_basic_wrinkle_direct_value_wins():
    result = normalize_analysis({"result": {"wrinkle": 35, "forehead_wrinkle": "1"}}, "basic")

    assert result.attributes["wrinkle"].value == 35.0


def test_unknown_fields_are_ignored():
    result = normalize_analysis({"result": {"acne": 1, "sparkle": {"value": "1"}}}, "advanced")

    assert "sparkle" not in result.attributes
    assert result.attributes["acne"].value == 1.0


def test_warnings_become_quality_tips():
    payload = {"result": {}, "warning": ["improper_headpose", "INVALID_IMAGE_FACE_LOW_QUALITY", 3]}

    result = normalize_analysis(payload, "advanced")

    assert result.warnings == ["improper_headpose", "INVALID_IMAGE_FACE_LOW_QUALITY"]
    assert len(result.quality_tips) == 3


def test_unsupported_mode_raises():
    with pytest.raises(ValueError):
        NormalizationEngine("deluxe")


@pytest.mark.parametrize("warning", [5, {"improper_headpose": True}, "improper_headpose", None])
def test_non_list_warning_is_ignored(warning):
    result = normalize_analysis({"result": {"acne": 1}, "warning": warning}, "advanced")

    assert result.warnings == []
    assert result.quality_tips == []
    assert result.attributes["acne"].value == 1.0


def test_oversized_emotion_score_is_dropped():
    payload = {"result": {"acne": 1}, "emotion": {"happiness": 10**400, "neutral": 20.0}}

    result = normalize_analysis(payload, "advanced")

    assert result.emotion == {"neutral": 20.0}
    assert result.dominant_emotion == "neutral"
    assert result.attributes["acne"].value == 1.0


def test_oversized_attribute_value_degrades_to_default():
    result = normalize_analysis({"result": {"acne": 10**400, "mole": "1e400"}}, "advanced")

    assert result.attributes["acne"].resolved is False
    assert result.attributes["mole"].resolved is False


def test_to_number():
    assert to_number(" 2.5 ") == 2.5
    assert to_number(10**400) is None
    assert to_number(float("inf")) is None
    assert to_number([1]) is None


def test_upstream_warnings():
    assert upstream_warnings({"warning": ["LOW_QUALITY", 3, None]}) == ["LOW_QUALITY"]
    assert upstream_warnings({"warning": 5}) == []
    assert upstream_warnings("not a payload") == []
