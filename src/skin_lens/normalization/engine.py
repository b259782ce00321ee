"""Normalization engine for raw vision API payloads."""

from __future__ import annotations

import logging
import math

from skin_lens.normalization.attributes import (
    EYELID_LABELS,
    SKIN_TYPE_LABELS,
    WRINKLE_PARTS,
    AttributeSpec,
    expected_attributes,
)
from skin_lens.normalization.types import ResolvedReading
from skin_lens.schema import AnalysisMode, AttributeReading, NormalizedAnalysis

logger = logging.getLogger(__name__)

# Basic-mode face attributes passed through as-is, keyed by response name.
FACE_ATTRIBUTE_FIELDS: dict[str, str] = {
    "smile": "smiling",
    "blur": "blur",
    "eyestatus": "eyestatus",
    "facequality": "facequality",
    "mouthstatus": "mouthstatus",
    "eyegaze": "eyegaze",
    "headpose": "headpose",
}

QUALITY_TIPS: tuple[tuple[str, str], ...] = (
    ("improper_headpose", "For better results, please ensure your face is facing straight forward to the camera."),
    (
        "INVALID_IMAGE_FACE",
        "For better skin analysis results, please ensure your face is clearly visible and well-lit.",
    ),
    ("LOW_QUALITY", "Image quality could be improved for more accurate skin analysis."),
)


def to_number(raw: object) -> float | None:
    """Coerce a number or numeric string to a finite float, else None."""
    if isinstance(raw, bool):
        return float(raw)
    if not isinstance(raw, (int, float, str)):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def _confidence(raw: object) -> float | None:
    if isinstance(raw, bool):
        return None
    return to_number(raw)


def resolve_reading(raw: object, *, value_keys: tuple[str, ...] = ("value",)) -> ResolvedReading:
    """Resolve a field encoded as a number, a numeric string or a {value, confidence} object."""
    if raw is None:
        return ResolvedReading(kind="missing")

    if isinstance(raw, dict):
        for key in value_keys:
            if key in raw:
                value = to_number(raw[key])
                if value is None:
                    return ResolvedReading(kind="malformed")
                return ResolvedReading(kind="object", value=value, confidence=_confidence(raw.get("confidence")))
        return ResolvedReading(kind="malformed")

    value = to_number(raw)
    if value is None:
        return ResolvedReading(kind="malformed")
    return ResolvedReading(kind="string" if isinstance(raw, str) else "number", value=value)


def to_flag(value: float) -> float:
    """Canonical truthiness for binary attributes: any non-zero value is 1.0."""
    return 1.0 if value != 0 else 0.0


def upstream_warnings(payload: object) -> list[str]:
    """String entries of the payload's ``warning`` list; anything else is ignored."""
    warnings = payload.get("warning") if isinstance(payload, dict) else None
    if not isinstance(warnings, list):
        return []
    return [item for item in warnings if isinstance(item, str)]


def quality_tips_for(warnings: list[str]) -> list[str]:
    tips: list[str] = []
    for token, tip in QUALITY_TIPS:
        if any(token in warning for warning in warnings) and tip not in tips:
            tips.append(tip)
    return tips


def dominant_emotion(emotion: dict) -> str | None:
    scored = [(name, value) for name, value in emotion.items() if to_number(value) is not None]
    if not scored:
        return None
    return max(scored, key=lambda item: to_number(item[1]))[0]


def _dict_or_empty(value: object) -> dict:
    return dict(value) if isinstance(value, dict) else {}


def _face_attributes(payload: dict) -> dict | None:
    faces = payload.get("faces")
    if not isinstance(faces, list) or not faces or not isinstance(faces[0], dict):
        return None
    attributes = faces[0].get("attributes")
    return attributes if isinstance(attributes, dict) else {}


class NormalizationEngine:
    """Resolves every attribute a mode is expected to supply."""

    def __init__(self, mode: AnalysisMode):
        if mode not in ("basic", "advanced"):
            raise ValueError(f"Unsupported analysis mode: {mode}")
        self.mode = mode

    def normalize(self, raw: object) -> NormalizedAnalysis:
        payload = raw if isinstance(raw, dict) else {}
        face = _face_attributes(payload)
        source = self._skin_source(payload, face)

        attributes: dict[str, AttributeReading] = {}
        for spec in expected_attributes(self.mode):
            attributes[spec.id] = self._read(spec, source)

        passthrough = face if face is not None else payload
        demographics: dict = {}
        if face is not None:
            for key in ("age", "gender"):
                value = _dict_or_empty(face.get(key)).get("value")
                if value is not None:
                    demographics[key] = value
        else:
            demographics = _dict_or_empty(payload.get("demographics"))
        emotion = {
            name: value
            for name, value in _dict_or_empty(passthrough.get("emotion")).items()
            if to_number(value) is not None
        }

        face_attributes: dict = {}
        if face is not None:
            for name, upstream_name in FACE_ATTRIBUTE_FIELDS.items():
                face_attributes[name] = _dict_or_empty(face.get(upstream_name))

        warnings = upstream_warnings(payload)

        return NormalizedAnalysis(
            mode=self.mode,
            attributes=attributes,
            demographics=demographics,
            emotion=emotion,
            beauty=_dict_or_empty(passthrough.get("beauty")),
            dominant_emotion=dominant_emotion(emotion),
            face_attributes=face_attributes,
            skin_type_label=self._label(attributes.get("skin_type"), SKIN_TYPE_LABELS),
            eyelid_labels=self._eyelid_labels(attributes),
            warnings=warnings,
            quality_tips=quality_tips_for(warnings),
        )

    def _skin_source(self, payload: dict, face: dict | None) -> dict:
        if self.mode == "basic" and face is not None and isinstance(face.get("skinstatus"), dict):
            return face["skinstatus"]
        return _dict_or_empty(payload.get("result"))

    def _read(self, spec: AttributeSpec, source: dict) -> AttributeReading:
        kind = spec.kinds[self.mode]
        try:
            if kind == "composite":
                return self._read_composite(spec, source)

            raw = next((source[alias] for alias in spec.aliases if source.get(alias) is not None), None)
            value_keys = ("value", spec.id) if kind == "categorical" else ("value",)
            resolved = resolve_reading(raw, value_keys=value_keys)
            if not resolved.ok:
                if resolved.kind == "malformed":
                    logger.debug("malformed %s field ignored: %r", spec.id, raw)
                return AttributeReading(name=spec.id)

            value = resolved.value
            confidence = resolved.confidence
            if kind == "flag":
                value = to_flag(value)
            elif kind == "categorical":
                value = float(int(value))
                if confidence is None and isinstance(raw, dict):
                    detail = _dict_or_empty(_dict_or_empty(raw.get("details")).get(str(int(value))))
                    confidence = _confidence(detail.get("confidence"))
            return AttributeReading(name=spec.id, value=value, confidence=confidence, resolved=True)
        except (TypeError, ValueError, OverflowError):
            logger.debug("failed to normalize %s, using default", spec.id, exc_info=True)
            return AttributeReading(name=spec.id)

    def _read_composite(self, spec: AttributeSpec, source: dict) -> AttributeReading:
        direct = resolve_reading(source.get(spec.id))
        if direct.ok:
            return AttributeReading(name=spec.id, value=direct.value, confidence=direct.confidence, resolved=True)

        parts = [resolve_reading(source.get(part)) for part in WRINKLE_PARTS]
        parts = [part for part in parts if part.ok]
        if not parts:
            return AttributeReading(name=spec.id)

        value = sum(to_flag(part.value) for part in parts) / len(parts) * 100
        confidences = [part.confidence for part in parts if part.confidence is not None]
        confidence = sum(confidences) / len(confidences) if confidences else None
        return AttributeReading(name=spec.id, value=value, confidence=confidence, resolved=True)

    @staticmethod
    def _label(reading: AttributeReading | None, labels: dict[int, str]) -> str | None:
        if reading is None or not reading.resolved:
            return None
        return labels.get(int(reading.value), "Unknown")

    def _eyelid_labels(self, attributes: dict[str, AttributeReading]) -> dict[str, str]:
        labels: dict[str, str] = {}
        for side in ("left", "right"):
            label = self._label(attributes.get(f"{side}_eyelids"), EYELID_LABELS)
            if label is not None:
                labels[side] = label
        return labels


def normalize_analysis(raw: object, mode: AnalysisMode) -> NormalizedAnalysis:
    """Normalize a raw vision API payload for ``mode``."""

    return NormalizationEngine(mode).normalize(raw)
