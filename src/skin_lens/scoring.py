"""Health and category score aggregation."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from skin_lens.normalization.attributes import CATEGORIES, category_attributes, issue_attributes, severity_scale
from skin_lens.schema import AnalysisMode, AttributeReading, CategoryScores

NEUTRAL_SCORE = 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def aggregate_category(
    attributes: Mapping[str, AttributeReading],
    attribute_ids: Iterable[str],
    mode: AnalysisMode,
) -> int:
    """Invert the mean severity of ``attribute_ids`` into a 0-100 score.

    Each value is mapped onto 0-100 severity with the fixed per-attribute
    scale for ``mode`` and bounded to that range. Attributes that are not
    issue attributes in ``mode`` or not present in ``attributes`` do not
    contribute. With no contributing attribute the score is neutral (100).
    """
    severities: list[float] = []
    for attribute_id in attribute_ids:
        reading = attributes.get(attribute_id)
        scale = severity_scale(attribute_id, mode)
        if reading is None or scale is None or math.isnan(reading.value):
            continue
        severities.append(min(max(reading.value * scale, 0.0), 100.0))

    if not severities:
        return NEUTRAL_SCORE
    score = 100 - sum(severities) / len(severities)
    return max(0, min(100, _round_half_up(score)))


def aggregate_health(attributes: Mapping[str, AttributeReading], mode: AnalysisMode) -> int:
    return aggregate_category(attributes, issue_attributes(mode), mode)


def category_scores(attributes: Mapping[str, AttributeReading], mode: AnalysisMode) -> CategoryScores:
    return CategoryScores(
        **{
            category: aggregate_category(attributes, category_attributes(category, mode), mode)
            for category in CATEGORIES
        }
    )
