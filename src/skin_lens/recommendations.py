"""Rule-based skincare recommendations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from skin_lens.normalization.attributes import (
    EYELID_LABELS,
    PORE_PARTS,
    SKIN_TYPE_LABELS,
    WRINKLE_PARTS,
    severity_scale,
)
from skin_lens.schema import AnalysisMode, AttributeReading, Priority, Recommendation

PRIORITY_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


@dataclass(frozen=True)
class Rule:
    """One row of the recommendation table.

    A rule applies only in the modes listed in ``priorities``. It fires when
    at least ``min_matches`` of its attributes exceed the mode's threshold on
    the 0-100 severity scale, or, for descriptive rules, when any of its
    attributes was resolved from the upstream payload. Rules with
    ``ceilings`` instead fire when a resolved goodness score falls below the
    mode's ceiling.
    """

    key: str
    attributes: tuple[str, ...]
    priorities: dict[str, Priority]
    title: str
    description: str
    thresholds: dict[str, float] | None = None
    ceilings: dict[str, float] | None = None
    min_matches: int = 1
    descriptive: bool = False


RULES: tuple[Rule, ...] = (
    Rule(
        key="health",
        attributes=("health",),
        priorities={"basic": "high"},
        ceilings={"basic": 70.0},
        title="Improve overall skin health",
        description="Use a vitamin C serum and a moisturizer with SPF to protect and repair your skin.",
    ),
    Rule(
        key="acne",
        attributes=("acne",),
        priorities={"basic": "high", "advanced": "high"},
        thresholds={"basic": 30.0, "advanced": 0.0},
        title="Treat acne",
        description=(
            "Use products with salicylic acid or benzoyl peroxide and avoid touching your face. "
            "Cleanse twice a day with a non-comedogenic cleanser."
        ),
    ),
    Rule(
        key="blackhead",
        attributes=("blackhead",),
        priorities={"advanced": "high"},
        thresholds={"advanced": 0.0},
        title="Clear blackheads",
        description="Exfoliate gently with a BHA two to three times a week and use a clay mask weekly.",
    ),
    Rule(
        key="stain",
        attributes=("stain",),
        priorities={"basic": "high", "advanced": "high"},
        thresholds={"basic": 50.0, "advanced": 0.0},
        title="Fade skin spots",
        description=(
            "Use vitamin C, niacinamide or alpha arbutin to brighten spots, "
            "and apply SPF 30+ sunscreen every day to prevent new ones."
        ),
    ),
    Rule(
        key="eye_pouch",
        attributes=("eye_pouch",),
        priorities={"advanced": "medium"},
        thresholds={"advanced": 0.0},
        title="Reduce eye bags",
        description="Use a cold compress in the morning and an eye cream with caffeine. Limit salt before bed.",
    ),
    Rule(
        key="dark_circle",
        attributes=("dark_circle",),
        priorities={"basic": "high", "advanced": "medium"},
        thresholds={"basic": 30.0, "advanced": 0.0},
        title="Lighten dark circles",
        description="Use an eye cream with caffeine or retinol and get 7-8 hours of sleep a night.",
    ),
    Rule(
        key="wrinkle",
        attributes=("wrinkle", *WRINKLE_PARTS),
        priorities={"basic": "medium", "advanced": "medium"},
        thresholds={"basic": 25.0, "advanced": 0.0},
        title="Prevent wrinkles",
        description="Use a retinol or peptide serum to support collagen and protect your face from UV.",
    ),
    Rule(
        key="pores",
        attributes=PORE_PARTS,
        priorities={"advanced": "medium"},
        thresholds={"advanced": 0.0},
        min_matches=2,
        title="Refine enlarged pores",
        description="Use a niacinamide serum and a gentle BHA exfoliant, and keep your skin clean and oil-balanced.",
    ),
    Rule(
        key="skin_type",
        attributes=("skin_type",),
        priorities={"advanced": "low"},
        descriptive=True,
        title="Skin type: {label}",
        description="{advice}",
    ),
    Rule(
        key="mole",
        attributes=("mole",),
        priorities={"advanced": "low"},
        thresholds={"advanced": 0.0},
        title="Monitor moles",
        description="Check moles regularly for changes in size, shape or color and see a dermatologist if they change.",
    ),
    Rule(
        key="eyelids",
        attributes=("left_eyelids", "right_eyelids"),
        priorities={"advanced": "low"},
        descriptive=True,
        title="Eyelid type: {label}",
        description="Eyelid shape is a natural trait, not a skin issue. Use a gentle remover for eye makeup.",
    ),
)

ALWAYS_ON: tuple[Recommendation, ...] = (
    Recommendation(
        key="routine",
        title="Daily skincare routine",
        description="Cleanse twice a day, apply sunscreen every morning and moisturizer every night.",
        priority="low",
    ),
    Recommendation(
        key="hydration",
        title="Hydrate from within",
        description="Drink at least 8 glasses of water a day to keep your skin hydrated.",
        priority="low",
    ),
)

SKIN_TYPE_ADVICE: dict[int, str] = {
    0: "Oily skin: use a lightweight, oil-free moisturizer and a gentle foaming cleanser.",
    1: "Dry skin: use a rich moisturizer with ceramides and avoid hot water when cleansing.",
    2: "Normal skin: keep a balanced routine with a gentle cleanser, moisturizer and sunscreen.",
    3: "Combination skin: use a light moisturizer overall and oil control on the T-zone.",
}


def _max_confidence(readings: list[AttributeReading]) -> float | None:
    confidences = [reading.confidence for reading in readings if reading.confidence is not None]
    return max(confidences) if confidences else None


def _triggering(rule: Rule, attributes: Mapping[str, AttributeReading], mode: AnalysisMode) -> list[AttributeReading]:
    readings = [attributes[key] for key in rule.attributes if key in attributes]
    if rule.descriptive:
        return [reading for reading in readings if reading.resolved]
    if rule.ceilings is not None:
        ceiling = rule.ceilings.get(mode)
        return [
            reading
            for reading in readings
            if reading.resolved and ceiling is not None and reading.value < ceiling
        ]

    threshold = (rule.thresholds or {}).get(mode, 0.0)
    matched: list[AttributeReading] = []
    for reading in readings:
        scale = severity_scale(reading.name, mode)
        if scale is not None and reading.value * scale > threshold:
            matched.append(reading)
    return matched


def _render(rule: Rule, matched: list[AttributeReading], mode: AnalysisMode) -> Recommendation:
    title, description = rule.title, rule.description
    if rule.key == "skin_type":
        code = int(matched[0].value)
        title = title.format(label=SKIN_TYPE_LABELS.get(code, "Unknown"))
        description = description.format(advice=SKIN_TYPE_ADVICE.get(code, "Keep a gentle, consistent routine."))
    elif rule.key == "eyelids":
        title = title.format(label=EYELID_LABELS.get(int(matched[0].value), "Unknown"))
    return Recommendation(
        key=rule.key,
        title=title,
        description=description,
        priority=rule.priorities[mode],
        confidence=_max_confidence(matched),
    )


def recommend(attributes: Mapping[str, AttributeReading], mode: AnalysisMode) -> list[Recommendation]:
    """Evaluate every rule and return matches ordered high, medium, low.

    Ties keep the fixed rule order; the always-on routine and hydration
    entries come last.
    """
    fired: list[Recommendation] = []
    for rule in RULES:
        if mode not in rule.priorities:
            continue
        matched = _triggering(rule, attributes, mode)
        if len(matched) >= rule.min_matches:
            fired.append(_render(rule, matched, mode))

    fired.sort(key=lambda item: PRIORITY_ORDER[item.priority])
    return fired + [item.model_copy() for item in ALWAYS_ON]
