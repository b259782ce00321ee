"""Attribute table: upstream names, per-mode encoding, severity scale and category."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from skin_lens.schema import AnalysisMode, AttributeId

Kind = Literal["score", "flag", "composite", "categorical"]
Category = Literal["eye_area", "wrinkles", "pores", "skin_issues"]

CATEGORIES: tuple[Category, ...] = ("eye_area", "wrinkles", "pores", "skin_issues")


@dataclass(frozen=True)
class AttributeSpec:
    """How one attribute is read and weighed.

    ``kinds`` lists the modes that are expected to supply the attribute and
    how the value is encoded there. ``scales`` lists the modes in which the
    attribute is an issue attribute, with the factor that maps its raw value
    onto a 0-100 severity (1 for upstream 0-100 scores, 100 for 0/1 values).
    """

    id: AttributeId
    aliases: tuple[str, ...]
    kinds: dict[str, Kind]
    scales: dict[str, float] = field(default_factory=dict)
    category: Category | None = None


def _advanced_flag(attribute_id: AttributeId, category: Category) -> AttributeSpec:
    return AttributeSpec(
        id=attribute_id,
        aliases=(attribute_id,),
        kinds={"advanced": "flag"},
        scales={"advanced": 100.0},
        category=category,
    )


WRINKLE_PARTS: tuple[AttributeId, ...] = (
    "forehead_wrinkle",
    "crows_feet",
    "eye_finelines",
    "glabella_wrinkle",
    "nasolabial_fold",
)
PORE_PARTS: tuple[AttributeId, ...] = (
    "pores_forehead",
    "pores_left_cheek",
    "pores_right_cheek",
    "pores_jaw",
)

ATTRIBUTES: tuple[AttributeSpec, ...] = (
    # Upstream goodness score, shown but never aggregated.
    AttributeSpec(id="health", aliases=("health",), kinds={"basic": "score"}),
    AttributeSpec(
        id="acne",
        aliases=("acne",),
        kinds={"basic": "score", "advanced": "score"},
        scales={"basic": 1.0, "advanced": 100.0},
        category="skin_issues",
    ),
    AttributeSpec(
        id="stain",
        aliases=("stain", "skin_spot"),
        kinds={"basic": "score", "advanced": "score"},
        scales={"basic": 1.0, "advanced": 100.0},
        category="skin_issues",
    ),
    AttributeSpec(
        id="dark_circle",
        aliases=("dark_circle",),
        kinds={"basic": "score", "advanced": "flag"},
        scales={"basic": 1.0, "advanced": 100.0},
        category="eye_area",
    ),
    AttributeSpec(
        id="wrinkle",
        aliases=("wrinkle",),
        kinds={"basic": "composite"},
        scales={"basic": 1.0},
        category="wrinkles",
    ),
    _advanced_flag("eye_pouch", "eye_area"),
    *(_advanced_flag(part, "wrinkles") for part in WRINKLE_PARTS),
    *(_advanced_flag(part, "pores") for part in PORE_PARTS),
    _advanced_flag("blackhead", "skin_issues"),
    AttributeSpec(
        id="mole",
        aliases=("mole",),
        kinds={"advanced": "score"},
        scales={"advanced": 100.0},
        category="skin_issues",
    ),
    AttributeSpec(id="skin_type", aliases=("skin_type",), kinds={"advanced": "categorical"}),
    AttributeSpec(id="left_eyelids", aliases=("left_eyelids",), kinds={"advanced": "categorical"}),
    AttributeSpec(id="right_eyelids", aliases=("right_eyelids",), kinds={"advanced": "categorical"}),
)

ATTRIBUTES_BY_ID: dict[str, AttributeSpec] = {spec.id: spec for spec in ATTRIBUTES}

SKIN_TYPE_LABELS: dict[int, str] = {
    0: "Oily",
    1: "Dry",
    2: "Normal",
    3: "Combination",
}

EYELID_LABELS: dict[int, str] = {
    0: "Single-fold",
    1: "Parallel double-fold",
    2: "Scattered double-fold",
}


def expected_attributes(mode: AnalysisMode) -> tuple[AttributeSpec, ...]:
    return tuple(spec for spec in ATTRIBUTES if mode in spec.kinds)


def issue_attributes(mode: AnalysisMode) -> tuple[AttributeId, ...]:
    return tuple(spec.id for spec in ATTRIBUTES if mode in spec.scales)


def category_attributes(category: Category, mode: AnalysisMode) -> tuple[AttributeId, ...]:
    return tuple(
        spec.id for spec in ATTRIBUTES if spec.category == category and mode in spec.scales
    )


def severity_scale(attribute_id: str, mode: AnalysisMode) -> float | None:
    """Factor mapping a raw value to 0-100 severity, or None for non-issue attributes."""
    spec = ATTRIBUTES_BY_ID.get(attribute_id)
    if spec is None:
        return None
    return spec.scales.get(mode)
