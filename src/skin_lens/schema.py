"""Data models for skin-lens."""

from typing import Literal

from pydantic import BaseModel, Field

AnalysisMode = Literal["basic", "advanced"]
Priority = Literal["high", "medium", "low"]

AttributeId = Literal[
    "health",
    "acne",
    "stain",
    "dark_circle",
    "wrinkle",
    "eye_pouch",
    "forehead_wrinkle",
    "crows_feet",
    "eye_finelines",
    "glabella_wrinkle",
    "nasolabial_fold",
    "pores_forehead",
    "pores_left_cheek",
    "pores_right_cheek",
    "pores_jaw",
    "blackhead",
    "mole",
    "skin_type",
    "left_eyelids",
    "right_eyelids",
]

ENVELOPE_VERSION = "1"


class AttributeReading(BaseModel):
    """A single skin attribute resolved to a plain number."""

    name: AttributeId
    value: float = 0.0
    confidence: float | None = None
    resolved: bool = False


class Recommendation(BaseModel):
    """Human-readable advice produced by one recommendation rule."""

    key: str
    title: str
    description: str
    priority: Priority
    confidence: float | None = None


class CategoryScores(BaseModel):
    """Sub-scores per attribute category, each in [0, 100]."""

    eye_area: int = 100
    wrinkles: int = 100
    pores: int = 100
    skin_issues: int = 100


class NormalizedAnalysis(BaseModel):
    """Mode-tagged analysis result handed to rendering and storage."""

    version: str = ENVELOPE_VERSION
    mode: AnalysisMode
    attributes: dict[str, AttributeReading] = Field(default_factory=dict)
    health_score: int | None = None
    category_scores: CategoryScores | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    demographics: dict = Field(default_factory=dict)
    emotion: dict = Field(default_factory=dict)
    beauty: dict = Field(default_factory=dict)
    dominant_emotion: str | None = None
    face_attributes: dict = Field(default_factory=dict)
    skin_type_label: str | None = None
    eyelid_labels: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    quality_tips: list[str] = Field(default_factory=list)
