"""Result envelope and response views."""

from __future__ import annotations

from skin_lens.schema import AnalysisMode, CategoryScores, NormalizedAnalysis, Recommendation

# Categorised view returned by the HTTP endpoints, group -> attribute ids.
CATEGORY_VIEW: dict[str, tuple[str, ...]] = {
    "eyelids": ("left_eyelids", "right_eyelids"),
    "eyeArea": ("eye_pouch", "dark_circle"),
    "wrinkles": ("wrinkle", "forehead_wrinkle", "crows_feet", "eye_finelines", "glabella_wrinkle", "nasolabial_fold"),
    "pores": ("pores_forehead", "pores_left_cheek", "pores_right_cheek", "pores_jaw"),
    "skinIssues": ("blackhead", "acne", "mole", "stain"),
}


def envelope(
    mode: AnalysisMode,
    normalized: NormalizedAnalysis,
    health: int,
    categories: CategoryScores,
    recommendations: list[Recommendation],
) -> NormalizedAnalysis:
    """Combine normalized readings and derived results into one new envelope."""
    if normalized.mode != mode:
        raise ValueError(f"Normalized analysis is {normalized.mode!r}, expected {mode!r}")
    return normalized.model_copy(
        deep=True,
        update={
            "health_score": health,
            "category_scores": categories.model_copy(),
            "recommendations": [item.model_copy() for item in recommendations],
        },
    )


def reading_view(analysis: NormalizedAnalysis, attribute_id: str) -> dict | None:
    reading = analysis.attributes.get(attribute_id)
    if reading is None:
        return None
    return {"value": reading.value, "confidence": reading.confidence}


def categorized_view(analysis: NormalizedAnalysis) -> dict:
    """Group readings the way the result pages display them."""
    view: dict = {}
    for group, attribute_ids in CATEGORY_VIEW.items():
        view[group] = {
            attribute_id: reading_view(analysis, attribute_id)
            for attribute_id in attribute_ids
            if attribute_id in analysis.attributes
        }
    view["skinType"] = reading_view(analysis, "skin_type")
    return view


def to_json(analysis: NormalizedAnalysis) -> str:
    return analysis.model_dump_json()
