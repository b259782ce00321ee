"""skin-lens: Normalize face/skin analysis results into scores and recommendations."""

from skin_lens.core import analyze, build_analysis
from skin_lens.normalization import normalize_analysis
from skin_lens.recommendations import recommend
from skin_lens.schema import AttributeReading, CategoryScores, NormalizedAnalysis, Recommendation
from skin_lens.scoring import aggregate_category, aggregate_health

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "build_analysis",
    "normalize_analysis",
    "recommend",
    "aggregate_health",
    "aggregate_category",
    "AttributeReading",
    "CategoryScores",
    "NormalizedAnalysis",
    "Recommendation",
    "__version__",
]
