"""Normalization utilities for skin-lens."""

from skin_lens.normalization.engine import (
    NormalizationEngine,
    normalize_analysis,
    resolve_reading,
    to_flag,
    to_number,
    upstream_warnings,
)
from skin_lens.normalization.types import ResolvedReading

__all__ = [
    "NormalizationEngine",
    "ResolvedReading",
    "normalize_analysis",
    "resolve_reading",
    "to_flag",
    "to_number",
    "upstream_warnings",
]
