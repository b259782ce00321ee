"""Core analysis pipeline."""

from skin_lens.config import Settings
from skin_lens.envelope import envelope
from skin_lens.images import ImageInput, load_image
from skin_lens.normalization import normalize_analysis
from skin_lens.providers.base import BaseProvider
from skin_lens.recommendations import recommend
from skin_lens.schema import AnalysisMode, NormalizedAnalysis
from skin_lens.scoring import aggregate_health, category_scores


def _build_faceplusplus_provider(settings: Settings) -> BaseProvider:
    from skin_lens.providers.faceplusplus import FacePlusPlusProvider

    return FacePlusPlusProvider.from_settings(settings)


def _select_provider(provider: str | None, settings: Settings) -> BaseProvider:
    provider_name = (provider or settings.provider).strip().lower()
    if provider_name in {"faceplusplus", "face++", "facepp"}:
        return _build_faceplusplus_provider(settings)
    raise ValueError(f"Unsupported provider: {provider_name}")


def build_analysis(raw: object, mode: AnalysisMode) -> NormalizedAnalysis:
    """Turn a raw upstream payload into the final mode-tagged envelope."""
    normalized = normalize_analysis(raw, mode)
    return envelope(
        mode,
        normalized,
        aggregate_health(normalized.attributes, mode),
        category_scores(normalized.attributes, mode),
        recommend(normalized.attributes, mode),
    )


def analyze(
    image: ImageInput,
    mime: str | None = None,
    *,
    mode: AnalysisMode = "basic",
    provider: str | None = None,
    settings: Settings | None = None,
) -> NormalizedAnalysis:
    """Analyze a face image and return the normalized result.

    Args:
        image: Image input - raw bytes, file path (str), Path object, or PIL Image.
        mime: Declared mime type. Detected from the image bytes when omitted.
        mode: "basic" (broad face attributes) or "advanced" (skin-only detail).
        provider: Provider name. Defaults to `SKIN_LENS_PROVIDER` env var,
            then `faceplusplus`.
        settings: Settings to use. Defaults to `Settings.from_env()`.

    Returns:
        NormalizedAnalysis with readings, health score, category scores and
        recommendations.
    """
    settings = settings or Settings.from_env()
    engine = _select_provider(provider, settings)
    payload, detected_mime = load_image(image)
    raw = engine.analyze(payload, mime or detected_mime, mode)
    return build_analysis(raw, mode)


def analyze_with_metadata(
    image: ImageInput,
    mime: str | None = None,
    *,
    mode: AnalysisMode = "basic",
    provider: str | None = None,
    settings: Settings | None = None,
) -> tuple[NormalizedAnalysis, dict[str, str]]:
    """Analyze an image and return provider metadata."""

    settings = settings or Settings.from_env()
    engine = _select_provider(provider, settings)
    payload, detected_mime = load_image(image)
    raw = engine.analyze(payload, mime or detected_mime, mode)
    metadata = engine.get_analysis_metadata() or {}
    return build_analysis(raw, mode), metadata
