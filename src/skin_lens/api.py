"""HTTP API exposing basic and advanced skin analysis.

Run locally:
  uvicorn skin_lens.api:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from skin_lens import __version__
from skin_lens.analysis_logging import AnalysisLogger, AnalysisLoggingConfig
from skin_lens.config import Settings
from skin_lens.core import _select_provider, build_analysis
from skin_lens.envelope import categorized_view
from skin_lens.exceptions import (
    SkinLensError,
    TransportError,
    UpstreamError,
    ValidationError,
)
from skin_lens.images import normalize_mime
from skin_lens.normalization import to_number
from skin_lens.providers.base import BaseProvider
from skin_lens.schema import AnalysisMode, NormalizedAnalysis

SETTINGS = Settings.from_env()
ANALYSIS_LOGGER = AnalysisLogger(AnalysisLoggingConfig.from_settings(SETTINGS))
TRANSPORT_ERROR_MESSAGE = "Could not reach the vision API. Please try again."
INTERNAL_ERROR_MESSAGE = "Internal server error during image analysis"

app = FastAPI(title="skin-lens API", version=__version__)
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AttributeValue(BaseModel):
    value: float
    confidence: float | None = None


class SkinAnalyzeResponse(BaseModel):
    result: dict[str, AttributeValue]
    skinAnalysis: dict
    warning: list[str] = Field(default_factory=list)
    quality_tips: list[str] = Field(default_factory=list)
    analysis: NormalizedAnalysis


class AnalyzeResponse(BaseModel):
    result: dict[str, float]
    skinAnalysis: dict
    demographics: dict = Field(default_factory=dict)
    emotion: dict = Field(default_factory=dict)
    beauty: dict = Field(default_factory=dict)
    skinConfidence: dict[str, float | None] = Field(default_factory=dict)
    emotionConfidence: dict[str, float] = Field(default_factory=dict)
    smile: dict = Field(default_factory=dict)
    blur: dict = Field(default_factory=dict)
    eyestatus: dict = Field(default_factory=dict)
    facequality: dict = Field(default_factory=dict)
    mouthstatus: dict = Field(default_factory=dict)
    eyegaze: dict = Field(default_factory=dict)
    headpose: dict = Field(default_factory=dict)
    warning: list[str] = Field(default_factory=list)
    quality_tips: list[str] = Field(default_factory=list)
    analysis: NormalizedAnalysis


def _build_provider() -> BaseProvider:
    return _select_provider(None, SETTINGS)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _emotion_confidence(emotion: dict) -> dict[str, float]:
    # Upstream emotion scores are percentages.
    scores = {
        name: to_number(value)
        for name, value in emotion.items()
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    }
    return {name: value / 100 for name, value in scores.items() if value is not None}


async def _run_analysis(image: UploadFile | None, mode: AnalysisMode) -> NormalizedAnalysis | JSONResponse:
    request_id = ANALYSIS_LOGGER.new_request_id()
    payload: bytes | None = None
    content_type: str | None = None

    try:
        if image is None:
            raise ValidationError("No image file provided")
        content_type = normalize_mime(image.content_type)
        payload = await image.read()

        provider = _build_provider()
        raw = provider.analyze(payload, content_type, mode)
        analysis = build_analysis(raw, mode)
    except ValidationError as exc:
        return _error_response(400, str(exc))
    except UpstreamError as exc:
        ANALYSIS_LOGGER.log_error(
            request_id=request_id,
            mode=mode,
            payload=payload,
            content_type=content_type,
            error_category=exc.category.value,
            error_detail=exc.detail,
        )
        return _error_response(exc.status_code, exc.user_message)
    except TransportError as exc:
        logger.warning("vision api transport failure: %s", exc)
        ANALYSIS_LOGGER.log_error(
            request_id=request_id,
            mode=mode,
            payload=payload,
            content_type=content_type,
            error_category="TransportError",
            error_detail=str(exc),
        )
        return _error_response(500, TRANSPORT_ERROR_MESSAGE)
    except SkinLensError as exc:
        logger.warning("analysis failed: %s", exc)
        return _error_response(500, INTERNAL_ERROR_MESSAGE)
    except Exception:
        logger.exception("analysis failed")
        return _error_response(500, INTERNAL_ERROR_MESSAGE)

    ANALYSIS_LOGGER.log_success(
        request_id=request_id,
        mode=mode,
        payload=payload,
        content_type=content_type,
        health_score=analysis.health_score,
        warnings=analysis.warnings,
        metadata=provider.get_analysis_metadata(),
    )
    return analysis


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_face(image: UploadFile | None = File(default=None)):
    analysis = await _run_analysis(image, "basic")
    if isinstance(analysis, JSONResponse):
        return analysis

    face = analysis.face_attributes
    return AnalyzeResponse(
        result={name: reading.value for name, reading in analysis.attributes.items()},
        skinAnalysis=categorized_view(analysis),
        demographics=analysis.demographics,
        emotion=analysis.emotion,
        beauty=analysis.beauty,
        skinConfidence={name: reading.confidence for name, reading in analysis.attributes.items()},
        emotionConfidence=_emotion_confidence(analysis.emotion),
        smile=face.get("smile", {}),
        blur=face.get("blur", {}),
        eyestatus=face.get("eyestatus", {}),
        facequality=face.get("facequality", {}),
        mouthstatus=face.get("mouthstatus", {}),
        eyegaze=face.get("eyegaze", {}),
        headpose=face.get("headpose", {}),
        warning=analysis.warnings,
        quality_tips=analysis.quality_tips,
        analysis=analysis,
    )


@app.post("/skin-analyze", response_model=SkinAnalyzeResponse)
async def analyze_skin(image: UploadFile | None = File(default=None)):
    analysis = await _run_analysis(image, "advanced")
    if isinstance(analysis, JSONResponse):
        return analysis

    return SkinAnalyzeResponse(
        result={
            name: AttributeValue(value=reading.value, confidence=reading.confidence)
            for name, reading in analysis.attributes.items()
        },
        skinAnalysis=categorized_view(analysis),
        warning=analysis.warnings,
        quality_tips=analysis.quality_tips,
        analysis=analysis,
    )
