"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

MAX_IMAGE_BYTES = 2 * 1024 * 1024
DEFAULT_BASE_URL = "https://api-us.faceplusplus.com/facepp"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_float(value: str | None, default: float | None) -> float | None:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _safe_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_origins(value: str | None) -> list[str]:
    raw = value if value is not None else "*"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    api_secret: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_sec: float | None = None
    max_image_bytes: int = MAX_IMAGE_BYTES
    allow_origins: list[str] = field(default_factory=lambda: ["*"])
    request_log_enabled: bool = False
    provider: str = "faceplusplus"

    @classmethod
    def from_env(cls) -> "Settings":
        max_bytes = _safe_int(os.getenv("MAX_IMAGE_BYTES"), MAX_IMAGE_BYTES)
        return cls(
            api_key=os.getenv("FACE_API_KEY"),
            api_secret=os.getenv("FACE_API_SECRET"),
            base_url=(os.getenv("FACE_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_sec=_safe_float(os.getenv("FACE_API_TIMEOUT_SEC"), None),
            # The upstream rejects anything above 2 MiB.
            max_image_bytes=max(1, min(max_bytes, MAX_IMAGE_BYTES)),
            allow_origins=_parse_origins(os.getenv("FRONTEND_ORIGINS")),
            request_log_enabled=_parse_bool(os.getenv("SAVE_REQUEST_LOG"), False),
            provider=(os.getenv("SKIN_LENS_PROVIDER", "faceplusplus").strip().lower() or "faceplusplus"),
        )
