"""Best-effort per-request analysis logging."""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from skin_lens.config import Settings

REQUEST_LOGGER_NAME = "skin_lens.requests"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class AnalysisLoggingConfig:
    enabled: bool = False
    logger_name: str = REQUEST_LOGGER_NAME

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisLoggingConfig":
        return cls(enabled=settings.request_log_enabled)


class AnalysisLogger:
    """Writes one JSON line per analysis request. Never raises."""

    def __init__(self, config: AnalysisLoggingConfig):
        self.config = config
        self.logger = logging.getLogger(config.logger_name)

    def new_request_id(self) -> str:
        return str(uuid.uuid4())

    def image_sha256(self, payload: bytes) -> str:
        return hashlib.sha256(payload).hexdigest()

    def log_success(
        self,
        *,
        request_id: str,
        mode: str,
        payload: bytes,
        content_type: str | None,
        health_score: int | None,
        warnings: list[str],
        metadata: dict[str, str] | None = None,
    ) -> None:
        if not self.config.enabled:
            return
        self._emit(
            {
                "request_id": request_id,
                "created_at": _utc_now_iso(),
                "mode": mode,
                "outcome": "success",
                "image_sha256": self.image_sha256(payload),
                "mime_type": content_type,
                "image_size_bytes": len(payload),
                "health_score": health_score,
                "warnings": warnings,
                "metadata": metadata or {},
            }
        )

    def log_error(
        self,
        *,
        request_id: str,
        mode: str,
        payload: bytes | None,
        content_type: str | None,
        error_category: str,
        error_detail: str | None = None,
    ) -> None:
        if not self.config.enabled:
            return
        self._emit(
            {
                "request_id": request_id,
                "created_at": _utc_now_iso(),
                "mode": mode,
                "outcome": "error",
                "image_sha256": self.image_sha256(payload) if payload else None,
                "mime_type": content_type,
                "image_size_bytes": len(payload) if payload else None,
                "error_category": error_category,
                "error_detail": (error_detail or "")[:2000] or None,
            }
        )

    def _emit(self, row: dict) -> None:
        try:
            self.logger.info(json.dumps(row, ensure_ascii=False, default=str))
        except (TypeError, ValueError):
            # Logging should never break the analysis API.
            return
