"""Ephemeral key-value storage for analysis results."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError as ModelValidationError

from skin_lens.exceptions import NoResultError
from skin_lens.schema import NormalizedAnalysis

logger = logging.getLogger(__name__)

RESULTS_KEY = "skinAnalysisResults"
MODE_KEY = "analysisType"


class KeyValueStore(Protocol):
    def put(self, key: str, value: str) -> None: ...

    def get(self, key: str) -> str | None: ...

    def clear(self) -> None: ...


class InMemoryStore:
    """Process-local store, cleared explicitly."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def clear(self) -> None:
        self._data.clear()


class ResultStore:
    """Holds the latest analysis envelope and its mode in a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def save(self, analysis: NormalizedAnalysis) -> None:
        self.store.put(RESULTS_KEY, analysis.model_dump_json())
        self.store.put(MODE_KEY, analysis.mode)

    def load(self) -> NormalizedAnalysis:
        raw = self.store.get(RESULTS_KEY)
        if raw is None:
            raise NoResultError()
        try:
            return NormalizedAnalysis.model_validate_json(raw)
        except ModelValidationError as exc:
            logger.warning("stored analysis result is unreadable, discarding it")
            self.store.clear()
            raise NoResultError() from exc

    def mode(self) -> str | None:
        return self.store.get(MODE_KEY)

    def has_result(self) -> bool:
        return self.store.get(RESULTS_KEY) is not None

    def clear(self) -> None:
        self.store.clear()
