"""Page-level analysis controller."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from skin_lens.exceptions import SkinLensError
from skin_lens.schema import AnalysisMode, NormalizedAnalysis
from skin_lens.storage import KeyValueStore, ResultStore

logger = logging.getLogger(__name__)

Analyzer = Callable[[bytes, str | None, AnalysisMode], NormalizedAnalysis]


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    # Idle with a stored result / idle with an error message.
    SUCCESS = "success"
    FAILURE = "failure"


class AnalysisSession:
    """Sequences one analysis at a time and keeps its result in ``store``.

    Every outcome fully replaces the previous one; nothing is retried.
    """

    def __init__(self, store: KeyValueStore, analyzer: Analyzer):
        self.results = ResultStore(store)
        self.analyzer = analyzer
        # A result left in the store by an earlier page is still shown.
        self.state = SessionState.SUCCESS if self.results.has_result() else SessionState.IDLE
        self.error: str | None = None

    def submit(self, image: bytes, mime: str | None, mode: AnalysisMode) -> NormalizedAnalysis | None:
        if self.state is SessionState.SUBMITTING:
            raise SkinLensError("An analysis is already in progress.")

        self.state = SessionState.SUBMITTING
        self.error = None
        self.results.clear()
        try:
            analysis = self.analyzer(image, mime, mode)
        except SkinLensError as exc:
            logger.info("analysis failed: %s", exc)
            self.state = SessionState.FAILURE
            self.error = str(exc)
            return None
        except Exception:
            self.state = SessionState.FAILURE
            self.error = "Analysis failed. Please try again."
            raise

        self.results.save(analysis)
        self.state = SessionState.SUCCESS
        return analysis

    def result(self) -> NormalizedAnalysis:
        """Return the stored result; raises NoResultError when there is none."""
        return self.results.load()

    @property
    def result_mode(self) -> str | None:
        """Mode of the stored result, read without decoding the envelope."""
        return self.results.mode()

    def reset(self) -> None:
        """New analysis / back navigation / page hide: drop everything."""
        self.results.clear()
        self.state = SessionState.IDLE
        self.error = None

    page_hide = reset
    new_analysis = reset
