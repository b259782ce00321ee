"""Base provider interface."""

from abc import ABC, abstractmethod

from skin_lens.schema import AnalysisMode


class BaseProvider(ABC):
    """Abstract base class for vision API providers."""

    @abstractmethod
    def analyze(self, image: bytes, mime: str | None, mode: AnalysisMode) -> dict:
        """Send one image to the vision API.

        Args:
            image: Raw image bytes
            mime: Declared mime type of the image
            mode: "basic" for broad face attributes, "advanced" for skin-only detail

        Returns:
            The decoded upstream JSON payload
        """
        pass

    def get_analysis_metadata(self) -> dict[str, str]:
        """Return provider-specific request metadata."""
        return {}
