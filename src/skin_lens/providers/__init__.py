"""Providers for skin-lens."""

from skin_lens.providers.base import BaseProvider
from skin_lens.providers.faceplusplus import FacePlusPlusProvider

__all__ = ["BaseProvider", "FacePlusPlusProvider"]
