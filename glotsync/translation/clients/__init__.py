"""Translation platform clients."""

from .glotpress_client import GlotPressClient

__all__ = ["GlotPressClient"]
