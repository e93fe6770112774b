"""Synchronization with the GlotPress translation platform."""

from .sync import TranslationSync, DownloadedLocale
from .progress import check_translation_progress, LocaleProgress, ProgressReport

__all__ = [
    "TranslationSync",
    "DownloadedLocale",
    "check_translation_progress",
    "LocaleProgress",
    "ProgressReport",
]
