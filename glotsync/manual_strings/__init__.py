"""Merging and splitting of manually-maintained .strings files."""

from .merger import ManualStringsMerger, MergeReport
from .splitter import ManualStringsSplitter

__all__ = ["ManualStringsMerger", "MergeReport", "ManualStringsSplitter"]
