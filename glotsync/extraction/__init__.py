"""String extraction and .strings file handling modules."""

from .strings_parser import StringsParser
from .strings_writer import StringsWriter
from .source_scanner import StringExtractor, ExtractionResult, SkippedCallSite

__all__ = ["StringsParser", "StringsWriter", "StringExtractor", "ExtractionResult", "SkippedCallSite"]
