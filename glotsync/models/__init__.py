"""Data models for the localization lanes."""

from .strings_file import StringsEntry, StringsFile
from .locales import Locale, LocaleTable, ManualStringsSource, ManualStringsTable
from .variants import MetadataField, MetadataLayout, ProductVariant, UploadParameters, build_metadata_fields

__all__ = [
    "StringsEntry",
    "StringsFile",
    "Locale",
    "LocaleTable",
    "ManualStringsSource",
    "ManualStringsTable",
    "MetadataField",
    "MetadataLayout",
    "ProductVariant",
    "UploadParameters",
    "build_metadata_fields",
]
