"""Product variants and the App Store metadata they publish."""

import os
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class MetadataField:
    """One piece of App Store listing text, read from a single source file."""

    key: str  # msgctxt in AppStoreStrings.po
    path: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class MetadataLayout:
    """Which listing fields a variant publishes and how they are keyed."""

    screenshot_key_template: str = "app_store_screenshot-{index}"
    screenshot_count: int = 0
    whats_new_count: int = 0
    include_name: bool = True


@dataclass(frozen=True)
class ProductVariant:
    """
    One branded app sharing the localization lanes.

    Paths are relative to the project root.
    """

    name: str  # "wordpress" or "jetpack", also passed to download_metadata.swift
    display_name: str
    app_identifier: str
    release_notes_path: str
    source_metadata_dir: str
    po_file_path: str
    metadata_project_url: str
    metadata_dir: str
    screenshots_dir: str
    layout: MetadataLayout = MetadataLayout()


@dataclass(frozen=True)
class UploadParameters:
    """Parameters handed to `fastlane deliver`."""

    app_version: str
    app_identifier: str = ""
    metadata_path: str = ""
    screenshots_path: str = ""
    skip_screenshots: bool = True
    skip_binary_upload: bool = True
    overwrite_screenshots: bool = True
    phased_release: bool = True
    precheck_include_in_app_purchases: bool = False
    api_key_path: Optional[str] = None
    app_rating_config_path: Optional[str] = None

    def for_variant(
        self,
        variant: ProductVariant,
        metadata_path: str,
        screenshots_path: str,
        with_screenshots: bool = False,
    ) -> "UploadParameters":
        """Combine the common parameters with one variant's identity and paths."""
        return replace(
            self,
            app_identifier=variant.app_identifier,
            metadata_path=metadata_path,
            screenshots_path=screenshots_path,
            skip_screenshots=not with_screenshots,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty parameters, in declaration order."""
        return {key: value for key, value in asdict(self).items() if value not in (None, "")}


def build_metadata_fields(variant: ProductVariant, root: str = "") -> List[MetadataField]:
    """
    Build the field-key -> source-file layout of a variant.

    Args:
        variant: The product variant
        root: Optional prefix joined in front of every path

    Returns:
        Fields in the order they are written to the .po file
    """
    def source(filename: str) -> str:
        return os.path.join(root, variant.source_metadata_dir, filename)

    layout = variant.layout
    fields = [
        MetadataField("whats_new", os.path.join(root, variant.release_notes_path), "Release notes"),
    ]
    if layout.include_name:
        fields.append(MetadataField("app_store_name", source("name.txt"), "App Store name. Limit to 30 characters."))
    fields.extend([
        MetadataField("app_store_subtitle", source("subtitle.txt"), "App Store subtitle. Limit to 30 characters."),
        MetadataField("app_store_desc", source("description.txt"), "App Store description. Limit to 4000 characters."),
        MetadataField(
            "app_store_keywords",
            source("keywords.txt"),
            "App Store keywords, comma separated. Limit to 100 characters including commas.",
        ),
    ])
    for index in range(1, layout.whats_new_count + 1):
        fields.append(MetadataField(f"standard-whats-new-{index}", source(f"standard_whats_new_{index}.txt")))
    for index in range(1, layout.screenshot_count + 1):
        fields.append(MetadataField(
            layout.screenshot_key_template.format(index=index),
            source(f"promo_screenshot_{index}.txt"),
            "Screenshot caption",
        ))
    return fields
