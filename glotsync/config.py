"""Configuration management for the localization lanes."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError
from .models.locales import LocaleTable, ManualStringsTable
from .models.variants import MetadataLayout, ProductVariant, UploadParameters

load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Paths
    project_root: str = field(default_factory=lambda: os.getenv("GLOTSYNC_PROJECT_ROOT", os.getcwd()))
    app_store_connect_key_path: str = field(
        default_factory=lambda: os.getenv("APP_STORE_CONNECT_KEY_PATH", "")
    )

    # GlotPress projects
    app_strings_url: str = field(default_factory=lambda: os.getenv(
        "GLOTPRESS_APP_STRINGS_URL", "https://translate.wordpress.org/projects/apps/ios/dev/"
    ))
    wordpress_metadata_url: str = field(default_factory=lambda: os.getenv(
        "GLOTPRESS_WORDPRESS_METADATA_URL", "https://translate.wordpress.org/projects/apps/ios/release-notes/"
    ))
    jetpack_metadata_url: str = field(default_factory=lambda: os.getenv(
        "GLOTPRESS_JETPACK_METADATA_URL", "https://translate.wordpress.com/projects/jetpack/apps/ios/release-notes/"
    ))

    # HTTP settings
    http_timeout: float = field(default_factory=lambda: float(os.getenv("GLOTSYNC_HTTP_TIMEOUT", "30")))

    # Minimum translation percentage for check-all-translations
    translation_threshold: float = field(
        default_factory=lambda: float(os.getenv("TRANSLATION_THRESHOLD", "100"))
    )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not Path(self.project_root).is_dir():
            errors.append(f"GLOTSYNC_PROJECT_ROOT is not a directory: {self.project_root}")
        for name, url in (
            ("GLOTPRESS_APP_STRINGS_URL", self.app_strings_url),
            ("GLOTPRESS_WORDPRESS_METADATA_URL", self.wordpress_metadata_url),
            ("GLOTPRESS_JETPACK_METADATA_URL", self.jetpack_metadata_url),
        ):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} is not an http(s) URL: {url}")
        return errors


# GlotPress locale code -> .lproj folder name
GLOTPRESS_TO_LPROJ_APP_LOCALE_CODES: Dict[str, str] = {
    "ar": "ar",  # Arabic
    "bg": "bg",  # Bulgarian
    "cs": "cs",  # Czech
    "cy": "cy",  # Welsh
    "da": "da",  # Danish
    "de": "de",  # German
    "en-au": "en-AU",  # English (Australia)
    "en-ca": "en-CA",  # English (Canada)
    "en-gb": "en-GB",  # English (UK)
    "es": "es",  # Spanish
    "fr": "fr",  # French
    "he": "he",  # Hebrew
    "hr": "hr",  # Croatian
    "hu": "hu",  # Hungarian
    "id": "id",  # Indonesian
    "is": "is",  # Icelandic
    "it": "it",  # Italian
    "ja": "ja",  # Japanese
    "ko": "ko",  # Korean
    "nb": "nb",  # Norwegian (Bokmål)
    "nl": "nl",  # Dutch
    "pl": "pl",  # Polish
    "pt": "pt",  # Portuguese
    "pt-br": "pt-BR",  # Portuguese (Brazil)
    "ro": "ro",  # Romanian
    "ru": "ru",  # Russian
    "sk": "sk",  # Slovak
    "sq": "sq",  # Albanian
    "sv": "sv",  # Swedish
    "th": "th",  # Thai
    "tr": "tr",  # Turkish
    "zh-cn": "zh-Hans",  # Chinese (China)
    "zh-tw": "zh-Hant",  # Chinese (Taiwan)
}

# Locales whose progress is checked before a release
MAG16_GLOTPRESS_CODES: Tuple[str, ...] = (
    "ar", "de", "es", "fr", "he", "id", "it", "ja",
    "ko", "nl", "pt-br", "ru", "sv", "tr", "zh-cn", "zh-tw",
)

# Hand-maintained .strings files merged into Localizable.strings under a key prefix
MANUALLY_MAINTAINED_STRINGS_FILES: Dict[str, str] = {
    # WordPress and Jetpack share the same InfoPlist.strings
    "WordPress/Resources/en.lproj/InfoPlist.strings": "infoplist.",
    # CFBundleDisplayName of the "Save as Draft" share action
    "WordPress/WordPressDraftActionExtension/en.lproj/InfoPlist.strings": "ios-sharesheet.",
    # Strings from the widget's .intentdefinition
    "WordPress/WordPressIntents/en.lproj/Sites.strings": "ios-widget.",
}


@dataclass(frozen=True)
class ExtractionSettings:
    """Where and how translatable strings are extracted from code."""

    paths: Tuple[str, ...] = (
        "WordPress/",
        "Pods/WordPress*/",
        "Pods/WPMediaPicker/",
        "WordPressShared/WordPressShared/",
        "Pods/Gutenberg/",
    )
    exclude: Tuple[str, ...] = (
        "*Vendor*",
        "WordPress/WordPressTest/**",
        "**/AppLocalizedString.swift",
    )
    # NSLocalizedString is what genstrings scans by default; the others add to it
    routines: Tuple[str, ...] = ("NSLocalizedString", "AppLocalizedString")
    output_dir: str = "WordPress/Resources/en.lproj"
    resources_dir: str = "WordPress/Resources"


@dataclass(frozen=True)
class PipelineSettings:
    """Immutable tables passed explicitly into each lane."""

    project_root: str
    app_strings_url: str
    locale_table: LocaleTable
    manual_strings: ManualStringsTable
    mag16: Tuple[str, ...]
    extraction: ExtractionSettings
    variants: Dict[str, ProductVariant]
    app_store_connect_key_path: str = ""
    version_config_path: str = "config/Version.public.xcconfig"
    rating_config_path: str = "fastlane/metadata/ratings_config.json"

    def variant(self, name: str) -> ProductVariant:
        if name not in self.variants:
            raise ConfigurationError(
                f"Unknown product variant '{name}', expected one of: {', '.join(self.variants)}"
            )
        return self.variants[name]

    def common_upload_parameters(self) -> UploadParameters:
        """Deliver parameters shared by every variant."""
        return UploadParameters(
            app_version=read_version_from_config(os.path.join(self.project_root, self.version_config_path)),
            api_key_path=self.app_store_connect_key_path or None,
            app_rating_config_path=os.path.join(self.project_root, self.rating_config_path),
        )


def build_variants(config: Config) -> Dict[str, ProductVariant]:
    """The two product variants sharing the metadata lanes."""
    return {
        "wordpress": ProductVariant(
            name="wordpress",
            display_name="WordPress",
            app_identifier="org.wordpress",
            release_notes_path="WordPress/Resources/release_notes.txt",
            source_metadata_dir="fastlane/appstoreres/metadata/source",
            po_file_path="WordPress/Resources/AppStoreStrings.po",
            metadata_project_url=config.wordpress_metadata_url,
            metadata_dir="fastlane/metadata",
            screenshots_dir="fastlane/promo-screenshots",
            layout=MetadataLayout(
                screenshot_key_template="app_store_screenshot-{index}",
                screenshot_count=7,
                whats_new_count=4,
            ),
        ),
        "jetpack": ProductVariant(
            name="jetpack",
            display_name="Jetpack",
            app_identifier="com.automattic.jetpack",
            release_notes_path="WordPress/Jetpack/Resources/release_notes.txt",
            source_metadata_dir="fastlane/appstoreres/jetpack_metadata/source",
            po_file_path="WordPress/Jetpack/Resources/AppStoreStrings.po",
            metadata_project_url=config.jetpack_metadata_url,
            metadata_dir="fastlane/jetpack_metadata",
            screenshots_dir="fastlane/jetpack_promo_screenshots",
            layout=MetadataLayout(
                screenshot_key_template="screenshot-text-{index}",
                screenshot_count=6,
            ),
        ),
    }


def build_pipeline_settings(config: Config) -> PipelineSettings:
    """Build the lane settings from a Config, validating the tables."""
    manual_strings = ManualStringsTable.from_mapping(MANUALLY_MAINTAINED_STRINGS_FILES)
    manual_strings.validate()
    return PipelineSettings(
        project_root=config.project_root,
        app_strings_url=config.app_strings_url,
        locale_table=LocaleTable.from_mapping(GLOTPRESS_TO_LPROJ_APP_LOCALE_CODES),
        manual_strings=manual_strings,
        mag16=MAG16_GLOTPRESS_CODES,
        extraction=ExtractionSettings(),
        variants=build_variants(config),
        app_store_connect_key_path=config.app_store_connect_key_path,
    )


_VERSION_SHORT = re.compile(r"^\s*VERSION_SHORT\s*=\s*(\S+)\s*$", re.MULTILINE)


def read_version_from_config(path: str) -> str:
    """Read VERSION_SHORT from an .xcconfig file."""
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Version config not found: {path}")
    match = _VERSION_SHORT.search(config_path.read_text(encoding="utf-8"))
    if not match:
        raise ConfigurationError(f"VERSION_SHORT not set in {path}")
    return match.group(1)


# Global config instance
config = Config()
