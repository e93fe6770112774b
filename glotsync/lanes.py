"""
Release lanes.

Each lane is a single, stateless run over the working tree. The expected
order (generate, translation turnaround, download, upload) is up to the
release engineer; nothing here enforces it.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .config import PipelineSettings
from .extraction.source_scanner import OUTPUT_FILENAME, StringExtractor
from .manual_strings.merger import ManualStringsMerger, MergeReport
from .manual_strings.splitter import ManualStringsSplitter
from .metadata.publisher import MetadataPublisher
from .models.variants import ProductVariant, UploadParameters
from .translation.clients.glotpress_client import GlotPressClient
from .translation.progress import ProgressReport, check_translation_progress
from .translation.sync import TranslationSync
from .utils.process import run_command
from .vcs.git_committer import GitCommitter

logger = logging.getLogger(__name__)


@dataclass
class LaneContext:
    """Settings plus the external collaborators a lane talks to."""

    settings: PipelineSettings
    committer: GitCommitter
    client: GlotPressClient
    runner: Callable = run_command
    publisher: Optional[MetadataPublisher] = field(default=None)

    def __post_init__(self):
        if self.publisher is None:
            self.publisher = MetadataPublisher(
                self.settings.project_root, committer=self.committer, runner=self.runner
            )

    @classmethod
    def create(cls, settings: PipelineSettings, runner: Callable = run_command) -> "LaneContext":
        return cls(
            settings=settings,
            committer=GitCommitter(settings.project_root, runner=runner),
            client=GlotPressClient(),
            runner=runner,
        )

    def path(self, relative: str) -> str:
        return os.path.join(self.settings.project_root, relative)


def generate_strings_file_for_glotpress(ctx: LaneContext, commit: bool = True) -> MergeReport:
    """Extract strings from code, merge the manual files in, and commit for GlotPress."""
    settings = ctx.settings
    extraction = settings.extraction

    # Manual files are loaded before extraction overwrites Localizable.strings
    merger = ManualStringsMerger()
    manual_files = merger.load_manual_files(settings.manual_strings, root=settings.project_root)

    extractor = StringExtractor(extraction.routines, extraction.exclude)
    extractor.extract(extraction.paths, extraction.output_dir, root=settings.project_root)

    # The manual keys are extracted back during download_localized_strings
    report = merger.merge_files(
        os.path.join(extraction.output_dir, OUTPUT_FILENAME),
        settings.manual_strings,
        root=settings.project_root,
        manual_files=manual_files,
    )

    if commit:
        TranslationSync(client=ctx.client, committer=ctx.committer).push(
            [extraction.output_dir],
            "Update strings for localization",
            project_url=settings.app_strings_url,
        )
    return report


def download_localized_strings(
    ctx: LaneContext,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> Tuple[List[str], List[str]]:
    """
    Download app translations and redistribute the manual strings.

    Returns:
        Tuple of (downloaded Localizable.strings paths, modified manual files)
    """
    settings = ctx.settings
    resources_dir = settings.extraction.resources_dir
    sync = TranslationSync(client=ctx.client, committer=ctx.committer)

    downloaded = sync.pull(
        settings.app_strings_url,
        settings.locale_table,
        ctx.path(resources_dir),
        progress_callback=progress_callback,
    )
    ctx.committer.commit(
        [os.path.join(resources_dir, "*.lproj", OUTPUT_FILENAME)],
        "Update app translations – `Localizable.strings`",
        allow_nothing_to_commit=True,
    )

    modified = ManualStringsSplitter().extract_keys_from_strings_files(
        resources_dir,
        settings.manual_strings,
        settings.locale_table,
        root=settings.project_root,
    )
    ctx.committer.commit(
        modified,
        "Update app translations – Other `.strings`",
        allow_nothing_to_commit=True,
    )
    return downloaded, modified


def update_appstore_strings(ctx: LaneContext, variant: ProductVariant, version: str) -> str:
    """Regenerate one variant's AppStoreStrings.po."""
    return ctx.publisher.update_appstore_strings(variant, version)


def download_localized_app_store_metadata(ctx: LaneContext, variant: ProductVariant) -> bool:
    """Download one variant's localized App Store metadata and commit it."""
    return ctx.publisher.download_localized_metadata(variant)


def update_metadata_on_app_store_connect(
    ctx: LaneContext,
    variant: ProductVariant,
    with_screenshots: bool = False,
    common: Optional[UploadParameters] = None,
) -> UploadParameters:
    """Upload one variant's metadata to App Store Connect."""
    common = common or ctx.settings.common_upload_parameters()
    return ctx.publisher.upload_metadata(variant, common, with_screenshots=with_screenshots)


def check_all_translations(ctx: LaneContext, threshold: float) -> List[ProgressReport]:
    """Check the Mag16 progress of the app strings and every variant's metadata project."""
    settings = ctx.settings
    project_urls = [settings.app_strings_url]
    project_urls.extend(variant.metadata_project_url for variant in settings.variants.values())
    return [
        check_translation_progress(ctx.client, url, settings.mag16, threshold)
        for url in project_urls
    ]
