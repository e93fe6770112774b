"""App Store metadata lanes, shared by every product variant."""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Optional

from ..errors import ConfigurationError
from ..models.variants import ProductVariant, UploadParameters, build_metadata_fields
from ..utils.process import run_command
from ..vcs.git_committer import GitCommitter
from .deliver_client import DeliverClient
from .po_builder import AppStoreStringsBuilder

logger = logging.getLogger(__name__)

SOURCE_LOCALE_DIR = "en-US"


class MetadataPublisher:
    """
    Runs the metadata lanes for one ProductVariant at a time.

    Both variants go through the same code; the variant value object is the
    only thing that differs between them.
    """

    def __init__(
        self,
        root: str,
        committer: Optional[GitCommitter] = None,
        runner: Callable = run_command,
        builder: Optional[AppStoreStringsBuilder] = None,
        deliver: Optional[DeliverClient] = None,
        fastlane_dir: str = "fastlane",
        download_script: str = "./download_metadata.swift",
    ):
        self.root = str(root)
        self.committer = committer or GitCommitter(self.root)
        self.runner = runner
        self.builder = builder or AppStoreStringsBuilder()
        self.deliver = deliver or DeliverClient(cwd=self.root, runner=runner)
        self.fastlane_dir = fastlane_dir
        self.download_script = download_script

    def _path(self, relative: str) -> str:
        return os.path.join(self.root, relative)

    def update_appstore_strings(self, variant: ProductVariant, version: str) -> str:
        """
        Regenerate the variant's AppStoreStrings.po from its source files.

        Args:
            variant: Product variant to update
            version: Current `x.y` version, used to key the release notes

        Returns:
            Path of the written .po file
        """
        fields = build_metadata_fields(variant, root=self.root)
        po_path = self._path(variant.po_file_path)
        self.builder.update(po_path, fields, version)
        logger.info("Updated %s App Store strings for %s", variant.display_name, version)
        return po_path

    def download_localized_metadata(self, variant: ProductVariant) -> bool:
        """
        Download localized metadata and commit the metadata folder.

        The download itself is done by an external per-variant script. GlotPress
        holds no copy of the source locale, so the release notes are copied into
        the `en-US` folder afterwards.

        Returns:
            True if a commit was created
        """
        release_notes = Path(self._path(variant.release_notes_path))
        if not release_notes.is_file():
            raise ConfigurationError(f"Release notes not found: {release_notes}")

        self.runner([self.download_script, variant.name], cwd=self._path(self.fastlane_dir))

        metadata_dir = Path(self._path(variant.metadata_dir))
        target = metadata_dir / SOURCE_LOCALE_DIR / "release_notes.txt"
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(release_notes, target)

        return self.committer.commit(
            [os.path.join(variant.metadata_dir, "**", "*.txt")],
            f"Update {variant.display_name} metadata translations",
            allow_nothing_to_commit=True,
        )

    def build_upload_parameters(
        self,
        variant: ProductVariant,
        common: UploadParameters,
        with_screenshots: bool = False,
    ) -> UploadParameters:
        """Combine the common deliver parameters with the variant's."""
        return common.for_variant(
            variant,
            metadata_path=self._path(variant.metadata_dir),
            screenshots_path=self._path(variant.screenshots_dir),
            with_screenshots=with_screenshots,
        )

    def upload_metadata(
        self,
        variant: ProductVariant,
        common: UploadParameters,
        with_screenshots: bool = False,
    ) -> UploadParameters:
        """
        Upload the variant's localized metadata to App Store Connect.

        Args:
            variant: Product variant to upload
            common: Parameters shared by every variant
            with_screenshots: Also upload screenshots (skipped by default)

        Returns:
            The parameters passed to deliver
        """
        params = self.build_upload_parameters(variant, common, with_screenshots)
        self.deliver.upload(params)
        return params
