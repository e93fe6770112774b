"""Push the source strings to GlotPress and pull translations back."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from ..errors import GlotPressError, StringsSyntaxError
from ..extraction.strings_parser import StringsParser
from ..extraction.strings_writer import StringsWriter
from ..models.locales import Locale, LocaleTable
from ..models.strings_file import StringsFile
from ..vcs.git_committer import GitCommitter
from .clients.glotpress_client import GlotPressClient

logger = logging.getLogger(__name__)

LOCALIZABLE_FILENAME = "Localizable.strings"


@dataclass
class DownloadedLocale:
    """Translations of one locale, fetched but not yet written."""

    locale: Locale
    strings_file: StringsFile
    path: Path


class TranslationSync:
    """
    Moves app strings between the working tree and a GlotPress project.

    GlotPress imports originals from the committed source file, so pushing
    is a commit. Pulling downloads every locale before writing any of them.
    """

    def __init__(
        self,
        client: Optional[GlotPressClient] = None,
        committer: Optional[GitCommitter] = None,
        parser: Optional[StringsParser] = None,
        writer: Optional[StringsWriter] = None,
    ):
        self.client = client or GlotPressClient()
        self.committer = committer or GitCommitter()
        self.parser = parser or StringsParser()
        self.writer = writer or StringsWriter()

    def push(
        self,
        paths: Union[str, Sequence[str]],
        message: str,
        project_url: Optional[str] = None,
    ) -> bool:
        """
        Commit the generated source strings for GlotPress to import.

        Args:
            paths: Generated/merged files or folders
            message: Commit message
            project_url: GlotPress project that imports the file (logged only)

        Returns:
            True if a commit was created, False if nothing changed
        """
        committed = self.committer.commit(paths, message, allow_nothing_to_commit=True)
        if project_url:
            logger.info("Source strings for %s are ready for import", project_url)
        return committed

    def pull(
        self,
        project_url: str,
        locale_table: LocaleTable,
        download_dir: str,
        locales: Optional[Iterable[str]] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ) -> List[str]:
        """
        Download translations into `<download_dir>/<lproj>.lproj/Localizable.strings`.

        Args:
            project_url: URL of the GlotPress project
            locale_table: GlotPress -> .lproj code table
            download_dir: Parent folder of the .lproj folders
            locales: GlotPress codes to download (all of the table if None)
            progress_callback: Called as (current, total, locale code) after each download

        Returns:
            Paths of the written files

        Raises:
            ConfigurationError: If a requested code is not in the table (before any request)
            GlotPressError: If any download fails; nothing is written in that case
        """
        resolved = locale_table.resolve(locales)
        downloads = self.fetch(project_url, resolved, Path(download_dir), progress_callback)

        written = []
        for download in downloads:
            self.writer.write(download.strings_file, str(download.path))
            written.append(str(download.path))
            logger.debug("Wrote %d strings to %s", len(download.strings_file), download.path)

        logger.info("Downloaded %d locales from %s", len(written), project_url)
        return written

    def fetch(
        self,
        project_url: str,
        locales: Sequence[Locale],
        download_dir: Path,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ) -> List[DownloadedLocale]:
        """Download and parse every locale, keeping the results in memory."""
        downloads = []
        for index, locale in enumerate(locales, start=1):
            content = self.client.export_translations(project_url, locale.glotpress_code)
            path = download_dir / f"{locale.lproj_code}.lproj" / LOCALIZABLE_FILENAME
            try:
                strings_file = self.parser.parse_string(content, path=str(path), locale=locale.lproj_code)
            except StringsSyntaxError as e:
                raise GlotPressError(
                    f"Unreadable translations for {locale.glotpress_code}: {e}", url=project_url
                ) from e

            if not len(strings_file):
                logger.info("No translations yet for %s", locale.glotpress_code)
            downloads.append(DownloadedLocale(locale=locale, strings_file=strings_file, path=path))

            if progress_callback:
                progress_callback(index, len(locales), locale.glotpress_code)
        return downloads
