"""Redistribute downloaded translations back to the manual .strings files."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import StringsSyntaxError
from ..extraction.strings_parser import StringsParser
from ..extraction.strings_writer import StringsWriter
from ..models.locales import LocaleTable, ManualStringsSource, ManualStringsTable
from ..models.strings_file import StringsFile

logger = logging.getLogger(__name__)

LOCALIZABLE_FILENAME = "Localizable.strings"


class ManualStringsSplitter:
    """Reverses ManualStringsMerger for each downloaded locale."""

    def __init__(self, parser: Optional[StringsParser] = None, writer: Optional[StringsWriter] = None):
        self.parser = parser or StringsParser()
        self.writer = writer or StringsWriter()

    def split(self, merged: StringsFile, table: ManualStringsTable) -> Dict[ManualStringsSource, StringsFile]:
        """
        Pick out each manual file's prefixed keys, with the prefix stripped.

        Args:
            merged: A merged (and possibly translated) Localizable.strings
            table: Manual files and their prefixes

        Returns:
            Mapping of manual source -> its entries found in `merged`
        """
        return {source: merged.with_prefix(source.prefix) for source in table}

    def extract_keys_from_strings_files(
        self,
        source_parent_dir: str,
        table: ManualStringsTable,
        locale_table: LocaleTable,
        root: Optional[str] = None,
    ) -> List[str]:
        """
        Write the locale counterparts of every manual file.

        Args:
            source_parent_dir: Folder holding the `<lproj>.lproj/Localizable.strings` downloads
            table: Manual files and their prefixes
            locale_table: Locales to process
            root: Project root the table paths are relative to

        Returns:
            Paths of the files that were created or changed
        """
        table.validate()
        root_path = Path(root) if root else Path.cwd()
        parent = Path(source_parent_dir)
        if not parent.is_absolute():
            parent = root_path / parent

        modified = []
        for locale in locale_table:
            downloaded_path = parent / f"{locale.lproj_code}.lproj" / LOCALIZABLE_FILENAME
            if not downloaded_path.exists():
                logger.warning("No %s for %s, skipping", LOCALIZABLE_FILENAME, locale.lproj_code)
                continue

            downloaded = self.parser.parse(str(downloaded_path), locale=locale.lproj_code)
            for source, extracted in self.split(downloaded, table).items():
                if not len(extracted):
                    logger.debug("No '%s' keys translated for %s", source.prefix, locale.lproj_code)
                    continue

                target = source.locale_path(locale.lproj_code, root_path)
                if self._write_if_changed(extracted, target):
                    modified.append(str(target))

        logger.info("Updated %d manual strings files", len(modified))
        return modified

    def _write_if_changed(self, strings_file: StringsFile, target: Path) -> bool:
        content = self.writer.to_string(strings_file)
        if target.exists():
            try:
                existing = self.parser.decode(target.read_bytes(), str(target))
            except StringsSyntaxError:
                existing = None
            if existing == content:
                return False

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return True
