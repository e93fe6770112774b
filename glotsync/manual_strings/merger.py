"""Merge manually-maintained .strings files into the generated one."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import ConfigurationError
from ..extraction.strings_parser import StringsParser
from ..extraction.strings_writer import StringsWriter
from ..models.locales import ManualStringsSource, ManualStringsTable
from ..models.strings_file import StringsFile

logger = logging.getLogger(__name__)


@dataclass
class MergeReport:
    """What a merge did to the destination file."""

    destination: Optional[str] = None
    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)


class ManualStringsMerger:
    """
    Merges manual .strings files into the canonical file under key prefixes.

    Each manual entry is stored as `prefix + key`. Merging is idempotent:
    an existing key is replaced by the manual entry (last write wins), so
    merging the same files again leaves the result unchanged.
    """

    def __init__(self, parser: Optional[StringsParser] = None, writer: Optional[StringsWriter] = None):
        self.parser = parser or StringsParser()
        self.writer = writer or StringsWriter()

    def merge(
        self,
        canonical: StringsFile,
        manual_files: Sequence[Tuple[ManualStringsSource, StringsFile]],
    ) -> Tuple[StringsFile, MergeReport]:
        """
        Merge parsed manual files into a copy of the canonical file.

        Args:
            canonical: The generated source-language file
            manual_files: (source, parsed file) pairs in merge order

        Returns:
            Tuple of (merged StringsFile, MergeReport)

        Raises:
            ConfigurationError: If two manual files produce the same prefixed key
        """
        origins: Dict[str, str] = {}
        for source, strings_file in manual_files:
            for key in strings_file.entries:
                prefixed = source.prefix + key
                if prefixed in origins and origins[prefixed] != source.path:
                    raise ConfigurationError(
                        f"Key '{prefixed}' is produced by both {origins[prefixed]} and {source.path}"
                    )
                origins[prefixed] = source.path

        merged = canonical.copy()
        report = MergeReport(destination=canonical.path)
        for source, strings_file in manual_files:
            for key in strings_file.keys():
                entry = strings_file.entries[key].with_key(source.prefix + key)
                existing = merged.get(entry.key)
                if existing is None:
                    report.added.append(entry.key)
                elif existing.value == entry.value and existing.comment == entry.comment:
                    report.unchanged.append(entry.key)
                else:
                    if existing.value != entry.value:
                        logger.warning(
                            "Key '%s' already exists with value %r, replacing it with %r from %s",
                            entry.key, existing.value, entry.value, source.path,
                        )
                    report.updated.append(entry.key)
                merged.set(entry)

        return merged, report

    def load_manual_files(
        self,
        table: ManualStringsTable,
        root: Optional[str] = None,
    ) -> List[Tuple[ManualStringsSource, StringsFile]]:
        """
        Validate the table and parse every manual file it lists.

        Raises:
            ConfigurationError: If the table is invalid or a file is missing
            StringsSyntaxError: If a manual file cannot be parsed
        """
        table.validate()
        root_path = Path(root) if root else Path.cwd()

        manual_files = []
        for source in table:
            source_path = source.resolved_path(root_path)
            if not source_path.exists():
                raise ConfigurationError(f"Manual strings file not found: {source_path}")
            manual_files.append((source, self.parser.parse(str(source_path), locale="en")))
        return manual_files

    def merge_files(
        self,
        destination: str,
        table: ManualStringsTable,
        root: Optional[str] = None,
        manual_files: Optional[List[Tuple[ManualStringsSource, StringsFile]]] = None,
    ) -> MergeReport:
        """
        Merge every manual file of the table into the destination file on disk.

        All inputs are read and checked before the destination is written.

        Args:
            destination: Path of the generated Localizable.strings
            table: Manual files and their prefixes
            root: Project root the table paths are relative to
            manual_files: Result of load_manual_files, when already loaded

        Returns:
            MergeReport describing the changes
        """
        root_path = Path(root) if root else Path.cwd()
        destination_path = Path(destination)
        if not destination_path.is_absolute():
            destination_path = root_path / destination_path

        if manual_files is None:
            manual_files = self.load_manual_files(table, root=str(root_path))
        else:
            table.validate()

        canonical = self.parser.parse(str(destination_path), locale="en")
        merged, report = self.merge(canonical, manual_files)

        self.writer.write(merged, str(destination_path))
        logger.info(
            "Merged %d manual strings files into %s (%d added, %d updated)",
            len(manual_files), destination_path, len(report.added), len(report.updated),
        )
        return report
