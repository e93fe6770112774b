"""Build the AppStoreStrings.po file GlotPress imports App Store metadata from."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import polib

from ..errors import ConfigurationError
from ..models.variants import MetadataField

logger = logging.getLogger(__name__)

RELEASE_NOTES_FIELD = "whats_new"
RELEASE_NOTE_PREFIX = "release_note_"

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.\d+)*$")


def release_note_key(version: str) -> str:
    """
    Derive the version-scoped key of the release notes.

    `23.4` gives `release_note_234` and `9.1` gives `release_note_091`.
    """
    match = _VERSION_PATTERN.match(version or "")
    if not match:
        raise ConfigurationError(f"Invalid release version '{version}', expected x.y")
    major, minor = match.groups()
    return f"{RELEASE_NOTE_PREFIX}{int(major):02d}{int(minor)}"


def _release_note_order(entry: polib.POEntry) -> Tuple[int, int]:
    # Keys are `<major:02d><minor>`, so `release_note_2310` is 23.10
    digits = entry.msgctxt[len(RELEASE_NOTE_PREFIX):]
    if len(digits) < 3 or not digits.isdigit():
        return (-1, -1)
    return (int(digits[:2]), int(digits[2:]))


class AppStoreStringsBuilder:
    """Writes metadata source files into a .po file keyed by msgctxt."""

    def __init__(self, project_name: str = "Release Notes & Apple Store Description"):
        self.project_name = project_name

    def read_sources(self, fields: Sequence[MetadataField]) -> List[polib.POEntry]:
        """
        Read every source file into a .po entry.

        Raises:
            ConfigurationError: If a source file is missing
        """
        missing = [f.path for f in fields if not Path(f.path).is_file()]
        if missing:
            raise ConfigurationError(f"Metadata source files not found: {', '.join(missing)}")

        entries = []
        for metadata_field in fields:
            content = Path(metadata_field.path).read_text(encoding="utf-8").rstrip("\n")
            if not content.strip():
                logger.warning("Skipping empty metadata file %s", metadata_field.path)
                continue
            entries.append(polib.POEntry(
                msgctxt=metadata_field.key,
                msgid=content,
                msgstr="",
                comment=metadata_field.comment or "",
            ))
        return entries

    def build(
        self,
        fields: Sequence[MetadataField],
        version: str,
        existing: Optional[polib.POFile] = None,
    ) -> polib.POFile:
        """
        Build the .po file for a release.

        Args:
            fields: Metadata fields of the variant
            version: Release version, used to key the release notes
            existing: The current .po file, whose older release notes are kept

        Returns:
            The new POFile
        """
        current_key = release_note_key(version)

        po = polib.POFile(wrapwidth=0)
        po.header = f"Translation of {self.project_name} in English"
        po.metadata = {
            "Project-Id-Version": self.project_name,
            "MIME-Version": "1.0",
            "Content-Type": "text/plain; charset=UTF-8",
            "Content-Transfer-Encoding": "8bit",
            "Plural-Forms": "nplurals=2; plural=n != 1;",
            "Language": "en",
        }

        for entry in self.read_sources(fields):
            if entry.msgctxt == RELEASE_NOTES_FIELD:
                entry.msgctxt = current_key
            po.append(entry)

        if existing is not None:
            history = [
                entry for entry in existing
                if entry.msgctxt
                and entry.msgctxt.startswith(RELEASE_NOTE_PREFIX)
                and entry.msgctxt != current_key
            ]
            for entry in sorted(history, key=_release_note_order, reverse=True):
                po.append(polib.POEntry(
                    msgctxt=entry.msgctxt,
                    msgid=entry.msgid,
                    msgstr="",
                    comment=entry.comment,
                ))

        return po

    def update(self, po_path: str, fields: Sequence[MetadataField], version: str) -> polib.POFile:
        """Rebuild and save the .po file at po_path."""
        path = Path(po_path)
        existing = polib.pofile(str(path)) if path.exists() else None
        po = self.build(fields, version, existing)

        path.parent.mkdir(parents=True, exist_ok=True)
        po.save(str(path))
        logger.info("Wrote %d entries to %s", len(po), path)
        return po
