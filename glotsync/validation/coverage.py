"""Translation coverage of the downloaded Localizable.strings files."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..extraction.strings_parser import StringsParser
from ..models.locales import LocaleTable

LOCALIZABLE_FILENAME = "Localizable.strings"


@dataclass
class LocaleCoverage:
    """How many source keys a locale file translates."""

    lproj_code: str
    translated: int
    total: int
    exists: bool = True
    stale: int = 0  # keys no longer in the source file

    @property
    def percentage(self) -> float:
        return (self.translated / self.total) * 100 if self.total else 0.0


def locale_coverage(
    resources_dir: str,
    locale_table: LocaleTable,
    source_lproj: str = "en",
    parser: Optional[StringsParser] = None,
) -> List[LocaleCoverage]:
    """
    Compare each locale's Localizable.strings to the source one.

    Args:
        resources_dir: Folder holding the `<lproj>.lproj` folders
        locale_table: Locales to report on
        source_lproj: .lproj code of the source language
        parser: Parser to use

    Returns:
        One LocaleCoverage per locale of the table
    """
    parser = parser or StringsParser()
    root = Path(resources_dir)
    source = parser.parse(str(root / f"{source_lproj}.lproj" / LOCALIZABLE_FILENAME))
    source_keys = set(source.entries)

    results = []
    for lproj_code in locale_table.lproj_codes:
        path = root / f"{lproj_code}.lproj" / LOCALIZABLE_FILENAME
        if not path.exists():
            results.append(LocaleCoverage(lproj_code, 0, len(source_keys), exists=False))
            continue
        keys = set(parser.parse(str(path)).entries)
        results.append(LocaleCoverage(
            lproj_code=lproj_code,
            translated=len(keys & source_keys),
            total=len(source_keys),
            stale=len(keys - source_keys),
        ))
    return results
