"""Locale and manually-maintained strings tables."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Locale:
    """A language as GlotPress names it and as the .lproj folder names it."""

    glotpress_code: str  # e.g. "zh-cn"
    lproj_code: str  # e.g. "zh-Hans"


@dataclass(frozen=True)
class LocaleTable:
    """Fixed GlotPress code -> .lproj code lookup table."""

    locales: Tuple[Locale, ...]

    def __post_init__(self):
        seen = set()
        for locale in self.locales:
            if locale.glotpress_code in seen:
                raise ConfigurationError(f"Duplicate locale code in table: {locale.glotpress_code}")
            seen.add(locale.glotpress_code)

    def __iter__(self) -> Iterator[Locale]:
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    @property
    def glotpress_codes(self) -> List[str]:
        return [locale.glotpress_code for locale in self.locales]

    @property
    def lproj_codes(self) -> List[str]:
        return [locale.lproj_code for locale in self.locales]

    def lproj_code_for(self, glotpress_code: str) -> str:
        """Get the .lproj code for a GlotPress code."""
        for locale in self.locales:
            if locale.glotpress_code == glotpress_code:
                return locale.lproj_code
        raise ConfigurationError(f"Locale code '{glotpress_code}' is not in the locale table")

    def resolve(self, glotpress_codes: Optional[Iterable[str]] = None) -> List[Locale]:
        """
        Resolve GlotPress codes to table entries.

        Args:
            glotpress_codes: Codes to resolve; all locales of the table if None

        Returns:
            The matching Locale entries, in the requested order

        Raises:
            ConfigurationError: If any code is missing from the table
        """
        if glotpress_codes is None:
            return list(self.locales)

        by_code = {locale.glotpress_code: locale for locale in self.locales}
        codes = list(glotpress_codes)
        unmapped = [code for code in codes if code not in by_code]
        if unmapped:
            raise ConfigurationError(
                f"Locale code(s) not in the locale table: {', '.join(unmapped)}"
            )
        return [by_code[code] for code in codes]

    @classmethod
    def from_mapping(cls, mapping: Dict[str, str]) -> "LocaleTable":
        return cls(tuple(Locale(gp, lproj) for gp, lproj in mapping.items()))


@dataclass(frozen=True)
class ManualStringsSource:
    """A hand-maintained .strings file and the prefix its keys get when merged."""

    path: str  # relative to the project root, inside an `en.lproj` folder
    prefix: str

    def locale_path(self, lproj_code: str, root: Optional[Path] = None) -> Path:
        """Path of this file's counterpart for another .lproj folder."""
        source = Path(self.path)
        lproj_parent = source.parent.parent
        target = lproj_parent / f"{lproj_code}.lproj" / source.name
        return (root / target) if root is not None else target

    def resolved_path(self, root: Optional[Path] = None) -> Path:
        return (root / self.path) if root is not None else Path(self.path)


@dataclass(frozen=True)
class ManualStringsTable:
    """Ordered set of manually-maintained .strings files with unique prefixes."""

    sources: Tuple[ManualStringsSource, ...]

    def __iter__(self) -> Iterator[ManualStringsSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    def validate(self) -> None:
        """
        Check that prefixes can be used to merge and split unambiguously.

        Raises:
            ConfigurationError: On empty, duplicate or overlapping prefixes
        """
        prefixes = [source.prefix for source in self.sources]
        for source in self.sources:
            if not source.prefix:
                raise ConfigurationError(f"Empty key prefix for {source.path}")

        duplicates = sorted({p for p in prefixes if prefixes.count(p) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate manual strings prefixes: {', '.join(duplicates)}")

        for prefix in prefixes:
            for other in prefixes:
                if prefix != other and other.startswith(prefix):
                    raise ConfigurationError(
                        f"Manual strings prefix '{prefix}' is a prefix of '{other}'"
                    )

        paths = [source.path for source in self.sources]
        duplicate_paths = sorted({p for p in paths if paths.count(p) > 1})
        if duplicate_paths:
            raise ConfigurationError(f"Manual strings file listed twice: {', '.join(duplicate_paths)}")

    def prefix_for_key(self, key: str) -> Optional[str]:
        """Get the manual prefix a key starts with, if any."""
        for source in self.sources:
            if key.startswith(source.prefix):
                return source.prefix
        return None

    @classmethod
    def from_mapping(cls, mapping: Dict[str, str]) -> "ManualStringsTable":
        return cls(tuple(ManualStringsSource(path, prefix) for path, prefix in mapping.items()))
