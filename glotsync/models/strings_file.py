"""Data models for Apple .strings files."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional


@dataclass
class StringsEntry:
    """A single key/value pair of a .strings file."""

    key: str
    value: str
    comment: Optional[str] = None

    def with_key(self, key: str) -> "StringsEntry":
        """Return a copy of this entry stored under another key."""
        return StringsEntry(key=key, value=self.value, comment=self.comment)


@dataclass
class StringsFile:
    """A .strings file: entries keyed by string key, plus where it lives."""

    entries: Dict[str, StringsEntry] = field(default_factory=dict)
    path: Optional[str] = None
    locale: Optional[str] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str) -> Optional[StringsEntry]:
        return self.entries.get(key)

    def set(self, entry: StringsEntry) -> None:
        """Add or replace an entry (last write wins)."""
        self.entries[entry.key] = entry

    def keys(self) -> list:
        return sorted(self.entries.keys())

    def values_by_key(self) -> Dict[str, str]:
        """Get a plain key -> value mapping."""
        return {key: entry.value for key, entry in self.entries.items()}

    def with_prefix(self, prefix: str) -> "StringsFile":
        """Return the entries whose key starts with prefix, with the prefix stripped."""
        stripped = StringsFile(path=self.path, locale=self.locale)
        for key, entry in self.entries.items():
            if key.startswith(prefix):
                stripped.set(entry.with_key(key[len(prefix):]))
        return stripped

    def copy(self) -> "StringsFile":
        return StringsFile(
            entries={key: entry.with_key(key) for key, entry in self.entries.items()},
            path=self.path,
            locale=self.locale,
        )

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[StringsEntry],
        path: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> "StringsFile":
        strings_file = cls(path=path, locale=locale)
        for entry in entries:
            strings_file.set(entry)
        return strings_file

    @classmethod
    def from_mapping(
        cls,
        values: Dict[str, str],
        path: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> "StringsFile":
        """Build a file from a key -> value mapping (no comments)."""
        return cls.from_entries(
            (StringsEntry(key=key, value=value) for key, value in values.items()),
            path=path,
            locale=locale,
        )
