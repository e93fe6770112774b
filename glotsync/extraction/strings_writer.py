"""Writer for Apple's old-style .strings format."""

from pathlib import Path

from ..models.strings_file import StringsEntry, StringsFile
from .strings_parser import NO_COMMENT


class StringsWriter:
    """Writer for .strings files."""

    def write(self, strings_file: StringsFile, output_path: str) -> None:
        """
        Write a StringsFile to disk as UTF-8.

        Args:
            strings_file: The StringsFile to write
            output_path: Path to write the file to
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_string(strings_file))

    def to_string(self, strings_file: StringsFile) -> str:
        """
        Convert a StringsFile to .strings text.

        Args:
            strings_file: The StringsFile to convert

        Returns:
            The .strings content; an empty file has no content at all
        """
        # Sort by key for consistent output
        blocks = [self._entry_to_string(strings_file.entries[key]) for key in strings_file.keys()]
        return "\n".join(blocks)

    def _entry_to_string(self, entry: StringsEntry) -> str:
        comment = (entry.comment or NO_COMMENT).replace("*/", "* /")
        return f'/* {comment} */\n"{escape(entry.key)}" = "{escape(entry.value)}";\n'


def escape(text: str) -> str:
    """Escape a string for use inside double quotes in a .strings file."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
