"""Parser for Apple's old-style .strings format."""

import codecs
import re
from pathlib import Path
from typing import Optional, Tuple

from ..errors import StringsSyntaxError
from ..models.strings_file import StringsEntry, StringsFile

NO_COMMENT = "No comment provided by engineer."

# Characters allowed in an unquoted key or value
_UNQUOTED_TOKEN = re.compile(r"[A-Za-z0-9_$+/:.\-]+")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


class StringsParser:
    """Parser for .strings files."""

    def parse(self, file_path: str, locale: Optional[str] = None) -> StringsFile:
        """
        Parse a .strings file and return a structured representation.

        Args:
            file_path: Path to the .strings file
            locale: Locale the file belongs to, if known

        Returns:
            StringsFile containing all parsed entries
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        text = self.decode(path.read_bytes(), str(path))
        return self._parse_text(text, str(path), locale)

    def parse_string(
        self,
        content: str,
        path: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> StringsFile:
        """
        Parse .strings content from a string.

        Args:
            content: The .strings content
            path: Path to attach to the result (also used in error messages)
            locale: Locale to attach to the result

        Returns:
            StringsFile object
        """
        if content.startswith("\ufeff"):
            content = content[1:]
        return self._parse_text(content, path, locale)

    @staticmethod
    def decode(data: bytes, path: Optional[str] = None) -> str:
        """Decode raw .strings bytes; genstrings writes UTF-16, GlotPress UTF-8."""
        if data.startswith(codecs.BOM_UTF16_LE) or data.startswith(codecs.BOM_UTF16_BE):
            return data.decode("utf-16")
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise StringsSyntaxError(f"File is neither UTF-16 nor UTF-8: {e}", path)

    def _parse_text(self, text: str, path: Optional[str], locale: Optional[str]) -> StringsFile:
        """Parse `"key" = "value";` statements, attaching the preceding block comment."""
        result = StringsFile(path=path, locale=locale)
        pos = 0

        while True:
            pos, comment = self._skip_trivia(text, pos, path)
            if pos >= len(text):
                break

            key, pos = self._read_token(text, pos, path)
            pos, _ = self._skip_trivia(text, pos, path)

            if text.startswith("=", pos):
                pos, _ = self._skip_trivia(text, pos + 1, path)
                value, pos = self._read_token(text, pos, path)
                pos, _ = self._skip_trivia(text, pos, path)
            else:
                # `"key";` is shorthand for `"key" = "key";`
                value = key

            if not text.startswith(";", pos):
                raise StringsSyntaxError(
                    f"Expected ';' after entry '{key}'", path, self._line_of(text, pos)
                )
            pos += 1

            if comment == NO_COMMENT:
                comment = None
            result.set(StringsEntry(key=key, value=value, comment=comment))

        return result

    def _skip_trivia(self, text: str, pos: int, path: Optional[str]) -> Tuple[int, Optional[str]]:
        """Skip whitespace and comments, returning the last block comment seen."""
        comment = None
        length = len(text)
        while pos < length:
            if text[pos].isspace():
                pos += 1
            elif text.startswith("/*", pos):
                end = text.find("*/", pos + 2)
                if end == -1:
                    raise StringsSyntaxError("Unterminated comment", path, self._line_of(text, pos))
                comment = text[pos + 2:end].strip()
                pos = end + 2
            elif text.startswith("//", pos):
                end = text.find("\n", pos)
                pos = length if end == -1 else end + 1
            else:
                break
        return pos, comment

    def _read_token(self, text: str, pos: int, path: Optional[str]) -> Tuple[str, int]:
        """Read a quoted or unquoted string token."""
        if pos >= len(text):
            raise StringsSyntaxError("Unexpected end of file", path, self._line_of(text, pos))

        if text[pos] == '"':
            return self._read_quoted(text, pos, path)

        match = _UNQUOTED_TOKEN.match(text, pos)
        if not match:
            raise StringsSyntaxError(
                f"Unexpected character {text[pos]!r}", path, self._line_of(text, pos)
            )
        return match.group(0), match.end()

    def _read_quoted(self, text: str, pos: int, path: Optional[str]) -> Tuple[str, int]:
        start = pos
        pos += 1
        chars = []
        length = len(text)
        while pos < length:
            char = text[pos]
            if char == '"':
                return "".join(chars), pos + 1
            if char != "\\":
                chars.append(char)
                pos += 1
                continue

            if pos + 1 >= length:
                break
            escaped = text[pos + 1]
            if escaped in ("U", "u"):
                code_point = self._read_unicode_escape(text, pos, path)
                pos += 6
                if 0xDC00 <= code_point <= 0xDFFF:
                    raise StringsSyntaxError(
                        "Unpaired low surrogate in unicode escape", path, self._line_of(text, pos)
                    )
                if 0xD800 <= code_point <= 0xDBFF:
                    # Characters outside the BMP are written as a UTF-16 surrogate pair
                    low = None
                    if text[pos:pos + 2] in ("\\U", "\\u"):
                        low = self._read_unicode_escape(text, pos, path)
                    if low is None or not 0xDC00 <= low <= 0xDFFF:
                        raise StringsSyntaxError(
                            "Unpaired high surrogate in unicode escape", path, self._line_of(text, pos)
                        )
                    code_point = 0x10000 + ((code_point - 0xD800) << 10) + (low - 0xDC00)
                    pos += 6
                chars.append(chr(code_point))
            else:
                chars.append(_SIMPLE_ESCAPES.get(escaped, escaped))
                pos += 2

        raise StringsSyntaxError("Unterminated string", path, self._line_of(text, start))

    def _read_unicode_escape(self, text: str, pos: int, path: Optional[str]) -> int:
        """Read the 4 hex digits of a `\\Uxxxx` escape starting at pos."""
        digits = text[pos + 2:pos + 6]
        if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise StringsSyntaxError(
                f"Invalid unicode escape '\\{text[pos + 1]}{digits}'", path, self._line_of(text, pos)
            )
        return int(digits, 16)

    @staticmethod
    def _line_of(text: str, pos: int) -> int:
        return text.count("\n", 0, pos) + 1
