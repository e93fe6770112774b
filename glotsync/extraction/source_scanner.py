"""Extract translatable strings from Swift and Objective-C sources."""

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..models.strings_file import StringsEntry, StringsFile
from .strings_writer import StringsWriter

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".swift", ".m", ".h")

OUTPUT_FILENAME = "Localizable.strings"

# Order matters: comments and multi-line literals before single-line literals
_TOKEN_PATTERN = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<line_comment>//[^\n]*)"
    r"|(?P<block_comment>/\*.*?\*/)"
    r'|(?P<multiline>"""[\s\S]*?""")'
    r'|(?P<string>@?"(?:[^"\\\n]|\\.)*")'
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<punct>.)",
    re.DOTALL,
)

_SWIFT_UNICODE_ESCAPE = re.compile(r"\\u\{([0-9a-fA-F]{1,8})\}")
_C_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", '"': '"', "'": "'", "\\": "\\"}


@dataclass
class Token:
    """A lexical token of a source file."""

    kind: str  # string, ident, punct
    text: str
    line: int
    value: Optional[str] = None  # decoded literal, None if not a plain literal


@dataclass
class SkippedCallSite:
    """A routine call whose arguments are not all string literals."""

    path: str
    line: int
    reason: str


@dataclass
class ExtractionResult:
    """Outcome of a source scan."""

    strings_file: StringsFile
    files_scanned: int = 0
    skipped: List[SkippedCallSite] = field(default_factory=list)


def tokenize(text: str) -> Iterator[Token]:
    """Split source code into string, identifier and punctuation tokens."""
    line = 1
    for match in _TOKEN_PATTERN.finditer(text):
        kind = match.lastgroup
        raw = match.group(0)
        if kind == "string":
            yield Token("string", raw, line, _decode_literal(raw))
        elif kind == "multiline":
            yield Token("string", raw, line, None)
        elif kind in ("ident", "punct"):
            yield Token(kind, raw, line)
        line += raw.count("\n")


def _decode_literal(raw: str) -> Optional[str]:
    body = raw[2:-1] if raw.startswith("@") else raw[1:-1]
    if "\\(" in body:
        # Swift string interpolation
        return None

    chars = []
    i = 0
    while i < len(body):
        # Swift `\u{e9}` or C `\u00e9`
        unicode_escape = _SWIFT_UNICODE_ESCAPE.match(body, i) or _C_UNICODE_ESCAPE.match(body, i)
        if unicode_escape:
            chars.append(chr(int(unicode_escape.group(1), 16)))
            i = unicode_escape.end()
        elif body[i] == "\\" and i + 1 < len(body):
            chars.append(_ESCAPES.get(body[i + 1], body[i + 1]))
            i += 2
        else:
            chars.append(body[i])
            i += 1
    return "".join(chars)


class StringExtractor:
    """
    Finds `Routine("key", value: "…", comment: "…")` call sites.

    Swift calls use labelled `value:` and `comment:` arguments; Objective-C
    style calls (`NSLocalizedString(@"key", @"comment")`) pass the comment as
    the second positional argument. A call whose key, value or comment is not a
    plain string literal is skipped and reported.
    """

    def __init__(
        self,
        routines: Sequence[str],
        exclude: Sequence[str] = (),
        table_name: str = "Localizable",
    ):
        """
        Initialize the extractor.

        Args:
            routines: Function names that mark translatable strings
            exclude: fnmatch patterns of root-relative paths to skip
            table_name: Calls passing another `tableName:` are ignored
        """
        self.routines = set(routines)
        self.exclude = list(exclude)
        self.table_name = table_name

    def find_source_files(self, paths: Sequence[str], root: Path) -> List[Path]:
        """
        Collect source files under the given root-relative paths.

        Args:
            paths: Directories or glob patterns such as `Pods/WordPress*/`
            root: Project root the paths and excludes are relative to

        Returns:
            Sorted, de-duplicated list of source files
        """
        found = set()
        for pattern in paths:
            pattern = pattern.rstrip("/")
            matches = list(root.glob(pattern)) if any(c in pattern for c in "*?[") else [root / pattern]
            if not matches:
                logger.warning("Source path %s matched nothing", pattern)
            for base in matches:
                candidates = [base] if base.is_file() else base.rglob("*")
                for candidate in candidates:
                    if candidate.is_file() and candidate.suffix in SOURCE_SUFFIXES:
                        if not self._is_excluded(candidate, root):
                            found.add(candidate)
        return sorted(found)

    def _is_excluded(self, path: Path, root: Path) -> bool:
        relative = path.relative_to(root).as_posix()
        return any(fnmatch.fnmatch(relative, pattern) for pattern in self.exclude)

    def scan_text(self, text: str, path: str = "<string>") -> ExtractionResult:
        """Extract entries from one source text."""
        result = ExtractionResult(strings_file=StringsFile(locale="en"))
        self._scan_into(text, path, result)
        return result

    def extract(self, paths: Sequence[str], output_dir: str, root: Optional[str] = None) -> ExtractionResult:
        """
        Scan sources and overwrite `<output_dir>/Localizable.strings`.

        Args:
            paths: Root-relative source directories or glob patterns
            output_dir: Directory receiving Localizable.strings
            root: Project root (defaults to the current directory)

        Returns:
            ExtractionResult with the written StringsFile
        """
        root_path = Path(root) if root else Path.cwd()
        output_path = Path(output_dir)
        if not output_path.is_absolute():
            output_path = root_path / output_path
        output_file = output_path / OUTPUT_FILENAME

        result = ExtractionResult(strings_file=StringsFile(path=str(output_file), locale="en"))
        for source in self.find_source_files(paths, root_path):
            text = source.read_text(encoding="utf-8", errors="replace")
            self._scan_into(text, source.relative_to(root_path).as_posix(), result)
            result.files_scanned += 1

        for site in result.skipped:
            logger.warning("Skipped %s:%d: %s", site.path, site.line, site.reason)

        StringsWriter().write(result.strings_file, str(output_file))
        logger.info(
            "Extracted %d strings from %d files into %s",
            len(result.strings_file), result.files_scanned, output_file,
        )
        return result

    def _scan_into(self, text: str, path: str, result: ExtractionResult) -> None:
        tokens = list(tokenize(text))
        for index, token in enumerate(tokens):
            if token.kind != "ident" or token.text not in self.routines:
                continue
            if index + 1 >= len(tokens) or tokens[index + 1].text != "(":
                continue
            previous = tokens[index - 1] if index > 0 else None
            if previous is not None and previous.text in ("func", "."):
                continue

            arguments = self._split_arguments(tokens, index + 2)
            if arguments is None:
                result.skipped.append(SkippedCallSite(path, token.line, "unbalanced parentheses"))
                continue

            entry = self._entry_from_arguments(arguments, path, token.line, result)
            if entry is not None:
                self._add_entry(result.strings_file, entry, path, token.line)

    @staticmethod
    def _split_arguments(tokens: List[Token], start: int) -> Optional[List[List[Token]]]:
        """Split the tokens after `(` into top-level arguments, up to the matching `)`."""
        arguments: List[List[Token]] = [[]]
        depth = 0
        for token in tokens[start:]:
            if token.kind == "punct":
                if token.text in "([{":
                    depth += 1
                elif token.text in ")]}":
                    if depth == 0:
                        return [arg for arg in arguments if arg]
                    depth -= 1
                elif token.text == "," and depth == 0:
                    arguments.append([])
                    continue
            arguments[-1].append(token)
        return None

    def _entry_from_arguments(
        self,
        arguments: List[List[Token]],
        path: str,
        line: int,
        result: ExtractionResult,
    ) -> Optional[StringsEntry]:
        positional = []
        labelled = {}
        for argument in arguments:
            if len(argument) > 2 and argument[0].kind == "ident" and argument[1].text == ":":
                labelled[argument[0].text] = argument[2:]
            else:
                positional.append(argument)

        if not positional:
            result.skipped.append(SkippedCallSite(path, line, "missing key argument"))
            return None

        table = labelled.get("tableName")
        if table is not None and not _is_nil(table) and _literal(table) != self.table_name:
            return None

        key = _literal(positional[0])
        if key is None:
            result.skipped.append(SkippedCallSite(path, line, "key is not a string literal"))
            return None

        value = key
        if "value" in labelled:
            value = _literal(labelled["value"])
            if value is None:
                result.skipped.append(SkippedCallSite(path, line, f"value of '{key}' is not a string literal"))
                return None

        comment_tokens = labelled.get("comment")
        if comment_tokens is None and len(positional) > 1:
            comment_tokens = positional[1]
        comment = None
        if comment_tokens is not None and not _is_nil(comment_tokens):
            comment = _literal(comment_tokens)
            if comment is None:
                result.skipped.append(SkippedCallSite(path, line, f"comment of '{key}' is not a string literal"))
                return None

        return StringsEntry(key=key, value=value, comment=comment or None)

    @staticmethod
    def _add_entry(strings_file: StringsFile, entry: StringsEntry, path: str, line: int) -> None:
        existing = strings_file.get(entry.key)
        if existing is None:
            strings_file.set(entry)
            return
        if existing.value != entry.value or existing.comment != entry.comment:
            logger.warning(
                "Key '%s' at %s:%d differs from an earlier occurrence; keeping the first one",
                entry.key, path, line,
            )


def _literal(tokens: List[Token]) -> Optional[str]:
    if len(tokens) == 1 and tokens[0].kind == "string":
        return tokens[0].value
    return None


def _is_nil(tokens: List[Token]) -> bool:
    return len(tokens) == 1 and tokens[0].kind == "ident" and tokens[0].text == "nil"
