from glotsync.config import ExtractionSettings
from glotsync.extraction import StringExtractor, StringsParser
from glotsync.extraction.source_scanner import tokenize

from conftest import write_file


SWIFT_SOURCE = '''
import UIKit

// AppLocalizedString("commented.out", value: "Nope", comment: "Ignored")
/* AppLocalizedString("block.commented", value: "Nope", comment: "Ignored") */

func AppLocalizedString(_ key: String, value: String, comment: String) -> String {
    return key
}

enum Strings {
    static let title = AppLocalizedString(
        "postList.title",
        value: "Posts",
        comment: "Title of the post list"
    )
    static let greeting = AppLocalizedString("greeting", value: "Hi, \\"you\\"", comment: "Greeting")
    static let dynamic = AppLocalizedString(keyName, value: "Dynamic", comment: "Not a literal key")
    static let interpolated = AppLocalizedString("count", value: "\\(count) posts", comment: "Count")
    static let other = AppLocalizedString("widget", tableName: "Sites", value: "Widget", comment: "Other table")
    static let nested = AppLocalizedString("nested", value: "Nested (parens)", comment: String("x"))
}
'''


class TestTokenizer:
    def test_skips_comments_and_tracks_lines(self):
        tokens = list(tokenize('// "a"\nfoo("b")'))

        assert [t.text for t in tokens] == ["foo", "(", '"b"', ")"]
        assert tokens[0].line == 2
        assert tokens[2].value == "b"

    def test_interpolated_and_multiline_literals_have_no_value(self):
        tokens = list(tokenize('"a \\(b)" """\nmulti\n"""'))

        assert [t.value for t in tokens] == [None, None]


class TestStringExtractor:
    def test_extracts_literal_call_sites(self):
        result = StringExtractor(["AppLocalizedString"]).scan_text(SWIFT_SOURCE, "Strings.swift")
        entries = result.strings_file

        assert entries.keys() == ["greeting", "postList.title"]
        assert entries.get("postList.title").value == "Posts"
        assert entries.get("postList.title").comment == "Title of the post list"
        assert entries.get("greeting").value == 'Hi, "you"'

    def test_reports_non_literal_call_sites(self):
        result = StringExtractor(["AppLocalizedString"]).scan_text(SWIFT_SOURCE, "Strings.swift")

        reasons = sorted(site.reason for site in result.skipped)
        assert reasons == [
            "comment of 'nested' is not a string literal",
            "key is not a string literal",
            "value of 'count' is not a string literal",
        ]
        assert all(site.path == "Strings.swift" for site in result.skipped)

    def test_objective_c_positional_comment(self):
        source = 'label.text = NSLocalizedString(@"Save", @"Save button title");\n' \
                 'other = NSLocalizedString(@"Cancel", nil);'

        result = StringExtractor(["NSLocalizedString"]).scan_text(source)

        assert result.strings_file.get("Save").value == "Save"
        assert result.strings_file.get("Save").comment == "Save button title"
        assert result.strings_file.get("Cancel").comment is None

    def test_first_occurrence_wins(self):
        source = 'AppLocalizedString("k", value: "One", comment: "c")\n' \
                 'AppLocalizedString("k", value: "Two", comment: "c")'

        result = StringExtractor(["AppLocalizedString"]).scan_text(source)

        assert result.strings_file.get("k").value == "One"

    def test_extract_writes_localizable_strings_and_honors_excludes(self, tmp_path):
        write_file(tmp_path / "App" / "Feature.swift", 'AppLocalizedString("a", value: "A", comment: "c")')
        write_file(tmp_path / "App" / "Vendor" / "Lib.swift", 'AppLocalizedString("v", value: "V", comment: "c")')
        write_file(tmp_path / "App" / "Tests" / "T.swift", 'AppLocalizedString("t", value: "T", comment: "c")')
        write_file(tmp_path / "Pods" / "WordPressKit" / "K.m", 'AppLocalizedString(@"k", @"c")')
        write_file(tmp_path / "App" / "notes.txt", 'AppLocalizedString("txt", value: "X", comment: "c")')

        extractor = StringExtractor(["AppLocalizedString"], exclude=["*Vendor*", "App/Tests/**"])
        result = extractor.extract(["App/", "Pods/WordPress*/"], "App/en.lproj", root=str(tmp_path))

        written = StringsParser().parse(str(tmp_path / "App" / "en.lproj" / "Localizable.strings"))
        assert written.values_by_key() == {"a": "A", "k": "k"}
        assert result.files_scanned == 2

    def test_objective_c_unicode_escapes(self):
        source = 'NSLocalizedString(@"Caf\\u00e9", @"Menu \\u{e9} \\\\u00e9");'

        result = StringExtractor(["NSLocalizedString"]).scan_text(source)

        assert result.strings_file.get("Café").comment == "Menu é \\u00e9"

    def test_default_routines_include_nslocalizedstring(self):
        source = 'NSLocalizedString("post.title", value: "Post", comment: "c")\n' \
                 'AppLocalizedString("post.save", value: "Save", comment: "c")'

        result = StringExtractor(ExtractionSettings().routines).scan_text(source)

        assert result.strings_file.values_by_key() == {"post.title": "Post", "post.save": "Save"}
