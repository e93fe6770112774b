import pytest

from glotsync.errors import ConfigurationError
from glotsync.extraction import StringsParser, StringsWriter
from glotsync.manual_strings import ManualStringsMerger, ManualStringsSplitter
from glotsync.models.locales import LocaleTable, ManualStringsSource, ManualStringsTable
from glotsync.models.strings_file import StringsFile


def write_strings(path, values):
    StringsWriter().write(StringsFile.from_mapping(values), str(path))


def read_values(path):
    return StringsParser().parse(str(path)).values_by_key()


@pytest.fixture
def project(tmp_path, manual_table):
    """Canonical file {greeting: Hi} plus manual files A {ok: OK} and B {cancel: Cancel}."""
    write_strings(tmp_path / "App" / "Resources" / "en.lproj" / "Localizable.strings", {"greeting": "Hi"})
    write_strings(tmp_path / "App" / "a" / "en.lproj" / "A.strings", {"ok": "OK"})
    write_strings(tmp_path / "App" / "b" / "en.lproj" / "B.strings", {"cancel": "Cancel"})
    return tmp_path


DESTINATION = "App/Resources/en.lproj/Localizable.strings"


class TestManualStringsTable:
    def test_duplicate_prefixes_are_rejected(self):
        table = ManualStringsTable.from_mapping({"a/en.lproj/A.strings": "x.", "b/en.lproj/B.strings": "x."})

        with pytest.raises(ConfigurationError):
            table.validate()

    def test_overlapping_prefixes_are_rejected(self):
        table = ManualStringsTable.from_mapping({"a/en.lproj/A.strings": "ios-", "b/en.lproj/B.strings": "ios-widget."})

        with pytest.raises(ConfigurationError):
            table.validate()

    def test_locale_path_is_sibling_lproj(self):
        source = ManualStringsSource("WordPress/WordPressIntents/en.lproj/Sites.strings", "ios-widget.")

        assert source.locale_path("zh-Hans").as_posix() == "WordPress/WordPressIntents/zh-Hans.lproj/Sites.strings"


class TestManualStringsMerger:
    def test_merge_prefixes_manual_keys(self, project, manual_table):
        report = ManualStringsMerger().merge_files(DESTINATION, manual_table, root=str(project))

        assert read_values(project / DESTINATION) == {"greeting": "Hi", "x.ok": "OK", "y.cancel": "Cancel"}
        assert sorted(report.added) == ["x.ok", "y.cancel"]

    def test_merge_is_idempotent(self, project, manual_table):
        merger = ManualStringsMerger()
        merger.merge_files(DESTINATION, manual_table, root=str(project))
        once = (project / DESTINATION).read_text(encoding="utf-8")

        report = merger.merge_files(DESTINATION, manual_table, root=str(project))

        assert (project / DESTINATION).read_text(encoding="utf-8") == once
        assert not report.changed
        assert sorted(report.unchanged) == ["x.ok", "y.cancel"]

    def test_manual_value_replaces_stale_merged_value(self):
        canonical = StringsFile.from_mapping({"greeting": "Hi", "x.ok": "Old"})
        source = ManualStringsSource("a/en.lproj/A.strings", "x.")

        merged, report = ManualStringsMerger().merge(canonical, [(source, StringsFile.from_mapping({"ok": "OK"}))])

        assert merged.values_by_key() == {"greeting": "Hi", "x.ok": "OK"}
        assert report.updated == ["x.ok"]

    def test_collision_between_manual_files_is_rejected(self):
        canonical = StringsFile.from_mapping({"greeting": "Hi"})
        a = ManualStringsSource("a/en.lproj/A.strings", "x.")
        b = ManualStringsSource("b/en.lproj/B.strings", "x.")

        with pytest.raises(ConfigurationError):
            ManualStringsMerger().merge(canonical, [
                (a, StringsFile.from_mapping({"ok": "OK"})),
                (b, StringsFile.from_mapping({"ok": "Fine"})),
            ])

    def test_rejected_merge_writes_nothing(self, project):
        table = ManualStringsTable.from_mapping({
            "App/a/en.lproj/A.strings": "x.",
            "App/b/en.lproj/B.strings": "x.",
        })
        before = (project / DESTINATION).read_bytes()

        with pytest.raises(ConfigurationError):
            ManualStringsMerger().merge_files(DESTINATION, table, root=str(project))

        assert (project / DESTINATION).read_bytes() == before

    def test_missing_manual_file_is_a_configuration_error(self, project):
        table = ManualStringsTable.from_mapping({"App/missing/en.lproj/M.strings": "m."})

        with pytest.raises(ConfigurationError):
            ManualStringsMerger().merge_files(DESTINATION, table, root=str(project))


class TestManualStringsSplitter:
    def test_split_is_left_inverse_of_merge(self, manual_table):
        manual = {
            manual_table.sources[0]: StringsFile.from_mapping({"ok": "OK", "done": "Done"}),
            manual_table.sources[1]: StringsFile.from_mapping({"cancel": "Cancel"}),
        }
        canonical = StringsFile.from_mapping({"greeting": "Hi"})

        merged, _ = ManualStringsMerger().merge(canonical, list(manual.items()))
        split = ManualStringsSplitter().split(merged, manual_table)

        for source, strings_file in manual.items():
            assert split[source].values_by_key() == strings_file.values_by_key()

    def test_round_trip_through_french(self, project, manual_table):
        ManualStringsMerger().merge_files(DESTINATION, manual_table, root=str(project))
        write_strings(
            project / "App" / "Resources" / "fr.lproj" / "Localizable.strings",
            {"greeting": "Salut", "x.ok": "Valider", "y.cancel": "Annuler"},
        )
        locales = LocaleTable.from_mapping({"fr": "fr"})

        modified = ManualStringsSplitter().extract_keys_from_strings_files(
            "App/Resources", manual_table, locales, root=str(project)
        )

        a_fr = project / "App" / "a" / "fr.lproj" / "A.strings"
        b_fr = project / "App" / "b" / "fr.lproj" / "B.strings"
        assert sorted(modified) == sorted([str(a_fr), str(b_fr)])
        assert read_values(a_fr) == {"ok": "Valider"}
        assert read_values(b_fr) == {"cancel": "Annuler"}

    def test_unchanged_files_are_not_reported(self, project, manual_table):
        write_strings(project / "App" / "Resources" / "fr.lproj" / "Localizable.strings", {"x.ok": "Valider"})
        locales = LocaleTable.from_mapping({"fr": "fr"})
        splitter = ManualStringsSplitter()

        first = splitter.extract_keys_from_strings_files("App/Resources", manual_table, locales, root=str(project))
        second = splitter.extract_keys_from_strings_files("App/Resources", manual_table, locales, root=str(project))

        # B has no translated keys yet, so it is not created
        assert first == [str(project / "App" / "a" / "fr.lproj" / "A.strings")]
        assert not (project / "App" / "b" / "fr.lproj" / "B.strings").exists()
        assert second == []

    def test_missing_locale_download_is_skipped(self, project, manual_table, locale_table):
        modified = ManualStringsSplitter().extract_keys_from_strings_files(
            "App/Resources", manual_table, locale_table, root=str(project)
        )

        assert modified == []
