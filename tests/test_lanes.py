from dataclasses import replace

import pytest

from glotsync import lanes
from glotsync.config import Config, ExtractionSettings, build_pipeline_settings
from glotsync.errors import ConfigurationError
from glotsync.extraction import StringsParser
from glotsync.models.locales import ManualStringsTable
from glotsync.translation.clients import GlotPressClient
from glotsync.vcs import GitCommitter

from conftest import FakeResponse, FakeSession, RecordingRunner, write_file

APP_URL = "https://translate.example.org/projects/apps/ios/dev/"


@pytest.fixture
def settings(tmp_path, locale_table, manual_table):
    base = build_pipeline_settings(Config(project_root=str(tmp_path), app_strings_url=APP_URL))
    return replace(
        base,
        locale_table=locale_table,
        manual_strings=manual_table,
        extraction=ExtractionSettings(
            paths=("App/",),
            exclude=(),
            output_dir="App/Resources/en.lproj",
            resources_dir="App/Resources",
        ),
    )


def make_context(settings, session, runner):
    return lanes.LaneContext(
        settings=settings,
        committer=GitCommitter(settings.project_root, runner=runner),
        client=GlotPressClient(session=session, timeout=5),
        runner=runner,
    )


class TestGenerateStringsFile:
    def test_extracts_merges_and_commits(self, tmp_path, settings):
        write_file(tmp_path / "App" / "Feature.swift", 'AppLocalizedString("greeting", value: "Hi", comment: "Hello")')
        write_file(tmp_path / "App" / "a" / "en.lproj" / "A.strings", '"ok" = "OK";\n')
        write_file(tmp_path / "App" / "b" / "en.lproj" / "B.strings", '"cancel" = "Cancel";\n')
        runner = RecordingRunner()

        report = lanes.generate_strings_file_for_glotpress(make_context(settings, FakeSession(), runner))

        generated = StringsParser().parse(str(tmp_path / "App" / "Resources" / "en.lproj" / "Localizable.strings"))
        assert generated.values_by_key() == {"greeting": "Hi", "x.ok": "OK", "y.cancel": "Cancel"}
        assert sorted(report.added) == ["x.ok", "y.cancel"]
        assert runner.commands_starting_with("git", "commit") == [
            ["git", "commit", "-m", "Update strings for localization", "--", "App/Resources/en.lproj"]
        ]

    def test_invalid_manual_table_writes_nothing(self, tmp_path, settings):
        write_file(tmp_path / "App" / "Feature.swift", 'AppLocalizedString("greeting", value: "Hi", comment: "c")')
        bad = replace(settings, manual_strings=ManualStringsTable.from_mapping({
            "App/a/en.lproj/A.strings": "x.",
            "App/b/en.lproj/B.strings": "x.y.",
        }))
        runner = RecordingRunner()

        with pytest.raises(ConfigurationError):
            lanes.generate_strings_file_for_glotpress(make_context(bad, FakeSession(), runner))
        assert not (tmp_path / "App" / "Resources" / "en.lproj").exists()
        assert runner.commands == []


    def test_missing_manual_file_leaves_canonical_file_untouched(self, tmp_path, settings):
        write_file(tmp_path / "App" / "Feature.swift", 'AppLocalizedString("greeting", value: "Hi", comment: "c")')
        write_file(tmp_path / "App" / "a" / "en.lproj" / "A.strings", '"ok" = "OK";\n')
        canonical = write_file(
            tmp_path / "App" / "Resources" / "en.lproj" / "Localizable.strings",
            '"greeting" = "Hi";\n"x.ok" = "OK";\n',
        )
        before = canonical.read_bytes()
        runner = RecordingRunner()

        with pytest.raises(ConfigurationError):
            lanes.generate_strings_file_for_glotpress(make_context(settings, FakeSession(), runner))

        assert canonical.read_bytes() == before
        assert runner.commands == []


class TestDownloadLocalizedStrings:
    def test_downloads_splits_and_commits_twice(self, tmp_path, settings):
        session = FakeSession(
            {APP_URL + "fr/default/export-translations/": FakeResponse(
                text='"greeting" = "Salut";\n"x.ok" = "Valider";\n'
            )},
            default=FakeResponse(text=""),
        )
        runner = RecordingRunner()

        downloaded, modified = lanes.download_localized_strings(make_context(settings, session, runner))

        assert len(downloaded) == 2
        assert modified == [str(tmp_path / "App" / "a" / "fr.lproj" / "A.strings")]
        assert StringsParser().parse(modified[0]).values_by_key() == {"ok": "Valider"}

        commits = runner.commands_starting_with("git", "commit")
        assert commits[0] == [
            "git", "commit", "-m", "Update app translations – `Localizable.strings`", "--",
            "App/Resources/fr.lproj/Localizable.strings", "App/Resources/zh-Hans.lproj/Localizable.strings",
        ]
        assert commits[1] == [
            "git", "commit", "-m", "Update app translations – Other `.strings`", "--", "App/a/fr.lproj/A.strings",
        ]


class TestCheckAllTranslations:
    def test_checks_app_and_every_metadata_project(self, settings):
        session = FakeSession(default=FakeResponse(json_data={"translation_sets": []}))

        reports = lanes.check_all_translations(make_context(settings, session, RecordingRunner()), 90)

        assert [r.project_url for r in reports] == [
            APP_URL,
            settings.variant("wordpress").metadata_project_url,
            settings.variant("jetpack").metadata_project_url,
        ]
        assert all(len(r.locales) == len(settings.mag16) for r in reports)
        assert not any(r.passed for r in reports)
