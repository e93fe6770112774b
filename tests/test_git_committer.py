import pytest

from glotsync.vcs import GitCommitter, NothingToCommitError

from conftest import RecordingRunner, write_file


class TestGitCommitter:
    def test_expands_recursive_globs(self, tmp_path):
        write_file(tmp_path / "metadata" / "en-US" / "name.txt", "WordPress")
        write_file(tmp_path / "metadata" / "fr-FR" / "name.txt", "WordPress")
        write_file(tmp_path / "metadata" / "fr-FR" / "image.png", "")

        paths = GitCommitter(str(tmp_path)).expand_paths("metadata/**/*.txt")

        assert paths == ["metadata/en-US/name.txt", "metadata/fr-FR/name.txt"]

    def test_commits_only_given_paths(self, tmp_path):
        write_file(tmp_path / "fr.lproj" / "Localizable.strings", "")
        runner = RecordingRunner()

        assert GitCommitter(str(tmp_path), runner=runner).commit(["*.lproj/Localizable.strings"], "Update")

        assert [c for c, _ in runner.commands] == [
            ["git", "add", "--", "fr.lproj/Localizable.strings"],
            ["git", "diff", "--cached", "--quiet", "--", "fr.lproj/Localizable.strings"],
            ["git", "commit", "-m", "Update", "--", "fr.lproj/Localizable.strings"],
        ]
        assert all(cwd == str(tmp_path) for _, cwd in runner.commands)

    def test_nothing_matching_is_nothing_to_commit(self, tmp_path):
        runner = RecordingRunner()

        assert GitCommitter(str(tmp_path), runner=runner).commit([], "Update") is False
        assert runner.commands == []

    def test_nothing_to_commit_can_be_an_error(self, tmp_path):
        write_file(tmp_path / "a.txt", "a")
        runner = RecordingRunner(staged_changes=False)

        with pytest.raises(NothingToCommitError):
            GitCommitter(str(tmp_path), runner=runner).commit("a.txt", "Update", allow_nothing_to_commit=False)
