import subprocess
from pathlib import Path

import pytest

from glotsync.models.locales import LocaleTable, ManualStringsTable


class FakeResponse:
    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self.encoding = None
        self._json = json_data

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """Stands in for requests.Session, answering GETs from a url -> response table."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        response = self.responses.get(url, self.default)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return FakeResponse(status_code=404)
        return response


class RecordingRunner:
    """Records commands instead of running them."""

    def __init__(self, staged_changes=True, fail_on=None):
        self.commands = []
        self.staged_changes = staged_changes
        self.fail_on = fail_on

    def __call__(self, command, cwd=None, success_codes=(0,)):
        command = list(command)
        self.commands.append((command, cwd))
        if self.fail_on and command[:len(self.fail_on)] == self.fail_on:
            from glotsync.errors import CommandError
            raise CommandError(command, 1, stderr="boom")
        returncode = 0
        if command[:3] == ["git", "diff", "--cached"]:
            returncode = 1 if self.staged_changes else 0
        return subprocess.CompletedProcess(command, returncode, stdout="", stderr="")

    def commands_starting_with(self, *prefix):
        return [c for c, _ in self.commands if c[:len(prefix)] == list(prefix)]


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def locale_table():
    return LocaleTable.from_mapping({"fr": "fr", "zh-cn": "zh-Hans"})


@pytest.fixture
def manual_table():
    return ManualStringsTable.from_mapping({
        "App/a/en.lproj/A.strings": "x.",
        "App/b/en.lproj/B.strings": "y.",
    })
