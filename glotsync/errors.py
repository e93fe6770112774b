"""Exception hierarchy for the localization lanes."""

from typing import Optional


class PipelineError(Exception):
    """Base class for every error a lane reports to the user."""


class ConfigurationError(PipelineError):
    """Invalid tables, paths or options, detected before any side effect."""


class StringsSyntaxError(PipelineError):
    """A .strings file could not be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = path or "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class ExternalCallError(PipelineError):
    """A call to an external service or tool failed."""


class GlotPressError(ExternalCallError):
    """GlotPress could not be reached or returned unusable content."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class CommandError(ExternalCallError):
    """An external command exited with a failure status."""

    def __init__(self, command: list, returncode: int, stdout: str = "", stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip()
        message = f"Command '{' '.join(command)}' failed with exit code {returncode}"
        if detail:
            message = f"{message}:\n{detail}"
        super().__init__(message)
