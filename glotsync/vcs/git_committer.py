"""Commit generated files with git."""

import glob
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..errors import PipelineError
from ..utils.process import run_command

logger = logging.getLogger(__name__)


class NothingToCommitError(PipelineError):
    """Raised when a commit was required but no path had changes."""


class GitCommitter:
    """Stages and commits a set of paths in a working tree."""

    def __init__(self, root: Optional[str] = None, runner: Callable = run_command):
        """
        Initialize the committer.

        Args:
            root: Working tree root; paths are relative to it
            runner: Callable running a command, `runner(command, cwd=..., success_codes=...)`
        """
        self.root = str(root or os.getcwd())
        self.runner = runner

    def expand_paths(self, paths: Union[str, Sequence[str]]) -> List[str]:
        """Expand glob patterns (`**` included) into existing root-relative paths."""
        if isinstance(paths, (str, Path)):
            paths = [paths]

        expanded = []
        for path in paths:
            path = str(path)
            absolute = path if os.path.isabs(path) else os.path.join(self.root, path)
            if any(c in path for c in "*?["):
                matches = sorted(glob.glob(absolute, recursive=True))
            else:
                matches = [absolute] if os.path.exists(absolute) else []
            if not matches:
                logger.debug("Nothing matches %s", path)
            for match in matches:
                relative = os.path.relpath(match, self.root)
                if relative not in expanded:
                    expanded.append(relative)
        return expanded

    def commit(
        self,
        paths: Union[str, Sequence[str]],
        message: str,
        allow_nothing_to_commit: bool = True,
    ) -> bool:
        """
        Commit the given paths.

        Args:
            paths: Files, directories or glob patterns
            message: Commit message
            allow_nothing_to_commit: Return False instead of failing when nothing changed

        Returns:
            True if a commit was created, False if there was nothing to commit

        Raises:
            NothingToCommitError: If nothing changed and that is not allowed
            CommandError: If git fails
        """
        files = self.expand_paths(paths)
        if files:
            self.runner(["git", "add", "--", *files], cwd=self.root)
            # exit code 1 means there are staged changes
            diff = self.runner(
                ["git", "diff", "--cached", "--quiet", "--", *files],
                cwd=self.root,
                success_codes=(0, 1),
            )
            has_changes = diff.returncode == 1
        else:
            has_changes = False

        if not has_changes:
            if not allow_nothing_to_commit:
                raise NothingToCommitError(f"Nothing to commit for: {message}")
            logger.info("Nothing to commit for '%s'", message)
            return False

        self.runner(["git", "commit", "-m", message, "--", *files], cwd=self.root)
        logger.info("Committed '%s' (%d paths)", message, len(files))
        return True
