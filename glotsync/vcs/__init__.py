"""Version control helpers."""

from .git_committer import GitCommitter, NothingToCommitError

__all__ = ["GitCommitter", "NothingToCommitError"]
