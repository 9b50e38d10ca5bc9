"""
Infrastructure layer for repolog.

Contains the abstraction over the version-control backend:
- GitClient: Opens repositories by upward search
- GitRepository: Head resolution, tags, diffs and history walks
- HistoryWalk: Lazy single-pass commit sequence with explicit close

These provide clean interfaces that can be faked for testing.
"""

from .git_client import GitClient, GitRepository, HistoryWalk, commit_from_git

__all__ = [
    'GitClient',
    'GitRepository',
    'HistoryWalk',
    'commit_from_git',
]
