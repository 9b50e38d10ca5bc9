"""
Commit filters for repolog.

A filter decides whether a commit is rendered. Filters are combined as an
ordered chain: a commit is rendered only if every filter accepts it, and
evaluation stops at the first rejection.

Filters only read from the repository; they never modify it.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .domain import Commit

logger = logging.getLogger(__name__)


class CommitFilter:
    """Base class for commit filters."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def bind(self, repository) -> None:
        """
        Prepare the filter for ``repository`` before any commit is checked.

        Raises:
            ValueError: The filter cannot apply to this repository
        """

    def render_commit(self, commit: Commit, repository) -> bool:
        """Return True if the commit should be rendered; otherwise False."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.name}()"


class MergeCommitFilter(CommitFilter):
    """Filters out commits that are simply the result of merging branches."""

    def render_commit(self, commit: Commit, repository) -> bool:
        # A merge has two or more parents. Ordinary commits have one,
        # and the first commit in a repository has none.
        return commit.parent_count < 2


class PathCommitFilter(CommitFilter):
    """
    Accepts only commits that touch files under a subdirectory.

    For a root commit the whole tree is scanned. For any other commit the
    diff against the first parent is used, with rename detection; other
    parents of a merge are ignored.

    If the diff cannot be computed the commit is accepted rather than
    dropped. Every such fail-open decision is logged as a warning and
    counted in ``fail_open_count``.

    Args:
        subdirectory: Directory to scope to, relative to the repository
            root or absolute
    """

    def __init__(self, subdirectory: Union[str, Path]):
        self.subdirectory = subdirectory
        self.fail_open_count = 0
        self._bound_to = None
        self._prefix: Optional[str] = None

    def bind(self, repository) -> None:
        """
        Resolve the subdirectory against ``repository`` once.

        Raises:
            ValueError: An absolute subdirectory lies outside the working tree
        """
        if repository.working_dir is None:
            self._prefix = None
        else:
            relative = repository.relative_path(self.subdirectory)
            self._prefix = f"{relative.rstrip('/')}/" if relative else None
        self._bound_to = repository

    def _in_scope(self, path: str, prefix: Optional[str]) -> bool:
        return prefix is None or path.startswith(prefix)

    def render_commit(self, commit: Commit, repository) -> bool:
        logger.debug(f"[{self.name}] Scoped to {self.subdirectory}; checking commit {commit.id}")

        if repository.working_dir is None:
            logger.info(f"[{self.name}] Repository is not local. Automatically accepts commit: {commit.id}")
            return True

        if self._bound_to is not repository:
            self.bind(repository)
        prefix = self._prefix

        if commit.is_root:
            logger.debug(f"[{self.name}] Commit has no parents: {commit.id}")
            try:
                for path in repository.tree_paths(commit):
                    if self._in_scope(path, prefix):
                        logger.debug(f"[{self.name}] Accepted commit {commit.id} for {path}")
                        return True
            except Exception as e:
                logger.error(f"[{self.name}] Could not read tree of {commit.id}: {e}")
            logger.debug(f"[{self.name}] Commit not accepted: {commit.id}")
            return False

        try:
            changed = repository.changed_paths(commit)
        except Exception as e:
            self.fail_open_count += 1
            logger.warning(
                f"[{self.name}] Diff failed for {commit.id}; accepting commit (fail-open): {e}"
            )
            return True

        for path in changed:
            logger.debug(f"[{self.name}] File changed in this commit: {path}")
            if self._in_scope(path, prefix):
                logger.debug(f"[{self.name}] Accepted commit {commit.id} for {path}")
                return True

        logger.debug(f"[{self.name}] Commit not accepted: {commit.id}")
        return False

    def __repr__(self) -> str:
        return f"{self.name}({str(self.subdirectory)!r})"


DEFAULT_COMMIT_FILTERS = (MergeCommitFilter(),)


def default_filters() -> list:
    """A fresh list holding the default filter chain."""
    return list(DEFAULT_COMMIT_FILTERS)


def should_render(commit: Commit, repository, filters: Iterable[CommitFilter]) -> bool:
    """
    Return True if every filter in the chain accepts ``commit``.

    Stops at the first filter that rejects it, so later (possibly
    expensive) filters are not evaluated.
    """
    for commit_filter in filters:
        if not commit_filter.render_commit(commit, repository):
            logger.debug(f"Commit {commit.short_id} filtered out by {commit_filter.name}")
            return False
    return True
