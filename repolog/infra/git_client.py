"""
Git client infrastructure for repolog.

Wraps GitPython so that the rest of the package only ever sees repolog
domain objects. All repository access goes through this module, making it:
- Easy to replace with a fake in tests
- Consistent in error handling (backend errors become repolog errors)
- Isolated from the changelog logic
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Union

from git import Repo
from git.exc import (
    BadName,
    BadObject,
    GitError,
    InvalidGitRepositoryError,
    NoSuchPathError,
)

from ..domain import Commit, Identity, Tag
from ..exceptions import (
    NoRepositoryFound,
    NotAnnotatedTagError,
    RepositoryIOError,
    UnresolvedTagError,
)

logger = logging.getLogger(__name__)

# Errors GitPython raises for unreadable objects or failed git processes
BACKEND_ERRORS = (GitError, BadObject, ValueError, OSError)


def _text(value: Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def _identity(actor) -> Identity:
    if actor is None:
        return Identity(name="")
    return Identity(name=actor.name or "", email=actor.email or "")


def commit_from_git(raw) -> Commit:
    """Build a domain Commit from a GitPython commit object."""
    return Commit(
        id=raw.hexsha,
        short_message=_text(raw.summary).strip(),
        full_message=_text(raw.message).rstrip(),
        author=_identity(raw.author),
        commit_time=int(raw.committed_date),
        parents=tuple(parent.hexsha for parent in raw.parents),
    )


class HistoryWalk:
    """
    Lazy, single-pass sequence of commits reachable from a head.

    Commits come out in ``git rev-list`` order: newest first, parents
    after all of their children. The walk holds a running ``rev-list``
    process, so it must be closed once consumed; it is also a context
    manager.

    Example:
        with repository.walk(head) as walk:
            for commit in walk:
                print(commit.short_message)
    """

    def __init__(self, source=None, description: str = "HEAD"):
        self._source = source
        self._iterator: Optional[Iterator[Commit]] = None
        self._started = False
        self._closed = False
        self.description = description

    def __iter__(self) -> Iterator[Commit]:
        if self._started or self._closed:
            raise RuntimeError("A history walk can only be iterated once")
        self._started = True
        self._iterator = self._commits()
        return self._iterator

    def _commits(self) -> Iterator[Commit]:
        if self._source is None:
            return
        try:
            for raw in self._source:
                yield commit_from_git(raw)
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error walking history from {self.description}: {e}") from e

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the traversal resources. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._iterator is not None:
            self._iterator.close()
            self._iterator = None
        close_source = getattr(self._source, 'close', None)
        if close_source is not None:
            close_source()
        self._source = None

    def __enter__(self) -> 'HistoryWalk':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class GitRepository:
    """
    Handle on an opened git repository.

    Provides exactly what the changelog engine needs from the backend:
    head resolution, history walks, annotated tag lookup and per-commit
    changed paths.
    """

    def __init__(self, repo: Repo):
        self._repo = repo

    @property
    def git_dir(self) -> str:
        return str(self._repo.git_dir)

    @property
    def working_dir(self) -> Optional[str]:
        """Root of the working tree, or None for a bare repository."""
        if self._repo.bare:
            return None
        return str(self._repo.working_tree_dir)

    def resolve_head(self) -> Optional[str]:
        """
        Return the id of the commit HEAD points at.

        Returns None when the repository has no commits yet.
        """
        try:
            if not self._repo.head.is_valid():
                logger.debug(f"HEAD of {self.git_dir} does not resolve; repository is empty")
                return None
            return self._repo.head.commit.hexsha
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error resolving HEAD in {self.git_dir}: {e}") from e

    def relative_path(self, path: Union[str, Path]) -> str:
        """
        Convert ``path`` to a posix path relative to the repository root.

        Relative paths are taken as already relative to the root.

        Raises:
            ValueError: If an absolute path lies outside the working tree
        """
        candidate = Path(path)
        if candidate.is_absolute():
            if self.working_dir is None:
                raise ValueError(f"Cannot scope a bare repository to {path}")
            candidate = candidate.resolve().relative_to(Path(self.working_dir).resolve())
        relative = candidate.as_posix()
        return "" if relative == "." else relative

    def walk(self, head: Optional[str], path_filter: Optional[Union[str, Path]] = None) -> HistoryWalk:
        """
        Start a history walk from ``head``.

        Args:
            head: Commit id to start from, or None for an empty repository
            path_filter: Only yield commits that change this path

        Returns:
            HistoryWalk that yields nothing when ``head`` is None
        """
        if head is None:
            return HistoryWalk(None, description="empty repository")

        paths = self.relative_path(path_filter) if path_filter else ""
        description = f"{head[:7]} -- {paths}" if paths else head[:7]
        try:
            source = self._repo.iter_commits(head, paths=paths)
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error starting history walk from {description}: {e}") from e
        logger.debug(f"Started history walk from {description}")
        return HistoryWalk(source, description=description)

    def tag_names(self) -> List[str]:
        """Names of all tag references, sorted by name."""
        try:
            return sorted(ref.name for ref in self._repo.tags)
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error listing tags in {self.git_dir}: {e}") from e

    def resolve_tag(self, name: str) -> Tag:
        """
        Resolve a tag reference to an annotated tag.

        Raises:
            NotAnnotatedTagError: The reference points directly at a commit
            UnresolvedTagError: The reference or its object cannot be read
        """
        ref_path = f"refs/tags/{name}"
        try:
            ref = self._repo.tags[name]
            obj = ref.object
        except (IndexError, BadName, BadObject, ValueError) as e:
            raise UnresolvedTagError(ref_path, str(e)) from e
        except (GitError, OSError) as e:
            raise RepositoryIOError(f"Error reading {ref_path}: {e}") from e

        if obj.type != 'tag':
            raise NotAnnotatedTagError(ref_path)

        try:
            return Tag(
                name=_text(obj.tag),
                target_id=obj.object.hexsha,
                tagger=_identity(obj.tagger),
                tag_time=obj.tagged_date,
                message=_text(obj.message or "").strip(),
            )
        except (BadName, BadObject, ValueError) as e:
            raise UnresolvedTagError(ref_path, str(e)) from e

    def changed_paths(self, commit: Commit) -> List[str]:
        """
        Paths changed by ``commit`` relative to its first parent.

        Renames are detected; both the old and the new path of a rename are
        returned so moves into or out of a directory can be attributed.
        Other parents of a merge are ignored.
        """
        if commit.first_parent is None:
            return list(self.tree_paths(commit))

        try:
            parent = self._repo.commit(commit.first_parent)
            current = self._repo.commit(commit.id)
            diffs = parent.diff(current, M=True)
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error diffing {commit.short_id} against its parent: {e}") from e

        paths: List[str] = []
        for diff in diffs:
            for path in (diff.a_path, diff.b_path):
                if path and path not in paths:
                    paths.append(path)
        return paths

    def tree_paths(self, commit: Commit) -> Iterator[str]:
        """Every non-directory entry of the commit's tree, recursively."""
        try:
            tree = self._repo.commit(commit.id).tree
            for item in tree.traverse():
                if item.type != 'tree':
                    yield item.path
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error reading tree of {commit.short_id}: {e}") from e

    def close(self) -> None:
        self._repo.close()

    def __enter__(self) -> 'GitRepository':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"GitRepository({self.git_dir!r})"


class GitClient:
    """
    Opens git repositories.

    Example:
        client = GitClient()
        with client.open(".") as repository:
            head = repository.resolve_head()
    """

    def open(self, start_path: Union[str, Path]) -> GitRepository:
        """
        Open the repository containing ``start_path``.

        The search walks upward from ``start_path`` to the first directory
        that holds a repository.

        Raises:
            NoRepositoryFound: No repository at or above ``start_path``
            RepositoryIOError: A repository exists but cannot be opened
        """
        path = Path(start_path).expanduser()
        logger.debug(f"About to open git repository from {path}")
        try:
            repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NoRepositoryFound(str(path)) from e
        except BACKEND_ERRORS as e:
            raise RepositoryIOError(f"Error opening git repository at {path}: {e}") from e
        repository = GitRepository(repo)
        logger.debug(f"Opened {repository}")
        return repository
