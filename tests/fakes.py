"""In-memory stand-ins for the git backend and renderers."""

from typing import Dict, Iterable, List, Optional

from repolog.domain import Commit, Identity, Tag
from repolog.exceptions import (
    NotAnnotatedTagError,
    RepositoryIOError,
    UnresolvedTagError,
)
from repolog.renderers import ChangeLogRenderer

AUTHOR = Identity("Jane Doe", "jane@example.com")


def make_commit(commit_id: str, commit_time: int, parents: Iterable[str] = (), message: Optional[str] = None) -> Commit:
    message = message or f"Commit {commit_id}"
    return Commit(
        id=commit_id,
        short_message=message.splitlines()[0],
        full_message=message,
        author=AUTHOR,
        commit_time=commit_time,
        parents=tuple(parents),
    )


def make_tag(name: str, target_id: str, tag_time: int = 0) -> Tag:
    return Tag(name=name, target_id=target_id, tagger=AUTHOR, tag_time=tag_time, message=f"Release {name}")


class FakeWalk:
    def __init__(self, commits: List[Commit], fail_after: Optional[int] = None):
        self.commits = commits
        self.fail_after = fail_after
        self.closed = False
        self.iterated = 0

    def __iter__(self):
        for count, commit in enumerate(self.commits):
            if self.fail_after is not None and count >= self.fail_after:
                raise RepositoryIOError("object database went away")
            self.iterated += 1
            yield commit

    def close(self):
        self.closed = True


class FakeRepository:
    """Repository whose history, tags and changed paths are given up front."""

    def __init__(
        self,
        commits: List[Commit] = (),
        tags: List[Tag] = (),
        lightweight: Iterable[str] = (),
        broken: Iterable[str] = (),
        changed: Optional[Dict[str, List[str]]] = None,
        fail_walk_after: Optional[int] = None,
        working_dir: Optional[str] = "/work/repo",
    ):
        self.commits = list(commits)
        self.tags = {tag.name: tag for tag in tags}
        self.lightweight = set(lightweight)
        self.broken = set(broken)
        self.changed = changed or {}
        self.fail_walk_after = fail_walk_after
        self.working_dir = working_dir
        self.walks: List[FakeWalk] = []
        self.walk_args = []
        self.closed = False

    def resolve_head(self):
        return self.commits[0].id if self.commits else None

    def walk(self, head, path_filter=None):
        self.walk_args.append((head, path_filter))
        walk = FakeWalk(self.commits if head else [], self.fail_walk_after)
        self.walks.append(walk)
        return walk

    def relative_path(self, path):
        return str(path).strip("/")

    def tag_names(self):
        return sorted(set(self.tags) | self.lightweight | self.broken)

    def resolve_tag(self, name):
        if name in self.lightweight:
            raise NotAnnotatedTagError(f"refs/tags/{name}")
        if name in self.broken:
            raise UnresolvedTagError(f"refs/tags/{name}", "missing object")
        return self.tags[name]

    def changed_paths(self, commit):
        value = self.changed[commit.id]
        if isinstance(value, Exception):
            raise value
        return value

    def tree_paths(self, commit):
        value = self.changed[commit.id]
        if isinstance(value, Exception):
            raise value
        return iter(value)

    def close(self):
        self.closed = True


class FakeGitClient:
    def __init__(self, repository: Optional[FakeRepository] = None, error: Optional[Exception] = None):
        self.repository = repository
        self.error = error
        self.opened = []

    def open(self, start_path):
        self.opened.append(start_path)
        if self.error is not None:
            raise self.error
        return self.repository


class RecordingRenderer(ChangeLogRenderer):
    """Records every lifecycle call as a tuple."""

    def __init__(self, fail_on: Optional[str] = None):
        super().__init__()
        self.events = []
        self.fail_on = fail_on

    def _record(self, event):
        self.events.append(event)
        if self.fail_on == event[0]:
            raise IOError(f"disk full during {event[0]}")

    def render_header(self, report_title):
        self._record(("header", report_title))

    def render_tag(self, tag):
        self._record(("tag", tag.name))

    def render_commit(self, commit):
        self._record(("commit", commit.id))

    def render_footer(self):
        self._record(("footer",))

    def close(self):
        self._record(("close",))

    @property
    def body(self):
        """Tag and commit events only."""
        return [e for e in self.events if e[0] in ("tag", "commit")]
