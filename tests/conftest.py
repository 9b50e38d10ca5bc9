"""Shared fixtures: real git repositories built with GitPython."""

from pathlib import Path

import pytest
from git import Repo


class RepoBuilder:
    """Builds a git repository with fully controlled commit times."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as writer:
            writer.set_value("user", "name", "Jane Doe")
            writer.set_value("user", "email", "jane@example.com")
            writer.set_value("commit", "gpgsign", "false")
            writer.set_value("tag", "gpgsign", "false")

    def write(self, relative: str, content: str) -> None:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        self.repo.index.add([relative])

    def move(self, source: str, destination: str) -> None:
        target = self.path / destination
        target.parent.mkdir(parents=True, exist_ok=True)
        (self.path / source).rename(target)
        self.repo.index.remove([source])
        self.repo.index.add([destination])

    def commit(self, message, timestamp, files=None, parents=None, head=True):
        for relative, content in (files or {}).items():
            self.write(relative, content)
        date = f"{timestamp} +0000"
        return self.repo.index.commit(
            message,
            parent_commits=parents,
            head=head,
            author_date=date,
            commit_date=date,
        )

    def annotated_tag(self, name, commit, message=None):
        return self.repo.create_tag(name, ref=commit, message=message or f"Release {name}")

    def lightweight_tag(self, name, commit):
        return self.repo.create_tag(name, ref=commit)


@pytest.fixture
def repo_builder(tmp_path):
    """A fresh, empty repository under tmp_path/repo."""
    path = tmp_path / "repo"
    path.mkdir()
    builder = RepoBuilder(path)
    yield builder
    builder.repo.close()


@pytest.fixture
def merge_history(repo_builder):
    """
    A (root) <- S (side) ; B merges A and S ; C follows B.
    Tag v1 (annotated) on B, tag light (lightweight) on A.
    """
    b = repo_builder
    a = b.commit("Add readme", 1000, {"README.md": "hello\n"})
    s = b.commit("Add docs", 2000, {"docs/guide.md": "guide\n"}, parents=[a], head=False)
    merge = b.commit("Merge branch 'docs'", 3000, parents=[a, s])
    c = b.commit("Fix typo\n\nLonger explanation.", 4000, {"README.md": "hello!\n"})
    b.annotated_tag("v1", merge)
    b.lightweight_tag("light", a)
    return {"A": a, "S": s, "B": merge, "C": c}
