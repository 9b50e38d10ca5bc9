"""
Tests for the GitPython-backed repository handle.

Every test builds a real repository in a temporary directory.
"""

from pathlib import Path

import pytest

from repolog.exceptions import (
    NoRepositoryFound,
    NotAnnotatedTagError,
    UnresolvedTagError,
)
from repolog.infra import GitClient, HistoryWalk


@pytest.fixture
def client():
    return GitClient()


class TestOpen:
    """Tests for repository discovery."""

    def test_open_from_root(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            assert Path(repository.working_dir).resolve() == repo_builder.path.resolve()

    def test_open_searches_upward(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path / "docs" / "guide.md") as repository:
            assert repository.resolve_head() == merge_history["C"].hexsha

    def test_no_repository(self, client, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(NoRepositoryFound) as excinfo:
            client.open(plain)
        assert excinfo.value.start_path == str(plain)

    def test_missing_path(self, client, tmp_path):
        with pytest.raises(NoRepositoryFound):
            client.open(tmp_path / "does-not-exist")


class TestHead:
    """Tests for head resolution."""

    def test_empty_repository_has_no_head(self, client, repo_builder):
        with client.open(repo_builder.path) as repository:
            assert repository.resolve_head() is None

    def test_empty_repository_walk_is_empty(self, client, repo_builder):
        with client.open(repo_builder.path) as repository:
            with repository.walk(repository.resolve_head()) as walk:
                assert list(walk) == []


class TestWalk:
    """Tests for history walks."""

    def test_newest_first(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            with repository.walk(repository.resolve_head()) as walk:
                ids = [commit.id for commit in walk]
        expected = [merge_history[name].hexsha for name in ("C", "B", "S", "A")]
        assert ids == expected

    def test_commit_fields(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            with repository.walk(repository.resolve_head()) as walk:
                commits = {commit.id: commit for commit in walk}

        c = commits[merge_history["C"].hexsha]
        assert c.short_message == "Fix typo"
        assert c.full_message == "Fix typo\n\nLonger explanation."
        assert c.author.name == "Jane Doe"
        assert c.author.email == "jane@example.com"
        assert c.commit_time == 4000
        assert c.parents == (merge_history["B"].hexsha,)

        merge = commits[merge_history["B"].hexsha]
        assert merge.parents == (merge_history["A"].hexsha, merge_history["S"].hexsha)
        assert merge.is_merge

        root = commits[merge_history["A"].hexsha]
        assert root.is_root

    def test_path_filter(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            with repository.walk(repository.resolve_head(), "docs") as walk:
                ids = [commit.id for commit in walk]
        assert ids == [merge_history["S"].hexsha]

    def test_absolute_path_filter(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            head = repository.resolve_head()
            with repository.walk(head, repo_builder.path / "README.md") as walk:
                ids = [commit.id for commit in walk]
        assert ids == [merge_history["C"].hexsha, merge_history["A"].hexsha]

    def test_single_pass(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            walk = repository.walk(repository.resolve_head())
            list(walk)
            with pytest.raises(RuntimeError):
                iter(walk)
            walk.close()

    def test_close_before_iteration(self):
        walk = HistoryWalk(iter([]))
        walk.close()
        walk.close()
        assert walk.closed
        with pytest.raises(RuntimeError):
            iter(walk)

    def test_close_part_way(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            walk = repository.walk(repository.resolve_head())
            first = next(iter(walk))
            walk.close()
        assert first.id == merge_history["C"].hexsha
        assert walk.closed


class TestTags:
    """Tests for tag resolution."""

    def test_tag_names_sorted(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            assert repository.tag_names() == ["light", "v1"]

    def test_annotated_tag(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            tag = repository.resolve_tag("v1")
        assert tag.name == "v1"
        assert tag.target_id == merge_history["B"].hexsha
        assert tag.tagger.name == "Jane Doe"
        assert tag.message == "Release v1"
        assert tag.tag_time is not None

    def test_lightweight_tag(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            with pytest.raises(NotAnnotatedTagError):
                repository.resolve_tag("light")

    def test_unknown_tag(self, client, merge_history, repo_builder):
        with client.open(repo_builder.path) as repository:
            with pytest.raises(UnresolvedTagError):
                repository.resolve_tag("nope")


class TestPaths:
    """Tests for changed paths and tree listing."""

    def test_tree_paths_of_root(self, client, repo_builder):
        root = repo_builder.commit("Initial", 1000, {"README.md": "x\n", "src/app/main.py": "print()\n"})
        with client.open(repo_builder.path) as repository:
            with repository.walk(root.hexsha) as walk:
                commit = next(iter(walk))
            assert sorted(repository.tree_paths(commit)) == ["README.md", "src/app/main.py"]

    def test_changed_paths_against_first_parent(self, client, repo_builder):
        repo_builder.commit("Initial", 1000, {"README.md": "x\n", "src/main.py": "a\n"})
        second = repo_builder.commit("Edit main", 2000, {"src/main.py": "b\n"})
        with client.open(repo_builder.path) as repository:
            with repository.walk(second.hexsha) as walk:
                commit = next(iter(walk))
            assert repository.changed_paths(commit) == ["src/main.py"]

    def test_rename_reports_both_paths(self, client, repo_builder):
        content = "".join(f"line {n}\n" for n in range(50))
        repo_builder.commit("Initial", 1000, {"lib/util.py": content})
        repo_builder.move("lib/util.py", "core/util.py")
        moved = repo_builder.commit("Move util", 2000)
        with client.open(repo_builder.path) as repository:
            with repository.walk(moved.hexsha) as walk:
                commit = next(iter(walk))
            assert sorted(repository.changed_paths(commit)) == ["core/util.py", "lib/util.py"]

    def test_relative_path(self, client, repo_builder):
        repo_builder.commit("Initial", 1000, {"README.md": "x\n"})
        with client.open(repo_builder.path) as repository:
            assert repository.relative_path("src/app") == "src/app"
            assert repository.relative_path(repo_builder.path / "src" / "app") == "src/app"
            assert repository.relative_path(".") == ""
            with pytest.raises(ValueError):
                repository.relative_path(repo_builder.path.parent / "elsewhere")
