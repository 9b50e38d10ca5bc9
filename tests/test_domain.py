"""Tests for domain objects."""

from datetime import datetime, timedelta, timezone

import pytest

from repolog.domain import Commit, Identity, Tag


def commit(parents=()):
    return Commit(
        id="0123456789abcdef0123456789abcdef01234567",
        short_message="Fix parser",
        full_message="Fix parser\n\nHandles empty input.",
        author=Identity("Jane Doe", "jane@example.com"),
        commit_time=1704189600,
        parents=tuple(parents),
    )


class TestIdentity:
    def test_str(self):
        assert str(Identity("Jane Doe", "jane@example.com")) == "Jane Doe <jane@example.com>"
        assert str(Identity("Jane Doe")) == "Jane Doe"


class TestCommit:
    """Tests for Commit."""

    def test_root(self):
        root = commit()
        assert root.is_root
        assert not root.is_merge
        assert root.first_parent is None
        assert root.parent_count == 0

    def test_merge(self):
        merge = commit(["a" * 40, "b" * 40])
        assert merge.is_merge
        assert merge.first_parent == "a" * 40

    def test_short_id_and_str(self):
        assert commit().short_id == "0123456"
        assert str(commit()) == "0123456 Fix parser"

    def test_message(self):
        assert commit().message() == "Fix parser"
        assert commit().message(full=True).endswith("Handles empty input.")

    def test_committed_at(self):
        assert commit().committed_at() == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert commit().committed_at(timezone(timedelta(hours=1))).hour == 11

    def test_immutable(self):
        with pytest.raises(AttributeError):
            commit().id = "other"

    def test_to_dict(self):
        data = commit(["a" * 40]).to_dict()
        assert data["author"] == {"name": "Jane Doe", "email": "jane@example.com"}
        assert data["parents"] == ["a" * 40]


class TestTag:
    """Tests for Tag."""

    def test_tagged_at(self):
        tag = Tag("v1", "a" * 40, Identity("Jane Doe"), tag_time=0)
        assert tag.tagged_at() == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert Tag("v1", "a" * 40, Identity("Jane Doe")).tagged_at() is None

    def test_str_and_repr(self):
        tag = Tag("v1", "a" * 40, Identity("Jane Doe"))
        assert str(tag) == "v1"
        assert repr(tag) == "Tag('v1', target='aaaaaaa')"

    def test_equality(self):
        assert Tag("v1", "a" * 40, Identity("J")) == Tag("v1", "a" * 40, Identity("J"))
