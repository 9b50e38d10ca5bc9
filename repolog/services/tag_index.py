"""
Tag index for repolog.

Maps commit ids to the annotated tags that point at them. Built once per
generation run and only read afterwards.
"""

import logging
from typing import Dict, Iterator, List

from ..domain import Tag
from ..exceptions import NotAnnotatedTagError, UnresolvedTagError

logger = logging.getLogger(__name__)


class TagIndex:
    """
    Read-only mapping of commit id to tags, in index order.

    Every tag stored under a key has that key as its ``target_id``.
    """

    def __init__(self):
        self._by_commit: Dict[str, List[Tag]] = {}

    def add(self, tag: Tag) -> None:
        self._by_commit.setdefault(tag.target_id, []).append(tag)

    def tags_for(self, commit_id: str) -> List[Tag]:
        """Tags pointing at ``commit_id``; empty if there are none."""
        return list(self._by_commit.get(commit_id, ()))

    def __contains__(self, commit_id: str) -> bool:
        return commit_id in self._by_commit

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_commit)

    def __len__(self) -> int:
        return len(self._by_commit)

    def all_tags(self) -> List[Tag]:
        return [tag for tags in self._by_commit.values() for tag in tags]

    def to_dict(self) -> Dict[str, List[str]]:
        return {commit_id: [tag.name for tag in tags] for commit_id, tags in self._by_commit.items()}

    def __repr__(self) -> str:
        return f"TagIndex({self.to_dict()!r})"


def build_tag_index(repository) -> TagIndex:
    """
    Build the tag index for ``repository``.

    Tag references are visited in name order. Lightweight tags and
    references that cannot be resolved are skipped; backend I/O errors
    propagate as RepositoryIOError.

    Args:
        repository: An opened GitRepository (or anything with
            ``tag_names()`` and ``resolve_tag(name)``)

    Returns:
        TagIndex with tags in encounter order per commit
    """
    index = TagIndex()
    for name in repository.tag_names():
        try:
            tag = repository.resolve_tag(name)
        except NotAnnotatedTagError:
            logger.debug(f"Light-weight tags not supported. Skipping refs/tags/{name}")
            continue
        except UnresolvedTagError as e:
            logger.warning(f"Skipping tag: {e}")
            continue
        index.add(tag)
    return index
