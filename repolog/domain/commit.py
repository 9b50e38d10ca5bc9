"""
Commit domain object for repolog.

Commits are read-only snapshots of what the repository backend returned
while walking history. They carry no reference back to the backend.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Identity:
    """Name and email of an author, committer or tagger."""

    name: str
    email: str = ""

    def __str__(self) -> str:
        if self.email:
            return f"{self.name} <{self.email}>"
        return self.name

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'email': self.email}


@dataclass(frozen=True)
class Commit:
    """
    A single commit as seen by the changelog engine.

    Attributes:
        id: Full content hash (40 hex characters for SHA-1 repositories)
        short_message: First line of the message
        full_message: Complete message, trailing whitespace stripped
        author: Author identity
        commit_time: Committer timestamp in seconds since the epoch
        parents: Parent commit ids, first parent first
    """

    id: str
    short_message: str
    full_message: str
    author: Identity
    commit_time: int
    parents: Tuple[str, ...] = ()

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) >= 2

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def first_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def committed_at(self, tz=timezone.utc) -> datetime:
        """Commit time as an aware datetime in ``tz``."""
        return datetime.fromtimestamp(self.commit_time, tz=tz)

    def message(self, full: bool = False) -> str:
        return self.full_message if full else self.short_message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'short_message': self.short_message,
            'full_message': self.full_message,
            'author': self.author.to_dict(),
            'commit_time': self.commit_time,
            'parents': list(self.parents),
        }

    def __str__(self) -> str:
        return f"{self.short_id} {self.short_message}"
