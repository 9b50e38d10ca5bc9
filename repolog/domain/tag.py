"""
Tag domain object for repolog.

Only annotated tags are represented. A lightweight tag has no tag object
of its own and never becomes a ``Tag``; the tag index skips it.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .commit import Identity


@dataclass(frozen=True)
class Tag:
    """
    An annotated tag.

    Attributes:
        name: Tag name without the ``refs/tags/`` prefix
        target_id: Id of the object the tag points at
        tagger: Who created the tag
        tag_time: Tagger timestamp in seconds since the epoch
        message: Tag message (may be empty)
    """

    name: str
    target_id: str
    tagger: Identity
    tag_time: Optional[int] = None
    message: str = ""

    def tagged_at(self, tz=timezone.utc) -> Optional[datetime]:
        if self.tag_time is None:
            return None
        return datetime.fromtimestamp(self.tag_time, tz=tz)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'target_id': self.target_id,
            'tagger': self.tagger.to_dict(),
            'tag_time': self.tag_time,
            'message': self.message,
        }

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Tag({self.name!r}, target={self.target_id[:7]!r})"
