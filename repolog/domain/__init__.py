"""
Domain layer for repolog.

Contains pure value objects with no I/O:
- Commit: A commit read from the repository while walking history
- Tag: An annotated tag and the commit it points at
- Identity: Author, committer or tagger name and email

These objects are immutable and provide ``to_dict`` for JSON
serialization.
"""

from .commit import Commit, Identity
from .tag import Tag

__all__ = [
    'Commit',
    'Identity',
    'Tag',
]
