"""
Service layer for repolog.

Contains the changelog logic that orchestrates domain objects and
infrastructure:
- ChangelogGenerator: Open, index tags, walk, filter and render
- build_tag_index: Commit id -> annotated tags

Services are the primary API for commands to use.
"""

from .changelog_service import (
    ChangelogGenerator,
    GenerationResult,
    GenerationState,
    generate_changelog,
)
from .tag_index import TagIndex, build_tag_index

__all__ = [
    'ChangelogGenerator',
    'GenerationResult',
    'GenerationState',
    'generate_changelog',
    'TagIndex',
    'build_tag_index',
]
