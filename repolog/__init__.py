"""
repolog - Changelogs from git history.

repolog walks the commit history of the repository containing a path and
renders it through any number of output formats, with annotated tags
marking the commits they point at.

Quick Start:
    import repolog

    renderers = [
        repolog.PlainTextRenderer("build", "changelog.txt"),
        repolog.JsonRenderer("build", "changelog.json"),
    ]
    result = repolog.generate_changelog(".", renderers, "My project changelog")
    if not result.complete:
        print("Some changelogs may be incomplete")

Domain Objects:
    Commit - A commit read while walking history
    Tag - An annotated tag and its target commit

Filters:
    MergeCommitFilter - Leaves out merge commits (the default chain)
    PathCommitFilter - Keeps only commits touching a subdirectory

Renderers:
    PlainTextRenderer, MarkdownRenderer, SimpleHtmlRenderer,
    JsonRenderer, LoggerRenderer
"""

__version__ = "0.3.0"

from .domain import Commit, Identity, Tag

from .exceptions import (
    RepologError,
    NoRepositoryFound,
    RepositoryIOError,
)

from .filters import (
    CommitFilter,
    MergeCommitFilter,
    PathCommitFilter,
    default_filters,
    should_render,
)

from .renderers import (
    ChangeLogRenderer,
    RenderOptions,
    PlainTextRenderer,
    MarkdownRenderer,
    SimpleHtmlRenderer,
    JsonRenderer,
    LoggerRenderer,
)

from .services import (
    ChangelogGenerator,
    GenerationResult,
    generate_changelog,
    build_tag_index,
)

__all__ = [
    "__version__",
    # Domain objects
    "Commit",
    "Identity",
    "Tag",
    # Errors
    "RepologError",
    "NoRepositoryFound",
    "RepositoryIOError",
    # Filters
    "CommitFilter",
    "MergeCommitFilter",
    "PathCommitFilter",
    "default_filters",
    "should_render",
    # Renderers
    "ChangeLogRenderer",
    "RenderOptions",
    "PlainTextRenderer",
    "MarkdownRenderer",
    "SimpleHtmlRenderer",
    "JsonRenderer",
    "LoggerRenderer",
    # Services
    "ChangelogGenerator",
    "GenerationResult",
    "generate_changelog",
    "build_tag_index",
]
