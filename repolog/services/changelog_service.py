"""
Changelog generation service for repolog.

ChangelogGenerator ties the pieces together: it opens the repository,
indexes the tags, walks history from HEAD and fans every tag and commit
out to the renderers, in renderer-list order.

A run moves through these states, never backwards:

    INIT -> REPO_OPENED -> TAGS_INDEXED -> HEADER_EMITTED
         -> FOOTER_EMITTED -> CLOSED   (or ABORTED on a traversal failure)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..dates import EPOCH
from ..domain import Commit
from ..exceptions import RepositoryIOError
from ..filters import CommitFilter, should_render
from ..infra import GitClient
from ..renderers import ChangeLogRenderer
from .tag_index import TagIndex, build_tag_index

logger = logging.getLogger(__name__)


class GenerationState(Enum):
    """Where a generator is in its lifecycle."""
    INIT = "init"
    REPO_OPENED = "repo_opened"
    TAGS_INDEXED = "tags_indexed"
    HEADER_EMITTED = "header_emitted"
    FOOTER_EMITTED = "footer_emitted"
    CLOSED = "closed"
    ABORTED = "aborted"


@dataclass
class GenerationResult:
    """Result of a generation run."""
    commits_seen: int = 0
    commits_before_cutoff: int = 0
    commits_filtered: int = 0
    commits_rendered: int = 0
    tags_rendered: int = 0
    aborted: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when every renderer received the full changelog."""
        return not self.aborted and not self.errors

    def to_dict(self) -> dict:
        return {
            'commits_seen': self.commits_seen,
            'commits_before_cutoff': self.commits_before_cutoff,
            'commits_filtered': self.commits_filtered,
            'commits_rendered': self.commits_rendered,
            'tags_rendered': self.tags_rendered,
            'aborted': self.aborted,
            'complete': self.complete,
            'errors': list(self.errors),
        }


def to_epoch_seconds(moment: Optional[datetime]) -> int:
    """Seconds since the epoch for ``moment``; naive datetimes are UTC."""
    if moment is None:
        moment = EPOCH
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


class ChangelogGenerator:
    """
    Generates a changelog into one or more renderers.

    Example:
        generator = ChangelogGenerator(
            renderers=[PlainTextRenderer("target", "changelog.txt")],
            commit_filters=default_filters(),
        )
        generator.open_repository(".")
        result = generator.generate("My project changelog")
        if not result.complete:
            print("Some changelogs may be incomplete")

    Args:
        renderers: Output formats, driven in list order
        commit_filters: Ordered filter chain; None means no filtering
        git_client: Repository opener (creates default if None)
    """

    def __init__(
        self,
        renderers: Sequence[ChangeLogRenderer],
        commit_filters: Optional[Sequence[CommitFilter]] = None,
        git_client: Optional[GitClient] = None,
    ):
        self.renderers = list(renderers)
        self.commit_filters = list(commit_filters) if commit_filters is not None else []
        self.git = git_client or GitClient()
        self.state = GenerationState.INIT
        self.repository = None
        self.tag_index: Optional[TagIndex] = None
        self._walk = None
        self._failed: set = set()

    # =========================================================================
    # SETUP
    # =========================================================================

    def open_repository(
        self,
        start_path: Union[str, Path] = ".",
        path_filter: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Open the repository containing ``start_path`` and index its tags.

        Args:
            start_path: Where to start the upward search for a repository
            path_filter: Only walk commits that change this path

        Raises:
            NoRepositoryFound: No repository at or above ``start_path``
            RepositoryIOError: The repository exists but cannot be read
            ValueError: ``path_filter`` or a filter's directory is absolute and
                outside the working tree
        """
        if self.state is not GenerationState.INIT:
            raise RuntimeError(f"Repository already opened (state: {self.state.value})")

        logger.debug("About to open git repository.")
        repository = self.git.open(start_path)
        try:
            head = repository.resolve_head()
            self.state = GenerationState.REPO_OPENED
            logger.debug(f"Opened {repository}. About to load the commits.")
            walk = repository.walk(head, path_filter)
            try:
                logger.debug("Loaded commits. About to load the tags.")
                self.tag_index = build_tag_index(repository)
                for commit_filter in self.commit_filters:
                    commit_filter.bind(repository)
            except BaseException:
                walk.close()
                raise
        except BaseException:
            self.state = GenerationState.INIT
            repository.close()
            raise

        self.repository = repository
        self._walk = walk
        self.state = GenerationState.TAGS_INDEXED
        logger.debug(f"Loaded tag map: {self.tag_index}")

    def close(self) -> None:
        """
        Release the history walk and repository without generating.

        Renderers are not touched. Safe to call at any time, including
        after generate().
        """
        self._close_walk()
        if self.state is GenerationState.TAGS_INDEXED:
            self.state = GenerationState.CLOSED

    def __enter__(self) -> 'ChangelogGenerator':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(
        self,
        report_title: str,
        include_commits_after: Optional[datetime] = None,
    ) -> GenerationResult:
        """
        Render the changelog.

        Commits at or before ``include_commits_after`` are skipped entirely.
        For every other commit its tags are rendered first, whether or not
        the commit itself passes the filter chain; the commit is rendered
        only if it does.

        Renderer failures are logged and recorded in the result; a failing
        renderer gets no further render calls but is still closed. Footer
        and close always reach every renderer and the history walk is
        always released.

        Args:
            report_title: Title passed to every renderer's header
            include_commits_after: Exclusive lower bound (None = epoch)

        Returns:
            GenerationResult with counts and any errors
        """
        if self.state is not GenerationState.TAGS_INDEXED:
            raise RuntimeError(f"open_repository() must succeed before generate() (state: {self.state.value})")

        result = GenerationResult()
        cutoff = to_epoch_seconds(include_commits_after)

        try:
            self._broadcast(result, "render_header", report_title)
            self.state = GenerationState.HEADER_EMITTED
            try:
                self._render_history(result, cutoff)
            except RepositoryIOError as e:
                result.aborted = True
                result.errors.append(str(e))
                logger.warning(f"Error walking history; changelogs will be incomplete: {e}")
            self._broadcast(result, "render_footer")
            self.state = GenerationState.FOOTER_EMITTED
        finally:
            self._close_walk()
            self._close_renderers(result)
            self.state = GenerationState.ABORTED if result.aborted else GenerationState.CLOSED

        logger.debug(
            f"Rendered {result.commits_rendered} of {result.commits_seen} commits "
            f"and {result.tags_rendered} tags"
        )
        return result

    def _render_history(self, result: GenerationResult, cutoff: int) -> None:
        for commit in self._walk:
            result.commits_seen += 1
            if commit.commit_time <= cutoff:
                result.commits_before_cutoff += 1
                continue

            for tag in self.tag_index.tags_for(commit.id):
                self._broadcast(result, "render_tag", tag)
                result.tags_rendered += 1

            if self._show(commit, result):
                self._broadcast(result, "render_commit", commit)
                result.commits_rendered += 1
            else:
                result.commits_filtered += 1

    def _show(self, commit: Commit, result: GenerationResult) -> bool:
        try:
            return should_render(commit, self.repository, self.commit_filters)
        except Exception as e:
            message = f"Error filtering commit {commit.short_id}; leaving it out: {e}"
            logger.error(message)
            result.errors.append(message)
            return False

    def _broadcast(self, result: GenerationResult, method: str, *args) -> None:
        for renderer in self._live_renderers():
            try:
                getattr(renderer, method)(*args)
            except Exception as e:
                self._failed.add(id(renderer))
                message = f"{renderer.name} failed in {method}: {e}"
                logger.warning(message)
                result.errors.append(message)

    def _live_renderers(self) -> List[ChangeLogRenderer]:
        return [r for r in self.renderers if id(r) not in self._failed]

    def _close_walk(self) -> None:
        walk, self._walk = self._walk, None
        repository, self.repository = self.repository, None
        try:
            if walk is not None:
                walk.close()
        finally:
            if repository is not None:
                repository.close()

    def _close_renderers(self, result: GenerationResult) -> None:
        for renderer in self.renderers:
            try:
                renderer.close()
            except Exception as e:
                message = f"{renderer.name} failed to close: {e}"
                logger.warning(message)
                result.errors.append(message)


def generate_changelog(
    start_path: Union[str, Path],
    renderers: Sequence[ChangeLogRenderer],
    report_title: str,
    include_commits_after: Optional[datetime] = None,
    commit_filters: Optional[Sequence[CommitFilter]] = None,
    path_filter: Optional[Union[str, Path]] = None,
    git_client: Optional[GitClient] = None,
) -> GenerationResult:
    """
    Open the repository at ``start_path`` and generate in one call.

    Raises the same exceptions as ``ChangelogGenerator.open_repository``;
    when it raises, no renderer has been called.
    """
    generator = ChangelogGenerator(renderers, commit_filters, git_client)
    generator.open_repository(start_path, path_filter)
    return generator.generate(report_title, include_commits_after)

