"""
Renderer protocol for repolog.

Every output format implements the same five-call lifecycle:

    render_header(title)    exactly once, first
    render_tag(tag)         zero or more times, before the commit it decorates
    render_commit(commit)   zero or more times, newest commit first
    render_footer()         exactly once, after the last tag or commit
    close()                 exactly once, last; safe even if nothing rendered

Renderers are driven sequentially by ChangelogGenerator and must not
touch the repository.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Optional, TextIO, Union

from ..domain import Commit, Tag

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


@dataclass(frozen=True)
class RenderOptions:
    """
    Formatting options passed to each renderer when it is created.

    Attributes:
        date_format: strftime pattern for commit and tag dates
        full_message: Render the full commit message instead of the first line
        timezone: Zone dates are shown in
    """

    date_format: str = DEFAULT_DATE_FORMAT
    full_message: bool = False
    timezone: tzinfo = field(default=timezone.utc)

    def format_timestamp(self, seconds: Optional[int]) -> str:
        if seconds is None:
            return ""
        return datetime.fromtimestamp(seconds, tz=self.timezone).strftime(self.date_format)

    def commit_message(self, commit: Commit) -> str:
        return commit.message(full=self.full_message)


class ChangeLogRenderer:
    """
    Base class for changelog output formats.

    Subclasses override the render methods they need; the defaults do
    nothing.
    """

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def render_header(self, report_title: str) -> None:
        pass

    def render_tag(self, tag: Tag) -> None:
        pass

    def render_commit(self, commit: Commit) -> None:
        pass

    def render_footer(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.name}()"


class FileRenderer(ChangeLogRenderer):
    """
    Renderer that writes to a single UTF-8 file it owns.

    The file is created when the renderer is constructed, so setup
    problems (missing permissions, bad directory) surface before
    generation starts.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        filename: str,
        options: Optional[RenderOptions] = None,
    ):
        super().__init__(options)
        self.path = Path(output_dir) / filename
        logger.debug(f"Opening {self.path} for {self.name}")
        self._out: Optional[TextIO] = open(self.path, 'w', encoding='utf-8')

    def write(self, text: str) -> None:
        if self._out is None:
            raise ValueError(f"{self.name} for {self.path} is already closed")
        self._out.write(text)

    def writeln(self, text: str = "") -> None:
        self.write(text + "\n")

    @property
    def closed(self) -> bool:
        return self._out is None

    def close(self) -> None:
        if self._out is None:
            return
        out, self._out = self._out, None
        out.close()
        logger.debug(f"Closed {self.path}")

    def __repr__(self) -> str:
        return f"{self.name}({str(self.path)!r})"
