"""Echoes the changelog to the build log as it is generated."""

import logging
from typing import Optional

from ..domain import Commit, Tag
from .base import ChangeLogRenderer, RenderOptions


class LoggerRenderer(ChangeLogRenderer):
    """
    Writes every changelog event to a logger at INFO level.

    Owns no resources; ``close()`` does nothing.
    """

    def __init__(self, options: Optional[RenderOptions] = None, log: Optional[logging.Logger] = None):
        super().__init__(options)
        self.log = log or logging.getLogger("repolog.changelog")

    def render_header(self, report_title: str) -> None:
        self.log.info(report_title)
        self.log.info("=" * len(report_title))

    def render_tag(self, tag: Tag) -> None:
        self.log.info("")
        self.log.info(tag.name)
        self.log.info("-" * len(tag.name))

    def render_commit(self, commit: Commit) -> None:
        date = self.options.format_timestamp(commit.commit_time)
        message = self.options.commit_message(commit)
        self.log.info(f"{date}  {message} ({commit.author.name})")

    def render_footer(self) -> None:
        self.log.info("")
