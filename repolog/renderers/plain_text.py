"""Plain text changelog."""

from ..domain import Commit, Tag
from .base import FileRenderer


class PlainTextRenderer(FileRenderer):
    """
    Writes a plain text changelog.

    Tags appear as section headings, commits as indented lines:

        My Project changelog
        ====================

        v1.0 (2024-01-02 10:00:00 +0000)
        --------------------------------
            2024-01-02 09:00:00 +0000  Fix parser (Jane Doe)
    """

    def render_header(self, report_title: str) -> None:
        self.writeln(report_title)
        self.writeln("=" * len(report_title))
        self.writeln()

    def render_tag(self, tag: Tag) -> None:
        heading = tag.name
        tagged = self.options.format_timestamp(tag.tag_time)
        if tagged:
            heading += f" ({tagged})"
        self.writeln()
        self.writeln(heading)
        self.writeln("-" * len(heading))

    def render_commit(self, commit: Commit) -> None:
        date = self.options.format_timestamp(commit.commit_time)
        message = self.options.commit_message(commit)
        lines = message.splitlines() or [""]
        self.writeln(f"    {date}  {lines[0]} ({commit.author.name})")
        for line in lines[1:]:
            self.writeln(f"        {line}".rstrip())
