"""Markdown changelog."""

from ..domain import Commit, Tag
from .base import FileRenderer

_ESCAPED = "\\`*_[]<>#|"


def escape_markdown(text: str) -> str:
    """Backslash-escape characters that Markdown would interpret."""
    return "".join(f"\\{char}" if char in _ESCAPED else char for char in text)


class MarkdownRenderer(FileRenderer):
    """Writes a Markdown changelog: one heading per tag, one bullet per commit."""

    def render_header(self, report_title: str) -> None:
        self.writeln(f"# {escape_markdown(report_title)}")
        self.writeln()

    def render_tag(self, tag: Tag) -> None:
        self.writeln()
        self.writeln(f"## {escape_markdown(tag.name)}")
        if tag.message and tag.message != tag.name:
            self.writeln()
            self.writeln(f"_{escape_markdown(tag.message.splitlines()[0])}_")
        self.writeln()

    def render_commit(self, commit: Commit) -> None:
        date = self.options.format_timestamp(commit.commit_time)
        lines = self.options.commit_message(commit).splitlines() or [""]
        self.writeln(
            f"* **{escape_markdown(date)}** {escape_markdown(lines[0])} "
            f"_{escape_markdown(commit.author.name)}_ `{commit.short_id}`"
        )
        for line in lines[1:]:
            if line.strip():
                self.writeln(f"  {escape_markdown(line)}")
