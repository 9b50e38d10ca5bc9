"""
HTML changelogs.

SimpleHtmlRenderer writes either a complete standalone page or, with
``table_only``, just the ``<table>`` element so the changelog can be
embedded in another page (a wiki, a project site).
"""

from html import escape
from pathlib import Path
from typing import Optional, Union

from ..domain import Commit, Tag
from .base import FileRenderer, RenderOptions

PAGE_STYLE = """\
body { font-family: sans-serif; }
table.changelog { border-collapse: collapse; }
table.changelog td { padding: 2px 8px; vertical-align: top; }
table.changelog tr.tag td { font-weight: bold; padding-top: 12px; }
table.changelog td.date { white-space: nowrap; color: #555; }
table.changelog td.author { color: #555; }
"""


class SimpleHtmlRenderer(FileRenderer):
    """Writes the changelog as an HTML table."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        filename: str,
        options: Optional[RenderOptions] = None,
        table_only: bool = False,
    ):
        super().__init__(output_dir, filename, options)
        self.table_only = table_only

    def render_header(self, report_title: str) -> None:
        title = escape(report_title)
        if not self.table_only:
            self.writeln("<!DOCTYPE html>")
            self.writeln("<html>")
            self.writeln("<head>")
            self.writeln('<meta charset="utf-8">')
            self.writeln(f"<title>{title}</title>")
            self.writeln(f"<style>\n{PAGE_STYLE}</style>")
            self.writeln("</head>")
            self.writeln("<body>")
            self.writeln(f"<h1>{title}</h1>")
        self.writeln('<table class="changelog">')

    def render_tag(self, tag: Tag) -> None:
        self.writeln(
            f'<tr class="tag"><td colspan="3">{escape(tag.name)}</td></tr>'
        )

    def render_commit(self, commit: Commit) -> None:
        date = escape(self.options.format_timestamp(commit.commit_time))
        message = escape(self.options.commit_message(commit)).replace("\n", "<br>")
        self.writeln(
            f'<tr class="commit" id="{commit.id}">'
            f'<td class="date">{date}</td>'
            f'<td class="message">{message}</td>'
            f'<td class="author">{escape(commit.author.name)}</td></tr>'
        )

    def render_footer(self) -> None:
        self.writeln("</table>")
        if not self.table_only:
            self.writeln("</body>")
            self.writeln("</html>")
