"""
JSON changelog.

Entries are streamed to the file as they arrive rather than collected,
so large histories are never held in memory. The document is:

    {"title": "...", "entries": [{"type": "tag", ...}, {"type": "commit", ...}]}
"""

import json
from typing import Any, Dict

from ..domain import Commit, Tag
from .base import FileRenderer


class JsonRenderer(FileRenderer):
    """Writes the changelog as a single JSON document."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._entries_written = 0

    def render_header(self, report_title: str) -> None:
        self.write('{"title": ' + json.dumps(report_title, ensure_ascii=False) + ', "entries": [')

    def _entry(self, data: Dict[str, Any]) -> None:
        separator = "," if self._entries_written else ""
        self.write(separator + "\n  " + json.dumps(data, ensure_ascii=False))
        self._entries_written += 1

    def render_tag(self, tag: Tag) -> None:
        self._entry({
            'type': 'tag',
            'name': tag.name,
            'commit': tag.target_id,
            'tagger': tag.tagger.name,
            'date': self.options.format_timestamp(tag.tag_time),
            'message': tag.message,
        })

    def render_commit(self, commit: Commit) -> None:
        self._entry({
            'type': 'commit',
            'id': commit.id,
            'date': self.options.format_timestamp(commit.commit_time),
            'timestamp': commit.commit_time,
            'author': commit.author.name,
            'email': commit.author.email,
            'message': self.options.commit_message(commit),
            'parents': list(commit.parents),
        })

    def render_footer(self) -> None:
        self.write("\n]}\n")
