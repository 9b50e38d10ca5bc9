"""
Output formats for repolog.

All renderers follow the lifecycle defined in ``base``:
- PlainTextRenderer: changelog.txt
- MarkdownRenderer: changelog.md
- SimpleHtmlRenderer: changelog.html, or a bare table for embedding
- JsonRenderer: changelog.json
- LoggerRenderer: echo to the log while generating
"""

from .base import ChangeLogRenderer, FileRenderer, RenderOptions, DEFAULT_DATE_FORMAT
from .plain_text import PlainTextRenderer
from .markdown import MarkdownRenderer
from .html import SimpleHtmlRenderer
from .json_renderer import JsonRenderer
from .log_renderer import LoggerRenderer

__all__ = [
    'ChangeLogRenderer',
    'FileRenderer',
    'RenderOptions',
    'DEFAULT_DATE_FORMAT',
    'PlainTextRenderer',
    'MarkdownRenderer',
    'SimpleHtmlRenderer',
    'JsonRenderer',
    'LoggerRenderer',
]
