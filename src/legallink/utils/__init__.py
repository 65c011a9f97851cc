"""
legallink ユーティリティモジュール
"""

from .fs import (
    sanitize_filename,
    obsidian_dir,
    obsidian_note_target,
    load_json,
    write_json,
)
from .markdown import (
    MarkdownDocument,
    parse_frontmatter,
    read_markdown_file,
)
from .patterns import (
    strip_wikilinks,
    ends_with_law_suffix,
)

__all__ = [
    # fs
    'sanitize_filename',
    'obsidian_dir',
    'obsidian_note_target',
    'load_json',
    'write_json',
    # markdown
    'MarkdownDocument',
    'parse_frontmatter',
    'read_markdown_file',
    # patterns
    'strip_wikilinks',
    'ends_with_law_suffix',
]
