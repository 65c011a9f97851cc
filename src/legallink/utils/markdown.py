"""
Markdown/YAMLフロントマター読み込みユーティリティ

生成済みノート（YAMLフロントマター付き）を読み戻すために使う。
書き出しは固定フォーマットのため core/notes.py が担当する。
"""

import yaml
from pathlib import Path
from typing import Dict, Optional, Any
from dataclasses import dataclass


@dataclass
class MarkdownDocument:
    """YAMLフロントマター付きMarkdownドキュメント"""
    metadata: Dict[str, Any]
    body: str


def parse_frontmatter(content: str) -> Optional[MarkdownDocument]:
    """
    YAMLフロントマター付きMarkdownをパース

    Args:
        content: Markdownファイルの内容

    Returns:
        MarkdownDocument オブジェクト、パース失敗時は None

    Examples:
        >>> doc = parse_frontmatter('---\\nlaw_title: "民法"\\n---\\n# 民法')
        >>> doc.metadata['law_title']
        '民法'
        >>> doc.body
        '\\n# 民法'
    """
    if not content.startswith('---'):
        return None

    parts = content.split('---', 2)
    if len(parts) < 3:
        return None

    try:
        metadata = yaml.safe_load(parts[1].strip())
    except yaml.YAMLError:
        return None
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        return None
    return MarkdownDocument(metadata=metadata, body=parts[2])


def read_markdown_file(file_path: Path) -> Optional[MarkdownDocument]:
    """
    Markdownファイルを読み込んでパース

    Returns:
        MarkdownDocument オブジェクト、失敗時は None
    """
    try:
        content = file_path.read_text(encoding='utf-8')
    except (IOError, OSError):
        return None
    return parse_frontmatter(content)
