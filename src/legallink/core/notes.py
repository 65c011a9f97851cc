"""
法令ノート（YAMLフロントマター付き Markdown）の生成・書き出し
"""
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .linkify import ensure_article_headings, linkify_markdown
from .models import LawContents
from .unresolved import utc_now_iso
from ..errors import NoteExistsError
from ..utils.fs import sanitize_filename

logger = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"
SOURCE_API = "v2"


def escape_yaml(value: str) -> str:
    """YAML のダブルクォート文字列として安全に埋め込める形へエスケープする"""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def note_path(output_dir: Path, law_title: str) -> Path:
    """法令名からノートのパスを決める"""
    return output_dir / f"{sanitize_filename(law_title)}{NOTE_EXTENSION}"


def render_frontmatter(contents: LawContents, depth: int, fetched_at: Optional[str] = None) -> str:
    """
    ノートのフロントマターを生成する

    キー順・引用符の付け方は固定（yaml.dump は使わない）。
    """
    lines = [
        "---",
        f'law_title: "{escape_yaml(contents.law_title)}"',
        f'law_id: "{escape_yaml(contents.law_id or "")}"',
        f'law_num: "{escape_yaml(contents.law_num or "")}"',
        f'source_api: "{SOURCE_API}"',
        f'fetched_at: "{fetched_at or utc_now_iso()}"',
        f"depth: {depth}",
        f"has_original_xml: {'true' if contents.original_xml is not None else 'false'}",
        "---",
        "",
    ]
    return "\n".join(lines) + "\n"


def render_note(contents: LawContents, depth: int, output_dir: Path) -> Tuple[str, List[str]]:
    """
    1法令分のノート全文を生成する

    Returns:
        (ノート全文, 未解決の照応語リスト)
    """
    base = ensure_article_headings(contents.text)
    body, unresolved = linkify_markdown(base, contents.law_title, output_dir)
    note = render_frontmatter(contents, depth) + body.rstrip("\n") + "\n"
    return note, unresolved


def write_law_note(
    contents: LawContents,
    depth: int,
    output_dir: Path,
    no_overwrite: bool = False,
) -> Tuple[Path, List[str]]:
    """
    1法令分の Markdown ノートを書き出す

    Raises:
        NoteExistsError: no_overwrite 指定時に既存ファイルがある場合
        OSError: 書き込み失敗

    Returns:
        (書き出したパス, 未解決の照応語リスト)
    """
    path = note_path(output_dir, contents.law_title)
    if no_overwrite and path.exists():
        raise NoteExistsError(f"既存ファイルがあるためスキップ: {path}", path=path)

    note, unresolved = render_note(contents, depth, output_dir)
    path.write_text(note, encoding="utf-8")
    logger.info(f"Wrote note: {path}")
    return path, unresolved
