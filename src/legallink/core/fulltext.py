"""
law_full_text（e-Gov API v2 の JSON 木）→ プレーンテキスト変換

v2 format:
{
    "tag": "Law",
    "attr": {"Era": "Showa", ...},
    "children": [
        {"tag": "LawNum", "attr": {}, "children": ["昭和三十四年法律第百二十一号"]},
        ...
    ]
}

ブロック要素（条・項・号など）の前後で改行を入れ、
文字列ノードはそのまま連結する。
"""
import re
from typing import Any, List

from ..errors import EmptyLawTextError

# 前後で改行を強制する条文構造タグ
BLOCK_TAGS = frozenset({
    "Law",
    "LawBody",
    "MainProvision",
    "Part",
    "Chapter",
    "Section",
    "Subsection",
    "Division",
    "Article",
    "Paragraph",
    "Item",
    "Subitem",
    "SupplProvision",
    "AppdxTable",
    "AppdxNote",
    "AppdxStyle",
    "Appdx",
})

_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _ensure_newline(out: List[str]):
    if out and not out[-1].endswith("\n"):
        out.append("\n")


def append_law_text(node: Any, out: List[str]):
    """law_full_text の再帰木を走査し、文字列を out に追加する"""
    if isinstance(node, str):
        out.append(node)
        return
    if isinstance(node, list):
        for child in node:
            append_law_text(child, out)
        return
    if not isinstance(node, dict):
        return

    is_block = node.get("tag", "") in BLOCK_TAGS
    if is_block:
        _ensure_newline(out)

    if "children" in node:
        append_law_text(node["children"], out)
    else:
        for key, value in node.items():
            if key not in ("tag", "attr"):
                append_law_text(value, out)

    if is_block:
        _ensure_newline(out)


def law_full_text_to_text(node: Any) -> str:
    """
    law_full_text から読みやすいテキストを抽出する

    Raises:
        EmptyLawTextError: 本文テキストが1行も得られなかった場合
    """
    out: List[str] = []
    append_law_text(node, out)

    text = _SPACES_RE.sub(" ", "".join(out))
    text = _BLANK_LINES_RE.sub("\n\n", text)
    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(line for line in lines if line)
    if not text:
        raise EmptyLawTextError("law_full_text から本文テキストを抽出できませんでした")
    return text
