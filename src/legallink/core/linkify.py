"""
条・項・号参照の WikiLink 化

本文を1行ずつ処理し、Obsidian の WikiLink（[[dir/ノート名#アンカー|表示]]）へ書き換える。

置換順序（後段が前段の生成物に再マッチしないよう順序に意味がある）:
1. 他法令参照「○○法第N条」→ 他法令ノートへのリンク（プレースホルダへ退避）
2. 法令名なしの「第N条」→ 自法令ノートの「第N条」アンカー
3. 「第N項」→ 直近の条見出しアンカー
4. 「第N号」→ 直近の条見出しアンカー
5. プレースホルダを復元

見出し行（# 始まり）と既にリンクを含む行はそのまま出力する（再実行しても二重リンクにならない）。
照応語（前条, 前項, 次条, 同条, 同項）は解決せず、未解決トークンとして返す。
"""
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .normalize import normalize_law_ref_title
from ..utils.fs import obsidian_dir, obsidian_note_target
from ..utils.patterns import (
    ANAPHORIC_TOKENS,
    ARTICLE_LINE_PATTERN,
    EXTERNAL_ARTICLE_REF_PATTERN,
    ITEM_REF_PATTERN,
    PARAGRAPH_REF_PATTERN,
    SAME_ARTICLE_REF_PATTERN,
)

EXT_PLACEHOLDER = "__EXT_LINK_{}__"


def extract_heading_anchor(line: str) -> Optional[str]:
    """
    見出し行から「第X条」のアンカー名を抽出する

    >>> extract_heading_anchor("## 第十九条の二")
    '第十九条'
    >>> extract_heading_anchor("## 附則") is None
    True
    """
    s = line.lstrip("#").strip()
    if s.startswith("第") and "条" in s:
        return s[:s.index("条") + 1]
    return None


def ensure_article_headings(text: str) -> str:
    """
    行頭の「第X条」に見出しを補い、Obsidian のアンカー解決をしやすくする

    「第一条 この法律は…」→ 「## 第一条」+ 元の行
    既存の見出し行はそのまま。
    """
    out = []
    for line in text.splitlines():
        if line.startswith("#"):
            out.append(line)
            continue
        m = ARTICLE_LINE_PATTERN.match(line)
        if m:
            token = m.group(1)
            out.append(f"## {token}")
            if line.strip() != token:
                out.append(line)
        else:
            out.append(line)
    return "\n".join(out) + "\n"


def _collect_unresolved(line: str) -> List[str]:
    return [token for token in ANAPHORIC_TOKENS if token in line]


def linkify_line(
    line: str,
    current_law_title: str,
    link_dir: str,
    last_article_anchor: Optional[str],
) -> str:
    """見出し・リンク済みでない1行を WikiLink 化する"""
    current_target = obsidian_note_target(link_dir, current_law_title)
    placeholders: List[Tuple[str, str]] = []

    def _external(m: re.Match) -> str:
        fragment = m.group("law")
        law = normalize_law_ref_title(fragment)
        if not law:
            return m.group(0)
        # マッチに巻き込んだ法令名より前の文言は本文として残す
        prefix = fragment[:-len(law)] if fragment.endswith(law) else ""
        n = m.group("n")
        link = f"[[{obsidian_note_target(link_dir, law)}#第{n}条|{law}第{n}条]]"
        key = EXT_PLACEHOLDER.format(len(placeholders))
        placeholders.append((key, link))
        return prefix + key

    def _same_article(m: re.Match) -> str:
        n = m.group("n")
        return f"[[{current_target}#第{n}条|第{n}条]]"

    def _anchored(unit: str):
        def _replace(m: re.Match) -> str:
            n = m.group("n")
            if last_article_anchor is None:
                return f"第{n}{unit}"
            return f"[[{current_target}#{last_article_anchor}|第{n}{unit}]]"
        return _replace

    replaced = EXTERNAL_ARTICLE_REF_PATTERN.sub(_external, line)
    replaced = SAME_ARTICLE_REF_PATTERN.sub(_same_article, replaced)
    replaced = PARAGRAPH_REF_PATTERN.sub(_anchored("項"), replaced)
    replaced = ITEM_REF_PATTERN.sub(_anchored("号"), replaced)
    for key, link in placeholders:
        replaced = replaced.replace(key, link)
    return replaced


def linkify_markdown(
    text: str,
    current_law_title: str,
    output_dir: Union[str, Path],
) -> Tuple[str, List[str]]:
    """
    本文中の条・項・号参照を Obsidian WikiLink へ変換する

    Args:
        text: 見出し補完済みの本文
        current_law_title: 処理中の法令名（自法令リンクの宛先）
        output_dir: ノート出力ディレクトリ（リンクのパス接頭辞になる）

    Returns:
        (リンク化済み本文, 未解決の照応語リスト)

    Examples:
        >>> out, unresolved = linkify_markdown("民法第2条及び第3条を参照する。", "刑法", "laws")
        >>> "[[laws/民法#第2条|民法第2条]]" in out, "[[laws/刑法#第3条|第3条]]" in out
        (True, True)
    """
    link_dir = obsidian_dir(output_dir)
    unresolved: List[str] = []
    out: List[str] = []
    last_article_anchor: Optional[str] = None

    for line in text.splitlines():
        if line.startswith("#") or "[[" in line:
            out.append(line)
            anchor = extract_heading_anchor(line)
            if anchor:
                last_article_anchor = anchor
            continue

        replaced = linkify_line(line, current_law_title, link_dir, last_article_anchor)
        unresolved.extend(_collect_unresolved(replaced))

        anchor = extract_heading_anchor(replaced)
        if anchor:
            last_article_anchor = anchor
        out.append(replaced)

    return "\n".join(out) + "\n", unresolved
