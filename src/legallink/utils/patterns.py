"""
共通正規表現パターン定義

このモジュールは、複数のモジュールで使用される正規表現パターンを
一元管理するための薄いユーティリティです。

設計方針:
- パターンとシンプルなヘルパ関数のみを提供
- ビジネスロジックは持たない
- 呼び出し側に依存しない（normalize.py, references.py, linkify.py から安全に使用可能）

法令本文は半構造化テキストであり文法ではないため、パーサには一般化せず
有限個のコンパイル済みパターンで扱う。
"""

import re

# ==============================================================================
# 文字クラス
# ==============================================================================

# 条・項・号番号に現れる数字（算用数字・漢数字）
NUMERAL_CLASS = r"[0-9一二三四五六七八九十百千〇]"

# 法令種別サフィックス（法, 法律, 政令, 省令, 府令, 規則, 条例, 条約）
LAW_SUFFIX = r"(?:法|法律|政令|省令|府令|規則|条例|条約)"

# 末尾判定用（「法律」は「法」でも終わるが明示しておく）
LAW_SUFFIXES = ("法", "法律", "政令", "省令", "府令", "規則", "条例", "条約")

# ==============================================================================
# 法令名・条文参照パターン
# ==============================================================================

# 他法令の条参照: 「○○法第N条」
# law: 1〜40文字の法令名候補（かな・カナ・漢字・英数・中黒・括弧類）+ 法令種別
# n:   条番号
# 非貪欲にして、法令名候補が直後の「第」を越えて伸びないようにする。
# 例: 「民法第2条」→ law='民法', n='2'
EXTERNAL_ARTICLE_REF_PATTERN = re.compile(
    rf"(?P<law>[ぁ-んァ-ヶー一-龥A-Za-z0-9・（）()「」『』]{{1,40}}?{LAW_SUFFIX})"
    rf"第(?P<n>{NUMERAL_CLASS}+)条"
)

# 断片中の法令名トークン（最後の出現を採用するために使う）
# 括弧やかなを含まないため、「この法律による改正後の特許法」→「改正後」「特許法」等に分割される
LAW_TOKEN_PATTERN = re.compile(rf"[一-龥ァ-ヶーA-Za-z0-9・]{{1,30}}{LAW_SUFFIX}")

# 法令名を伴わない同一法令内の条参照: 「第N条」
SAME_ARTICLE_REF_PATTERN = re.compile(rf"第(?P<n>{NUMERAL_CLASS}+)条")

# 項参照: 「第N項」
PARAGRAPH_REF_PATTERN = re.compile(rf"第(?P<n>{NUMERAL_CLASS}+)項")

# 号参照: 「第N号」
ITEM_REF_PATTERN = re.compile(rf"第(?P<n>{NUMERAL_CLASS}+)号")

# 行頭の条番号（見出し化の対象）: 「第十九条」「第十九条の二」
ARTICLE_LINE_PATTERN = re.compile(
    rf"^(第{NUMERAL_CLASS}+条(?:の{NUMERAL_CLASS}+)?)"
)

# 文脈がなければ解決できない照応語（未解決参照として記録する）
ANAPHORIC_TOKENS = ("前条", "前項", "次条", "同条", "同項")

# 単独では具体的な法令名に解決できない自己参照
AMBIGUOUS_LAW_LABELS = frozenset({"同法", "同法律", "この法律", "本法", "前記法"})

# ==============================================================================
# WikiLink パターン
# ==============================================================================

# WikiLinkから表示テキストを抽出するパターン
# [[path|label]] → label, [[label]] → label
# グループ1: 表示テキスト
WIKILINK_DISPLAY_PATTERN = re.compile(r'\[\[(?:[^\]|]+\|)?([^\]]+)\]\]')


def strip_wikilinks(text: str) -> str:
    """
    WikiLinkを表示テキストに置換する

    [[laws/民法#第2条|民法第2条]] → 民法第2条
    [[第百九十九条]] → 第百九十九条

    Args:
        text: WikiLinkを含む可能性のあるテキスト

    Returns:
        WikiLinkが表示テキストに置換されたテキスト
    """
    return WIKILINK_DISPLAY_PATTERN.sub(r'\1', text)


def ends_with_law_suffix(token: str) -> bool:
    """トークンが法令種別サフィックスで終わるか"""
    return token.endswith(LAW_SUFFIXES)
