"""
法令名断片の正規化

本文から切り出した「○○法」周辺の断片を、辞書キーとして使える
正規の法令名トークンへ寄せる。辞書のキーは常にこの関数の出力とする。
"""
from typing import Optional, Tuple

from ..utils.patterns import (
    LAW_TOKEN_PATTERN,
    AMBIGUOUS_LAW_LABELS,
    ends_with_law_suffix,
)

# ==============================================================================
# 定数定義
# ==============================================================================

# 断片の両端から除去する記号・空白
TRIM_CHARS = " 　（）()「」『』、。"

# 改正前後・新旧の修飾語（先頭の1つだけ除去する）
AMENDMENT_QUALIFIERS: Tuple[str, ...] = ("改正前", "改正後", "旧", "新")

# マッチ境界から漏れ込む条番号・構造記号
# 例: 「三第一条中特許法」の「三第一条」
LEADING_NOISE_CHARS = frozenset("一二三四五六七八九十百千〇0123456789第条項号")

# 「○○中△△法」の接続語
CONNECTIVE = "中"

# 正規化後トークンの最小文字数
MIN_TITLE_LENGTH = 2


def strip_amendment_qualifier(token: str) -> str:
    """先頭の修飾語（改正前/改正後/旧/新）を1つ除去する"""
    for qualifier in AMENDMENT_QUALIFIERS:
        if token.startswith(qualifier):
            return token[len(qualifier):]
    return token


def strip_leading_noise(token: str) -> str:
    """先頭の漢数字・算用数字・第/条/項/号を除去する"""
    i = 0
    while i < len(token) and token[i] in LEADING_NOISE_CHARS:
        i += 1
    return token[i:]


def split_connective(token: str) -> str:
    """
    「文脈句 + 中 + 法令名」を右側の法令名に絞り込む

    右側が単独で法令種別サフィックスで終わる場合のみ採用する。

    >>> split_connective("第三条の規定中特許法")
    '特許法'
    """
    if CONNECTIVE not in token:
        return token
    right = token.rsplit(CONNECTIVE, 1)[1]
    if ends_with_law_suffix(right):
        return right
    return token


def normalize_law_ref_title(fragment: str) -> Optional[str]:
    """
    他法令参照として有効な法令名へ正規化する

    処理手順:
    1. 両端の括弧・引用符・空白・句読点を除去
    2. 照応的な自己参照（同法, この法律, 本法 等）は None
    3. 法令種別サフィックスで終わるトークンのうち「最後」の出現を採用
       （入れ子になった文では最も内側・具体的な法令名が後ろに来る）
    4. 修飾語 → 先頭の番号類 → 接続語「中」 → 修飾語 の順に除去
    5. なお「中」で区切られていれば右側の法令名に絞り込む
    6. 除去の結果として現れた照応語を再チェックし、2文字未満は None

    Args:
        fragment: 本文から切り出した法令名候補（例: '旧特許法'）

    Returns:
        正規化済み法令名（例: '特許法'）、無効なら None

    Examples:
        >>> normalize_law_ref_title("旧特許法")
        '特許法'
        >>> normalize_law_ref_title("この法律による改正後の特許法")
        '特許法'
        >>> normalize_law_ref_title("三第一条中特許法")
        '特許法'
        >>> normalize_law_ref_title("同法") is None
        True
    """
    trimmed = fragment.strip(TRIM_CHARS)
    if not trimmed:
        return None
    if trimmed in AMBIGUOUS_LAW_LABELS:
        return None

    tokens = LAW_TOKEN_PATTERN.findall(trimmed)
    if not tokens:
        return None

    token = strip_amendment_qualifier(tokens[-1])
    token = strip_leading_noise(token)
    if token.startswith(CONNECTIVE):
        token = token[len(CONNECTIVE):]
    token = strip_amendment_qualifier(token)
    token = split_connective(token)

    if token in AMBIGUOUS_LAW_LABELS:
        return None
    if len(token) < MIN_TITLE_LENGTH:
        return None
    return token
