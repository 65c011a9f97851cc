"""
他法令参照の抽出

本文中の「○○法第N条」を拾い、再帰取得キューの種となる LawRef を作る。
"""
from typing import Set

from .dictionary import LawNameDictionary
from .models import LawRef
from ..utils.patterns import EXTERNAL_ARTICLE_REF_PATTERN


def extract_external_references(
    text: str,
    dictionary: LawNameDictionary,
    source_law: str,
) -> Set[LawRef]:
    """
    他法令参照（○○法第X条）を抽出して再帰取得候補を作る

    法令名部分は LawNameDictionary.resolve_fragment() で正式名へ寄せる。
    正規化できない断片（同法, この法律 等）は捨てる。
    同一文書内で同じ条を何度引用しても1件にまとまる。

    Args:
        text: 法令本文（プレーンテキスト）
        dictionary: 法令名辞書
        source_law: 参照元の法令名

    Returns:
        LawRef のセット

    Examples:
        >>> refs = extract_external_references("民法第二条及び民法第二条", LawNameDictionary(), "刑法")
        >>> sorted((r.law_title, r.article) for r in refs)
        [('民法', '第二条')]
    """
    refs: Set[LawRef] = set()
    for m in EXTERNAL_ARTICLE_REF_PATTERN.finditer(text):
        law_title = dictionary.resolve_fragment(m.group("law"))
        if not law_title:
            continue
        refs.add(LawRef(
            source_law=source_law,
            law_title=law_title,
            article=f"第{m.group('n')}条",
        ))
    return refs
