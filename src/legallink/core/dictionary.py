"""
法令名辞書

正規化済みの別名（法令名・略称・法令番号）→ 法令の同一性（law_id, law_num, 正式名）
の対応表。検索や本文取得で確定した同一性を学習し、次回以降の実行で
ネットワーク照会を省く。

不変条件:
- キーは normalize_law_ref_title() の出力（法令番号・略称は登録時の値そのまま）
- 既存キーは上書きしない（最初に確定した同一性を優先）
- 1件以上追加した場合のみ保存する（dirty フラグ）
"""
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from tqdm import tqdm

from .models import DictEntry, LawCandidate, LawContents
from .normalize import normalize_law_ref_title
from ..utils.fs import load_json, write_json

logger = logging.getLogger(__name__)

# 略称欄に複数の略称が並ぶ場合の区切り
ABBREV_SEPARATOR_RE = re.compile(r"[,，、]")


class LawNameDictionary:
    """法令名辞書（実行中は LawCrawler が専有する）"""

    def __init__(self, entries: Optional[Dict[str, DictEntry]] = None, path: Optional[Path] = None):
        self.entries: Dict[str, DictEntry] = dict(entries or {})
        self.path = path
        self.dirty = False

    # ------------------------------------------------------------------
    # 永続化
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "LawNameDictionary":
        """
        JSON ファイルから辞書を読み込む（ファイルが無ければ空の辞書）

        Raises:
            ValueError: JSON の形式が不正な場合
        """
        raw = load_json(path, default={})
        if not isinstance(raw, dict):
            raise ValueError(f"辞書JSONの形式が不正です: {path}")
        entries = {key: DictEntry.from_dict(value) for key, value in raw.items()}
        logger.debug(f"Loaded {len(entries)} dictionary entries from {path}")
        return cls(entries, path=path)

    def save(self, path: Optional[Path] = None, force: bool = False) -> bool:
        """
        辞書を JSON として保存する

        変更がなければ（force 指定がない限り）ファイルに触れない。

        Returns:
            書き込んだ場合 True
        """
        target = path or self.path
        if target is None:
            raise ValueError("辞書の保存先が指定されていません")
        if not self.dirty and not force:
            logger.debug("Dictionary unchanged, skip saving")
            return False
        write_json(target, self.to_dict())
        self.dirty = False
        logger.info(f"Saved dictionary ({len(self.entries)} entries): {target}")
        return True

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: entry.to_dict() for key, entry in sorted(self.entries.items())}

    # ------------------------------------------------------------------
    # 参照・登録
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str) -> Optional[DictEntry]:
        return self.entries.get(key)

    def keys(self) -> Iterable[str]:
        return self.entries.keys()

    def clear(self):
        if self.entries:
            self.entries.clear()
            self.dirty = True

    def insert_if_absent(self, key: str, entry: DictEntry) -> bool:
        """キーが未登録なら追加する。追加した場合 True"""
        if not key or key in self.entries:
            return False
        self.entries[key] = entry
        self.dirty = True
        return True

    def lookup(self, title: str) -> Optional[DictEntry]:
        """
        法令名で辞書を引く

        正規化後のキーで照合し、当たらなければ入力そのまま（法令番号・略称）で照合する。
        """
        key = normalize_law_ref_title(title)
        if key and key in self.entries:
            return self.entries[key]
        return self.entries.get(title.strip())

    def find_by_law_id(self, law_id: str) -> Optional[DictEntry]:
        """law_id が一致するエントリ（複数の別名が同じ法令を指すので最初の1件）"""
        for entry in self.entries.values():
            if entry.law_id == law_id:
                return entry
        return None

    def resolve_fragment(self, fragment: str) -> Optional[str]:
        """
        抽出した法令名断片を辞書照合して正式法令名へ寄せる

        1. 正規化（失敗すれば None）
        2. 完全一致するキーがあればその正式名
        3. 正規化後トークンに含まれるキーのうち最長のものの正式名
           （短いキーが無関係な長い句に埋もれて誤マッチするのを抑える）
        4. どれにも当たらなければ正規化後トークンを暫定名として返す

        Args:
            fragment: 本文から切り出した法令名断片

        Returns:
            正式法令名または暫定名、正規化できなければ None
        """
        normalized = normalize_law_ref_title(fragment)
        if normalized is None:
            return None

        entry = self.entries.get(normalized)
        if entry is not None:
            return entry.law_title

        best_key = self.longest_contained_key(normalized)
        if best_key is not None:
            return self.entries[best_key].law_title
        return normalized

    def longest_contained_key(self, token: str) -> Optional[str]:
        """token に部分文字列として含まれる最長のキー（同長なら辞書順で先）"""
        best: Optional[str] = None
        for key in self.entries:
            if key and key in token:
                if best is None or len(key) > len(best) or (len(key) == len(best) and key < best):
                    best = key
        return best

    def register_candidate_aliases(self, query: str, candidate: LawCandidate) -> bool:
        """
        候補確定時に、検索語と正式名を別名として登録する

        Returns:
            1件以上追加した場合 True
        """
        entry = DictEntry.from_candidate(candidate)
        changed = False
        for alias in (query, candidate.law_title):
            key = normalize_law_ref_title(alias)
            if key and self.insert_if_absent(key, entry):
                logger.debug(f"Learned alias: {key} -> {candidate.law_title}")
                changed = True
        return changed

    def register_law_contents(self, contents: LawContents) -> bool:
        """本文取得後の正式名を登録する"""
        key = normalize_law_ref_title(contents.law_title)
        if not key:
            return False
        entry = DictEntry(
            law_title=contents.law_title,
            law_id=contents.law_id,
            law_num=contents.law_num,
        )
        return self.insert_if_absent(key, entry)

    # ------------------------------------------------------------------
    # 一覧からの一括登録
    # ------------------------------------------------------------------

    def register_listing_item(self, item: Dict[str, Any]) -> bool:
        """
        `/api/2/laws` の1件を登録する

        正規化した正式名・法令番号・略称をそれぞれキーにする。

        Returns:
            1件以上追加した場合 True
        """
        law_info = item.get("law_info") or {}
        revision_info = item.get("revision_info") or {}
        law_title = revision_info.get("law_title")
        if not isinstance(law_title, str) or not law_title.strip():
            return False

        entry = DictEntry(
            law_title=law_title.strip(),
            law_id=law_info.get("law_id") or None,
            law_num=law_info.get("law_num") or None,
        )

        changed = False
        for alias in listing_aliases(entry.law_title, entry.law_num, revision_info.get("abbrev")):
            if self.insert_if_absent(alias, entry):
                changed = True
        return changed

    def refresh_from_listing(self, items: Iterator[Dict[str, Any]], clear: bool = False) -> Tuple[bool, int]:
        """
        法令一覧を全件走査して辞書を更新する

        Args:
            items: 一覧の要素（EGovClient.iter_law_listing()）
            clear: True なら既存エントリを消してから再構築する

        Returns:
            (変更があったか, 走査件数)
        """
        if clear:
            self.clear()
        changed = clear
        count = 0
        for item in tqdm(items, desc="Building dictionary", unit="law"):
            count += 1
            if self.register_listing_item(item):
                changed = True
        logger.info(f"Dictionary refresh scanned {count} laws, {len(self.entries)} entries")
        return changed, count


def listing_aliases(law_title: str, law_num: Optional[str], abbrev: Any) -> List[str]:
    """一覧の1件から登録する別名キーを列挙する"""
    aliases = []
    normalized = normalize_law_ref_title(law_title)
    if normalized:
        aliases.append(normalized)
    if law_num and law_num.strip():
        aliases.append(law_num.strip())
    if isinstance(abbrev, str):
        for part in ABBREV_SEPARATOR_RE.split(abbrev):
            part = part.strip()
            if part:
                aliases.append(part)
    return aliases
