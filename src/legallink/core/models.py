"""
法令クローラのデータモデル
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class LawCandidate:
    """法令検索結果の候補1件"""
    law_title: str
    law_id: Optional[str] = None
    law_num: Optional[str] = None
    promulgation_date: Optional[str] = None

    def identity_key(self) -> str:
        """
        訪問済み判定用の一意キー

        安定性の高い順に law_id > law_num > law_title を採用する。
        """
        if self.law_id:
            return f"id:{self.law_id}"
        if self.law_num:
            return f"num:{self.law_num}"
        return f"title:{self.law_title}"

    def id_display(self) -> str:
        return self.law_id or "-"


@dataclass(frozen=True)
class LawContents:
    """取得・正規化済みの法令本文"""
    law_title: str
    text: str
    law_id: Optional[str] = None
    law_num: Optional[str] = None
    # 取得元XMLの保持用（現状は常に None）
    original_xml: Optional[str] = None


@dataclass
class DictEntry:
    """法令名辞書の1エントリ"""
    law_title: str
    law_id: Optional[str] = None
    law_num: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "law_id": self.law_id,
            "law_num": self.law_num,
            "law_title": self.law_title,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictEntry":
        return cls(
            law_title=data["law_title"],
            law_id=data.get("law_id"),
            law_num=data.get("law_num"),
        )

    @classmethod
    def from_candidate(cls, candidate: LawCandidate) -> "DictEntry":
        return cls(
            law_title=candidate.law_title,
            law_id=candidate.law_id,
            law_num=candidate.law_num,
        )

    def to_candidate(self) -> LawCandidate:
        return LawCandidate(
            law_title=self.law_title,
            law_id=self.law_id,
            law_num=self.law_num,
        )


@dataclass(frozen=True)
class LawRef:
    """本文中の他法令参照（再帰取得キュー用）"""
    source_law: str
    law_title: str
    article: str


@dataclass(frozen=True)
class UnresolvedRef:
    """自動解決できなかった参照（実行中のイベント）"""
    source_law: str
    alias: str
    sample_context: Optional[str] = None


@dataclass
class UnresolvedRefRecord:
    """永続化する未解決参照1件"""
    source_law: str
    alias: str
    first_seen_at: str
    last_seen_at: str
    count: int = 1
    sample_context: Optional[str] = None
    status: str = "pending"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnresolvedRefRecord":
        return cls(
            source_law=data["source_law"],
            alias=data["alias"],
            first_seen_at=data.get("first_seen_at", ""),
            last_seen_at=data.get("last_seen_at", ""),
            count=int(data.get("count", 1)),
            sample_context=data.get("sample_context"),
            status=data.get("status", "pending"),
        )
