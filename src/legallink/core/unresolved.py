"""
未解決参照ストア

実行中に集めた UnresolvedRef を、(参照元法令, 別名) 単位の
UnresolvedRefRecord に集約して JSON へ保存する。後から人手で
status を更新して棚卸しする想定。

保存形式:
{
  "items": [
    {"source_law": "...", "alias": "前条", "first_seen_at": "...",
     "last_seen_at": "...", "count": 3, "sample_context": null, "status": "pending"}
  ]
}
"""
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from .models import UnresolvedRef, UnresolvedRefRecord
from ..utils.fs import load_json, write_json

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """RFC3339 形式の現在時刻（UTC）"""
    return datetime.now(timezone.utc).isoformat()


def load_unresolved_records(path: Path) -> List[UnresolvedRefRecord]:
    """
    未解決参照ストアを読み込む（ファイルが無ければ空）

    Raises:
        ValueError: JSON の形式が不正な場合
    """
    raw = load_json(path, default={"items": []})
    if not isinstance(raw, dict) or not isinstance(raw.get("items"), list):
        raise ValueError(f"未解決参照JSONの形式が不正です: {path}")
    return [UnresolvedRefRecord.from_dict(item) for item in raw["items"]]


def merge_unresolved(
    records: List[UnresolvedRefRecord],
    events: Iterable[UnresolvedRef],
    now: Optional[str] = None,
) -> List[UnresolvedRefRecord]:
    """
    イベントを既存レコードへマージする

    (source_law, alias) が既存なら count を加算して last_seen_at を更新し、
    sample_context が未設定なら埋める。無ければ status=pending で追加する。
    records はその場で更新され、同じリストを返す。
    """
    now = now or utc_now_iso()
    index = {(r.source_law, r.alias): r for r in records}

    for event in events:
        existing = index.get((event.source_law, event.alias))
        if existing is not None:
            existing.count += 1
            existing.last_seen_at = now
            if existing.sample_context is None and event.sample_context is not None:
                existing.sample_context = event.sample_context
            continue
        record = UnresolvedRefRecord(
            source_law=event.source_law,
            alias=event.alias,
            first_seen_at=now,
            last_seen_at=now,
            count=1,
            sample_context=event.sample_context,
            status="pending",
        )
        records.append(record)
        index[(record.source_law, record.alias)] = record
    return records


def save_unresolved_refs(path: Path, events: List[UnresolvedRef]) -> bool:
    """
    未解決参照を既存ストアとマージして保存する

    Returns:
        書き込んだ場合 True（イベントが無ければ何もしない）
    """
    if not events:
        return False
    records = merge_unresolved(load_unresolved_records(path), events)
    write_json(path, {"items": [r.to_dict() for r in records]})
    logger.info(f"Saved {len(records)} unresolved reference records: {path}")
    return True
