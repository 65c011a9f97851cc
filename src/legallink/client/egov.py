from .base import BaseClient
from ..config import EGOV_API_BASE_URL, EGOV_LAWS_PATH, EGOV_LAW_DATA_PATH, LISTING_PAGE_SIZE
from ..core.fulltext import law_full_text_to_text
from ..core.models import LawCandidate, LawContents
from ..errors import ApiError
from typing import List, Dict, Any, Iterator
import logging

logger = logging.getLogger(__name__)


def _str_or_none(value: Any):
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_law_candidates(payload: Any) -> List[LawCandidate]:
    """
    Convert a `/api/2/laws` response into candidates.

    Items without a law title are skipped; duplicates (same id, number and
    title) collapse to the first occurrence.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("laws"), list):
        raise ApiError("法令一覧レスポンスの型変換に失敗しました: 'laws' がありません")

    candidates = []
    seen = set()
    for item in payload["laws"]:
        if not isinstance(item, dict):
            continue
        law_info = item.get("law_info") or {}
        revision_info = item.get("revision_info") or {}
        law_title = _str_or_none(revision_info.get("law_title"))
        if not law_title:
            continue
        candidate = LawCandidate(
            law_title=law_title,
            law_id=_str_or_none(law_info.get("law_id")),
            law_num=_str_or_none(law_info.get("law_num")),
            promulgation_date=_str_or_none(law_info.get("promulgation_date")),
        )
        key = f"{candidate.law_id or ''}|{candidate.law_num or ''}|{candidate.law_title}"
        if key in seen:
            continue
        seen.add(key)
        candidates.append(candidate)
    return candidates


def parse_law_contents(payload: Any) -> LawContents:
    """
    Convert a `/api/2/law_data/...` response into normalized contents.

    Raises:
        ApiError: required fields are missing (schema mismatch)
        EmptyLawTextError: the body tree yields no text
    """
    if not isinstance(payload, dict):
        raise ApiError("法令本文レスポンスの型変換に失敗しました")
    law_info = payload.get("law_info")
    revision_info = payload.get("revision_info")
    law_full_text = payload.get("law_full_text")
    if not isinstance(law_info, dict) or not isinstance(revision_info, dict) or law_full_text is None:
        raise ApiError("法令本文レスポンスの型変換に失敗しました: law_info/revision_info/law_full_text がありません")

    law_title = _str_or_none(revision_info.get("law_title"))
    if not law_title:
        raise ApiError("法令本文レスポンスに law_title がありません")

    return LawContents(
        law_title=law_title,
        text=law_full_text_to_text(law_full_text),
        law_id=_str_or_none(law_info.get("law_id")),
        law_num=_str_or_none(law_info.get("law_num")),
        original_xml=None,
    )


class EGovClient(BaseClient):
    """Client for the e-Gov law API v2."""

    def __init__(self, base_url: str = EGOV_API_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def search_laws(self, law_title: str) -> List[LawCandidate]:
        """Search candidates by (partial) law title."""
        payload = self.get_json(EGOV_LAWS_PATH, params={"law_title": law_title})
        return parse_law_candidates(payload)

    def list_laws_paged(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        """Fetch one page of the full law listing (raw `laws` items)."""
        payload = self.get_json(EGOV_LAWS_PATH, params={"limit": limit, "offset": offset})
        if not isinstance(payload, dict) or not isinstance(payload.get("laws"), list):
            raise ApiError("法令一覧レスポンスの型変換に失敗しました: 'laws' がありません")
        return payload["laws"]

    def iter_law_listing(self, limit: int = LISTING_PAGE_SIZE) -> Iterator[Dict[str, Any]]:
        """
        Iterate over every item of the law listing.

        Pages are requested with limit/offset until an empty page comes back.
        """
        offset = 0
        while True:
            page = self.list_laws_paged(limit, offset)
            if not page:
                break
            for item in page:
                yield item
            offset += limit

    def fetch_law_contents(self, candidate: LawCandidate) -> LawContents:
        """Fetch the law body by law_id (preferred) or law_num."""
        id_or_num = candidate.law_id or candidate.law_num
        if not id_or_num:
            raise ApiError(f"law_id/law_num がありません: {candidate.law_title}")

        payload = self.get_json(
            f"{EGOV_LAW_DATA_PATH}/{id_or_num}",
            params={"response_format": "json", "law_full_text_format": "json"},
        )
        contents = parse_law_contents(payload)
        logger.debug(f"Fetched {contents.law_title} ({contents.law_id}) {len(contents.text)} chars")
        return contents
