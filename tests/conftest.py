"""
テスト共通フィクスチャ

ネットワークに出ないよう、e-Gov クライアントの代わりに
法令名 → (候補, 本文) を引くだけのフェイクを使う。
"""
import pytest

from legallink.core.models import LawCandidate, LawContents
from legallink.errors import ApiError


class FakeLawClient:
    """
    search_laws / fetch_law_contents / iter_law_listing を持つフェイク

    laws: {法令名: 本文}
    law_id は法令名の出現順に FAKE0001, FAKE0002, ... を振る。
    extra_candidates: {検索語: [候補...]} で検索結果を上書きできる。
    fetch_errors: {法令名: 例外} の法令は本文取得時にその例外を送出する。
    本文取得は law_id があれば law_id で引く（未知の law_id は ApiError）。
    """

    def __init__(self, laws, extra_candidates=None, fetch_errors=None):
        self.laws = dict(laws)
        self.ids = {title: f"FAKE{i:04d}" for i, title in enumerate(self.laws, start=1)}
        self.titles_by_id = {law_id: title for title, law_id in self.ids.items()}
        self.extra_candidates = extra_candidates or {}
        self.fetch_errors = fetch_errors or {}
        self.search_calls = []
        self.fetch_calls = []

    def candidate(self, title):
        return LawCandidate(law_title=title, law_id=self.ids[title], law_num=f"{title}番号")

    def search_laws(self, law_title):
        self.search_calls.append(law_title)
        if law_title in self.extra_candidates:
            return list(self.extra_candidates[law_title])
        if law_title in self.laws:
            return [self.candidate(law_title)]
        return []

    def fetch_law_contents(self, candidate):
        if candidate.law_id:
            title = self.titles_by_id.get(candidate.law_id)
            if title is None:
                raise ApiError(f"APIエラー 404 law_data/{candidate.law_id}", status=404)
        else:
            title = candidate.law_title
        self.fetch_calls.append(title)
        if title in self.fetch_errors:
            raise self.fetch_errors[title]
        return LawContents(
            law_title=title,
            text=self.laws[title],
            law_id=self.ids[title],
            law_num=f"{title}番号",
        )

    def iter_law_listing(self, limit=100):
        for title in self.laws:
            yield {
                "law_info": {"law_id": self.ids[title], "law_num": f"{title}番号"},
                "revision_info": {"law_title": title, "abbrev": None},
            }


@pytest.fixture
def fake_client_factory():
    """FakeLawClient を作るファクトリ"""
    return FakeLawClient
