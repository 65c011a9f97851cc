"""
legallink の例外定義

致命的かどうかの判断は呼び出し側（LawCrawler / CLI）が行う。
"""
from typing import Optional


class LegalLinkError(Exception):
    """legallink が送出する例外の基底クラス"""


class ApiError(LegalLinkError):
    """API 呼び出しの失敗（リトライ枯渇・非リトライ対象ステータス・JSON 不正）"""

    def __init__(self, message: str, status: Optional[int] = None, url: str = ""):
        super().__init__(message)
        self.status = status
        self.url = url


class ResolutionError(LegalLinkError):
    """法令名を候補1件に確定できなかった"""

    def __init__(self, message: str, title: str = ""):
        super().__init__(message)
        self.title = title


class LawNotFoundError(ResolutionError):
    """検索結果が0件"""


class AmbiguousLawError(ResolutionError):
    """候補が複数あり自動確定できない"""


class InvalidSelectionError(ResolutionError):
    """対話選択で範囲外の番号が入力された"""


class EmptyLawTextError(LegalLinkError):
    """law_full_text から本文テキストを抽出できなかった"""


class NoteExistsError(LegalLinkError):
    """--no-overwrite 指定時に出力先ノートが既に存在する"""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
