"""
法令の再帰取得（幅優先）

ルート法令から「○○法第N条」参照をたどり、max_depth までの法令ノートを生成する。

状態:
- queue / visited は1回の実行の間だけ LawCrawler が専有する（永続化しない）
- 法令名辞書と未解決参照ストアだけが実行をまたいで残る

エラーの扱い:
- ルート（depth=0）の解決失敗・すべての本文取得失敗・書き込み失敗は例外として伝播
- depth>0 の解決失敗は UnresolvedRef として記録し、その枝だけ打ち切る
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, List, Optional, Protocol, Sequence, Set, Tuple

from .dictionary import LawNameDictionary
from .models import LawCandidate, LawContents, LawRef, UnresolvedRef
from .notes import note_path, write_law_note
from .references import extract_external_references
from .unresolved import save_unresolved_refs
from ..errors import (
    AmbiguousLawError,
    InvalidSelectionError,
    LawNotFoundError,
    NoteExistsError,
    ResolutionError,
)
from ..utils.markdown import read_markdown_file
from ..utils.patterns import strip_wikilinks

logger = logging.getLogger(__name__)

RESOLUTION_FAILED_CONTEXT = "参照先法令名の解決失敗"

# (法令名, 深さ, 参照元法令名, 確定済み候補)
QueueItem = Tuple[str, int, str, Optional[LawCandidate]]


class LawClient(Protocol):
    """LawCrawler が必要とする API クライアントの最小インターフェース"""

    def search_laws(self, law_title: str) -> List[LawCandidate]:
        ...

    def fetch_law_contents(self, candidate: LawCandidate) -> LawContents:
        ...


class CandidateSelector(Protocol):
    """複数候補から1件を選ぶ（対話プロンプト等）。0始まりの番号を返す"""

    def select(self, title: str, candidates: Sequence[LawCandidate]) -> int:
        ...


def select_exact_title(title: str, candidates: Sequence[LawCandidate]) -> Optional[LawCandidate]:
    """非対話モードの自動確定: 法令名が完全一致する候補がちょうど1件ならそれを返す"""
    exact = [c for c in candidates if c.law_title == title]
    if len(exact) == 1:
        return exact[0]
    return None


@dataclass
class CrawlReport:
    """1回の実行結果"""
    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    unresolved: List[UnresolvedRef] = field(default_factory=list)
    dictionary_saved: bool = False
    unresolved_saved: bool = False


class LawCrawler:
    def __init__(
        self,
        client: LawClient,
        dictionary: LawNameDictionary,
        output_dir: Path,
        max_depth: int = 2,
        no_overwrite: bool = False,
        non_interactive: bool = False,
        unresolved_path: Optional[Path] = None,
        selector: Optional[CandidateSelector] = None,
    ):
        self.client = client
        self.dictionary = dictionary
        self.output_dir = Path(output_dir)
        self.max_depth = max_depth
        self.no_overwrite = no_overwrite
        self.non_interactive = non_interactive
        self.unresolved_path = unresolved_path
        self.selector = selector
        self.unresolved_refs: List[UnresolvedRef] = []

    # ------------------------------------------------------------------
    # 実行
    # ------------------------------------------------------------------

    def run(self, root_title: Optional[str] = None, root_law_id: Optional[str] = None) -> CrawlReport:
        """
        指定法令名（または law_id）から再帰取得を実行し、ノートを生成する

        root_law_id を指定した場合、ルートは検索せずにその law_id で取得する。
        root_title はその際の表示用ヒントとしてだけ使う。

        Raises:
            ValueError: root_title と root_law_id のどちらも無い場合
            ResolutionError: ルート法令を確定できない場合
            ApiError / EmptyLawTextError: 本文取得に失敗した場合
            OSError: 出力先の作成・書き込みに失敗した場合
        """
        if root_law_id:
            root = self.seed_from_law_id(root_law_id, root_title)
            queue: Deque[QueueItem] = deque([(root.law_title, 0, root.law_title, root)])
        elif root_title:
            queue = deque([(root_title, 0, root_title, None)])
        else:
            raise ValueError("法令名または law_id を指定してください")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        report = CrawlReport()
        visited: Set[str] = set()

        while queue:
            title, depth, source_law, candidate = queue.popleft()
            if depth > self.max_depth:
                continue

            try:
                if candidate is None:
                    candidate = self.resolve_candidate(title)
            except ResolutionError as e:
                if depth == 0:
                    raise
                self.unresolved_refs.append(UnresolvedRef(
                    source_law=source_law,
                    alias=title,
                    sample_context=RESOLUTION_FAILED_CONTEXT,
                ))
                logger.warning(f"参照先法令の解決に失敗したためスキップ: {title} ({e})")
                continue

            visit_key = candidate.identity_key()
            if visit_key in visited:
                continue
            visited.add(visit_key)

            if self.no_overwrite:
                existing = note_path(self.output_dir, candidate.law_title)
                if existing.exists():
                    logger.error(f"既存ファイルがあるためスキップ: {existing}")
                    report.skipped.append(existing)
                    refs = self._references_from_existing_note(existing, candidate.law_title)
                    self._enqueue(queue, refs, depth)
                    continue

            logger.info(f"取得中: {candidate.law_title} ({candidate.id_display()}) depth={depth}")
            contents = self.client.fetch_law_contents(candidate)

            try:
                path, tokens = write_law_note(contents, depth, self.output_dir, self.no_overwrite)
                report.written.append(path)
                self.unresolved_refs.extend(
                    UnresolvedRef(source_law=contents.law_title, alias=token) for token in tokens
                )
            except NoteExistsError as e:
                logger.error(str(e))
                report.skipped.append(e.path)
            self.dictionary.register_law_contents(contents)

            refs = extract_external_references(contents.text, self.dictionary, contents.law_title)
            self._enqueue(queue, refs, depth)

        self._log_unresolved_summary()
        report.unresolved = list(self.unresolved_refs)
        if self.unresolved_path is not None:
            report.unresolved_saved = save_unresolved_refs(self.unresolved_path, self.unresolved_refs)
        if self.dictionary.path is not None:
            report.dictionary_saved = self.dictionary.save()
        return report

    def _enqueue(self, queue: Deque[QueueItem], refs: Set[LawRef], depth: int):
        # 集合の順序に依存しないよう並べてから積む
        for ref in sorted(refs, key=lambda r: (r.law_title, r.article)):
            queue.append((ref.law_title, depth + 1, ref.source_law, None))

    def seed_from_law_id(self, law_id: str, title_hint: Optional[str] = None) -> LawCandidate:
        """
        law_id 指定のルート候補を作る

        辞書に同じ law_id があれば正式名を使い、無ければヒント（無ければ law_id）を
        仮の法令名とする。ノートは取得した本文の法令名で書き出される。
        """
        entry = self.dictionary.find_by_law_id(law_id)
        if entry is not None:
            return entry.to_candidate()
        return LawCandidate(law_title=title_hint or law_id, law_id=law_id)

    def _references_from_existing_note(self, path: Path, law_title: str) -> Set[LawRef]:
        """既存ノートの本文から他法令参照を拾う（取得し直さずに探索を続けるため）"""
        doc = read_markdown_file(path)
        if doc is None:
            logger.warning(f"既存ノートを読み込めませんでした: {path}")
            return set()
        return extract_external_references(strip_wikilinks(doc.body), self.dictionary, law_title)

    def _log_unresolved_summary(self):
        if not self.unresolved_refs:
            return
        logger.warning("未解決参照:")
        for ref in self.unresolved_refs:
            logger.warning(f"  - [{ref.source_law}] {ref.alias}")

    # ------------------------------------------------------------------
    # 候補解決
    # ------------------------------------------------------------------

    def resolve_candidate(self, title: str) -> LawCandidate:
        """
        法令名を候補1件に確定する

        1. 辞書にあればそれを使う（ネットワーク照会なし）
        2. 検索して0件なら LawNotFoundError
        3. 1件ならそれを採用し、別名を辞書に登録
        4. 複数件なら
           - 非対話: 完全一致が1件だけなら採用、そうでなければ AmbiguousLawError
           - 対話: selector で番号を選ばせる
        """
        entry = self.dictionary.lookup(title)
        if entry is not None:
            return entry.to_candidate()

        candidates = self.client.search_laws(title)
        if not candidates:
            raise LawNotFoundError(f"法令が見つかりませんでした: {title}", title=title)

        if len(candidates) == 1:
            chosen = candidates[0]
        elif self.non_interactive or self.selector is None:
            chosen = select_exact_title(title, candidates)
            if chosen is None:
                raise AmbiguousLawError(
                    f"法令名 '{title}' は複数候補があります（{len(candidates)}件）。"
                    "--non-interactive では自動確定できません。",
                    title=title,
                )
        else:
            index = self.selector.select(title, candidates)
            if not 0 <= index < len(candidates):
                raise InvalidSelectionError(f"候補番号が不正です: {index + 1}", title=title)
            chosen = candidates[index]

        self.dictionary.register_candidate_aliases(title, chosen)
        return chosen
