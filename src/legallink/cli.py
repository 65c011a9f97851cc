import logging
import typer
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    EGOV_API_BASE_URL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_DICT_PATH,
    DEFAULT_UNRESOLVED_PATH,
    DEFAULT_MAX_DEPTH,
    REQUEST_RETRIES,
    REQUEST_TIMEOUT_SEC,
)
from .core.models import LawCandidate
from .errors import LegalLinkError

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)


class PromptSelector:
    """端末で候補一覧を表示し、番号を入力させる"""

    def select(self, title: str, candidates: Sequence[LawCandidate]) -> int:
        typer.echo(f"複数候補が見つかりました: {title}")
        for i, c in enumerate(candidates, start=1):
            typer.echo(
                f"{i}. {c.law_title} / {c.id_display()} / {c.law_num or '-'} / {c.promulgation_date or '-'}"
            )
        number = typer.prompt("候補番号を入力してください", type=int)
        return number - 1


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def main(
    law_title: Optional[str] = typer.Argument(None, help="Root law title (e.g. 特許法)"),
    output_dir: Path = typer.Option(DEFAULT_OUTPUT_DIR, help="Directory for generated notes"),
    law_id: Optional[str] = typer.Option(None, "--law-id", help="Start from this e-Gov law ID instead of searching by title"),
    max_depth: int = typer.Option(DEFAULT_MAX_DEPTH, min=0, help="Maximum reference depth to follow"),
    no_overwrite: bool = typer.Option(False, "--no-overwrite", help="Do not overwrite existing notes"),
    api_base_url: str = typer.Option(EGOV_API_BASE_URL, help="e-Gov API base URL"),
    non_interactive: bool = typer.Option(False, "--non-interactive", help="Never prompt when candidates are ambiguous"),
    dict_path: Path = typer.Option(DEFAULT_DICT_PATH, help="Path to law name dictionary JSON"),
    unresolved_path: Path = typer.Option(DEFAULT_UNRESOLVED_PATH, help="Path to unresolved reference store JSON"),
    refresh_dictionary: bool = typer.Option(False, "--refresh-dictionary", help="Add entries from the full law listing"),
    build_dictionary: bool = typer.Option(False, "--build-dictionary", help="Rebuild the dictionary from the full law listing"),
    retries: int = typer.Option(REQUEST_RETRIES, min=1, help="Attempts per API request"),
    timeout: float = typer.Option(REQUEST_TIMEOUT_SEC, min=1.0, help="Per-request timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Fetch a law from the e-Gov API v2 and generate cross-linked Markdown notes,
    following 「○○法第N条」 references up to --max-depth.

    辞書作成のみなら LAW_TITLE を省略して --build-dictionary を使用する。
    法令IDが分かっていれば --law-id でルートの検索を省略できる。
    """
    configure_logging(verbose)

    if law_title is None and law_id is None and not build_dictionary:
        raise typer.BadParameter(
            "法令名または --law-id を指定してください（辞書作成のみなら --build-dictionary を使用）",
            param_hint="LAW_TITLE",
        )

    from .client.egov import EGovClient
    from .core.dictionary import LawNameDictionary
    from .core.crawler import LawCrawler

    try:
        client = EGovClient(api_base_url, timeout=timeout, retries=retries)
        dictionary = LawNameDictionary.load(dict_path)

        if refresh_dictionary or build_dictionary:
            logger.info("辞書更新中...")
            changed, _ = dictionary.refresh_from_listing(client.iter_law_listing(), clear=build_dictionary)
            if changed or build_dictionary:
                dictionary.save(force=True)

        if law_title is None and law_id is None:
            return

        crawler = LawCrawler(
            client=client,
            dictionary=dictionary,
            output_dir=output_dir,
            max_depth=max_depth,
            no_overwrite=no_overwrite,
            non_interactive=non_interactive,
            unresolved_path=unresolved_path,
            selector=None if non_interactive else PromptSelector(),
        )
        report = crawler.run(law_title, root_law_id=law_id)
    except (LegalLinkError, OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(code=1)

    typer.echo(
        f"Done: {len(report.written)} notes written, {len(report.skipped)} skipped, "
        f"{len(report.unresolved)} unresolved references."
    )


if __name__ == "__main__":
    app()
