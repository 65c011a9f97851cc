from pathlib import Path
import json
import re
from typing import Any, Union

# Windows/Mac/Linux のファイル名で使えない文字
_FORBIDDEN_CHARS_RE = re.compile(r'[\\/*?:"<>|]')


def sanitize_filename(name: str) -> str:
    """
    Sanitize a string to be safe for filenames.
    Preserves Japanese characters but replaces slashes, colons, etc. with '_'.

    >>> sanitize_filename("民法/商法:テスト")
    '民法_商法_テスト'
    """
    safe = _FORBIDDEN_CHARS_RE.sub('_', name)
    # Trim surrounding whitespace, then trailing dots
    return safe.strip().rstrip('.')


def obsidian_dir(output_dir: Union[str, Path]) -> str:
    """
    出力ディレクトリを Obsidian リンク用の相対ディレクトリ文字列へ正規化する

    >>> obsidian_dir("./laws/")
    'laws'
    >>> obsidian_dir(".")
    ''
    """
    s = str(output_dir).replace("\\", "/")
    if s == ".":
        s = ""
    while s.startswith("./"):
        s = s[2:]
    return s.strip("/")


def obsidian_note_target(link_dir: str, law_title: str) -> str:
    """法令名から `dir/filename` 形式のリンク先を作る"""
    file_name = sanitize_filename(law_title)
    if not link_dir:
        return file_name
    return f"{link_dir}/{file_name}"


def load_json(path: Path, default: Any = None) -> Any:
    """JSON ファイルを読み込む。ファイルが無ければ default を返す"""
    if not path.exists():
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any):
    """親ディレクトリを作成してから JSON を保存する"""
    if str(path.parent) not in ("", "."):
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")
