"""
CLI のテスト

EGovClient を FakeLawClient に差し替えて typer の CliRunner で実行する。
"""
import json

import pytest
from typer.testing import CliRunner

from legallink.cli import app
from legallink.client import egov


LAWS = {
    "刑法": "第一条\n民法第二条の規定による。",
    "民法": "第一条\n本文",
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_egov(monkeypatch, fake_client_factory):
    """EGovClient(...) の呼び出しで FakeLawClient を返す"""
    created = []

    def factory(base_url, **kwargs):
        client = fake_client_factory(LAWS)
        client.init_args = (base_url, kwargs)
        created.append(client)
        return client

    monkeypatch.setattr(egov, "EGovClient", factory)
    return created


@pytest.fixture
def paths(tmp_path):
    return {
        "out": tmp_path / "laws",
        "dict": tmp_path / "data" / "law_name_dict.json",
        "unresolved": tmp_path / "data" / "unresolved_refs.json",
    }


def path_args(paths):
    return [
        "--output-dir", str(paths["out"]),
        "--dict-path", str(paths["dict"]),
        "--unresolved-path", str(paths["unresolved"]),
    ]


class TestCli:

    def test_missing_title_is_usage_error(self, runner, fake_egov):
        result = runner.invoke(app, [])
        assert result.exit_code == 2
        assert fake_egov == []

    def test_crawl(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["刑法", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 0, result.output
        assert (paths["out"] / "刑法.md").exists()
        assert (paths["out"] / "民法.md").exists()
        assert "Done: 2 notes written" in result.output
        assert "刑法" in json.loads(paths["dict"].read_text(encoding="utf-8"))

    def test_max_depth_zero(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["刑法", "--max-depth", "0", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 0, result.output
        assert not (paths["out"] / "民法.md").exists()

    def test_transport_options_passed_to_client(self, runner, fake_egov, paths):
        args = ["刑法", "--api-base-url", "https://example.test", "--retries", "5", "--timeout", "10"]
        result = runner.invoke(app, args + path_args(paths))
        assert result.exit_code == 0, result.output
        base_url, kwargs = fake_egov[0].init_args
        assert base_url == "https://example.test"
        assert kwargs == {"timeout": 10.0, "retries": 5}

    def test_root_not_found_exits_1(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["未知法", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 1
        assert not (paths["out"] / "未知法.md").exists()

    def test_build_dictionary_only(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["--build-dictionary", *path_args(paths)])
        assert result.exit_code == 0, result.output
        saved = json.loads(paths["dict"].read_text(encoding="utf-8"))
        assert set(saved) == {"刑法", "民法", "刑法番号", "民法番号"}
        assert not paths["out"].exists()

    def test_refresh_dictionary_then_crawl_without_search(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["刑法", "--refresh-dictionary", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 0, result.output
        assert fake_egov[0].search_calls == []
        assert (paths["out"] / "民法.md").exists()

    def test_invalid_dictionary_exits_1(self, runner, fake_egov, paths):
        paths["dict"].parent.mkdir(parents=True)
        paths["dict"].write_text("[]", encoding="utf-8")
        result = runner.invoke(app, ["刑法", *path_args(paths)])
        assert result.exit_code == 1

    def test_law_id_skips_root_search(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["--law-id", "FAKE0001", "--max-depth", "0", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 0, result.output
        assert fake_egov[0].search_calls == []
        assert fake_egov[0].fetch_calls == ["刑法"]
        assert (paths["out"] / "刑法.md").exists()
        assert "Done: 1 notes written" in result.output

    def test_unknown_law_id_exits_1(self, runner, fake_egov, paths):
        result = runner.invoke(app, ["--law-id", "UNKNOWN", "--non-interactive", *path_args(paths)])
        assert result.exit_code == 1
        assert not any(paths["out"].glob("*.md"))
