# File: tests/test_cli.py
"""Тесты для CLI (`speed_scout.cli`) с использованием click.testing.CliRunner.
Проверяют режим измерений, режим `index`, `--version` и обработку ошибок.
"""
import json

import pytest
import speed_scout.cli as cli_module
from click.testing import CliRunner
from speed_scout.aggregator import summarize_url
from speed_scout.cli import cli
from speed_scout.engine import RunReport, UrlOutcome
from speed_scout.sampler.models import MetricSample

URL = "https://example.com/"


def fake_report(run_id=None, fail=False):
    series = {
        "performance": [MetricSample(URL, "performance", i, s) for i, s in enumerate((0.72, 0.91, 0.85))],
        "seo": [MetricSample(URL, "seo", 0, 0.9)],
    }
    report = RunReport(run_id=run_id)
    report.merge(UrlOutcome(url=URL, seconds=12, summary=summarize_url(URL, series)))
    if fail:
        report.merge(UrlOutcome(url="https://example.com/slow", seconds=30, error="gave up"))
    else:
        report.merge(UrlOutcome(url="https://example.com/other", seconds=30, summary=summarize_url(URL, series)))
    return report


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Пустая рабочая папка и чистое окружение."""
    monkeypatch.chdir(tmp_path)
    for var in ("CI", "DEBUG", "PSI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture()
def calls(monkeypatch):
    """Патчим start_run и start_discovery, чтобы не ходить в сеть."""
    recorded = {}

    async def fake_run(cfg, urls, run_id=None, on_progress=None):
        recorded["run"] = (cfg, list(urls), run_id)
        return fake_report(run_id, fail=recorded.get("fail", False))

    async def fake_discovery(cfg, seed):
        recorded["discovery"] = (cfg, seed)
        return {"https://example.com/b", "https://example.com/", "https://example.com/a"}

    monkeypatch.setattr(cli_module, "start_run", fake_run)
    monkeypatch.setattr(cli_module, "start_discovery", fake_discovery)
    return recorded


def test_usage_without_urls(calls):
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output
    assert not calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SpeedScout" in result.output


def test_index_mode_prints_discovered_urls(calls):
    result = CliRunner().invoke(cli, ["index", "https://example.com/"])
    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.startswith("https://")]
    assert lines == ["https://example.com/", "https://example.com/a", "https://example.com/b"]
    assert calls["discovery"][1] == "https://example.com/"
    assert "run" not in calls


def test_index_mode_requires_seed(calls):
    result = CliRunner().invoke(cli, ["index"])
    assert result.exit_code == 1
    assert "discovery" not in calls


def test_interactive_run(calls):
    result = CliRunner().invoke(cli, [URL, "https://example.com/other/", "--no-ci"])
    assert result.exit_code == 0, result.output
    assert "Performance:    72  83  91" in result.output
    assert "Total duration: 00:00:42" in result.output
    cfg, urls, _ = calls["run"]
    assert urls == [URL, "https://example.com/other"]
    assert cfg.count == 5
    assert cfg.strategy == "mobile"


def test_duplicate_urls_are_measured_once(calls):
    CliRunner().invoke(cli, [URL, URL, "https://EXAMPLE.com", "--no-ci"])
    assert calls["run"][1] == [URL]


def test_count_and_device_override_config(calls):
    result = CliRunner().invoke(cli, [URL, "-c", "10", "-d", "desktop", "--no-ci"])
    assert result.exit_code == 0, result.output
    cfg = calls["run"][0]
    assert cfg.count == 10
    assert cfg.strategy == "desktop"


def test_config_file_and_api_key_env(calls, isolated, monkeypatch):
    cfg_file = isolated / "scout.json"
    cfg_file.write_text(json.dumps({"count": 2, "retry": {"max_attempts": 4}}), encoding="utf-8")
    monkeypatch.setenv("PSI_API_KEY", "secret")

    result = CliRunner().invoke(cli, [URL, "--config", str(cfg_file), "--no-ci"])

    assert result.exit_code == 0, result.output
    cfg = calls["run"][0]
    assert cfg.count == 2
    assert cfg.retry.max_attempts == 4
    assert cfg.api_key == "secret"


def test_invalid_count_is_rejected(calls):
    result = CliRunner().invoke(cli, [URL, "-c", "0"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output
    assert "run" not in calls


def test_ci_mode_appends_to_log(calls, isolated, monkeypatch):
    monkeypatch.setenv("CI", "true")
    log = isolated / "psi.txt"
    log.write_text("previous run\n", encoding="utf-8")

    result = CliRunner().invoke(cli, [URL, "--hash", "abc123"])

    assert result.exit_code == 0, result.output
    content = log.read_text(encoding="utf-8")
    assert content.startswith("previous run\n\nCommit hash: abc123\n")
    assert content.rstrip().endswith("Total duration: 00:00:42")
    assert calls["run"][2] == "abc123"


def test_ci_flag_with_custom_output(calls, isolated):
    out = isolated / "reports" / "scores.txt"
    result = CliRunner().invoke(cli, [URL, "--ci", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").startswith("Commit hash: unknown\n")


def test_partial_failure_still_flushes_and_exits_nonzero(calls, isolated):
    calls["fail"] = True
    result = CliRunner().invoke(cli, [URL, "https://example.com/slow", "--ci"])
    assert result.exit_code == 1
    content = (isolated / "psi.txt").read_text(encoding="utf-8")
    assert "Collection failed: gave up" in content
    assert "Total duration: 00:00:42" in content


def test_debug_block_stays_out_of_ci_log(calls, isolated):
    result = CliRunner().invoke(cli, [URL, "--ci", "--debug"])
    assert result.exit_code == 0, result.output
    content = (isolated / "psi.txt").read_text(encoding="utf-8")
    assert "DEBUG:" not in content
    assert "Performance:    72  83  91" in content


def test_debug_block_shown_interactively(calls):
    result = CliRunner().invoke(cli, [URL, "--no-ci", "--debug"])
    assert result.exit_code == 0, result.output
    assert "DEBUG:" in result.output
