"""Tests for the command-line interface."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import yaml
from click.testing import CliRunner

from monitor_templates.cli import main


def _run(*args: str):
    return CliRunner().invoke(main, list(args))


class TestCli:
    def test_version(self) -> None:
        result = _run("--version")
        assert result.exit_code == 0
        assert "monitor-templates" in result.output

    def test_apps(self, define_dir: Path) -> None:
        result = _run("apps", "--define-dir", str(define_dir))
        assert result.exit_code == 0, result.output
        assert "api" in result.output
        assert "redis" in result.output

    def test_metrics(self, define_dir: Path) -> None:
        result = _run("metrics", "api", "--define-dir", str(define_dir))
        assert result.exit_code == 0
        assert "summary" in result.output
        assert "health" in result.output

    def test_metrics_unknown_app(self, define_dir: Path) -> None:
        result = _run("metrics", "kafka", "--define-dir", str(define_dir))
        assert result.exit_code == 1
        assert "not supported" in result.output

    def test_bootstrap_failure(self, tmp_path: Path) -> None:
        app_dir = tmp_path / "app"
        app_dir.mkdir()
        (app_dir / "app-x.yml").write_text("- not\n- a mapping\n", encoding="utf-8")
        result = _run("apps", "--define-dir", str(tmp_path))
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_params(self, define_dir: Path) -> None:
        result = _run("params", "redis", "--define-dir", str(define_dir))
        assert result.exit_code == 0
        assert "password" in result.output

    def test_i18n(self, define_dir: Path) -> None:
        result = _run("i18n", "--define-dir", str(define_dir), "--lang", "zh-CN")
        assert result.exit_code == 0
        resources = json.loads(result.stdout)
        assert resources["monitor.app.api"] == "接口服务"

    def test_hierarchy(self, define_dir: Path) -> None:
        result = _run("hierarchy", "--define-dir", str(define_dir))
        assert result.exit_code == 0
        assert "responseTime" in result.output

    def test_custom_creates_documents(self, define_dir: Path, tmp_path: Path) -> None:
        template_file = tmp_path / "kafka.yml"
        template_file.write_text(
            textwrap.dedent("""\
            app: kafka
            category: mq
            name:
              en-US: Kafka
            params:
              app: kafka
              params:
                - field: host
                  type: host
                  required: true
            definition:
              app: kafka
              category: mq
              metrics:
                - name: broker
                  protocol: jmx
                  fields:
                    - field: count
                      type: 0
            """),
            encoding="utf-8",
        )
        result = _run("custom", str(template_file), "--define-dir", str(define_dir))
        assert result.exit_code == 0, result.output
        assert (define_dir / "app" / "app-kafka.yml").exists()
        doc = yaml.safe_load((define_dir / "param" / "param-kafka.yml").read_text(encoding="utf-8"))
        assert doc["param"][0]["field"] == "host"

        again = _run("custom", str(template_file), "--define-dir", str(define_dir))
        assert again.exit_code == 1
        assert "already exists" in again.output

    def test_custom_requires_define_dir(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.delenv("MONITOR_TEMPLATES_DEFINE_DIR", raising=False)
        template_file = tmp_path / "kafka.yml"
        template_file.write_text("app: kafka\ncategory: mq\nname:\n  en-US: Kafka\n", encoding="utf-8")
        result = _run("custom", str(template_file))
        assert result.exit_code == 1

    def test_catalog(self, define_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "catalog"
        result = _run("catalog", "--define-dir", str(define_dir), "-o", str(out))
        assert result.exit_code == 0, result.output
        assert (out / "catalog.md").read_text(encoding="utf-8").startswith("# Monitor Catalog")
