"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from monitor_templates.config import Settings
from monitor_templates.service import AppService


@pytest.fixture()
def define_dir(tmp_path: Path) -> Path:
    """Create a minimal define directory with two apps and their parameters."""
    root = tmp_path / "define"
    app_dir = root / "app"
    param_dir = root / "param"
    app_dir.mkdir(parents=True)
    param_dir.mkdir()

    (app_dir / "app-api.yml").write_text(
        textwrap.dedent("""\
        app: api
        category: service
        name:
          en-US: API Service
          zh-CN: 接口服务
        metrics:
          - name: summary
            priority: 0
            protocol: http
            fields:
              - field: responseTime
                type: 0
                unit: ms
              - field: statusCode
                type: 1
            http:
              host: ^_^host^_^
              port: ^_^port^_^
              url: /health
              method: get
          - name: health
            priority: 1
            protocol: http
            fields:
              - field: status
                type: 1
            http:
              host: ^_^host^_^
              port: ^_^port^_^
              url: /status
        """),
        encoding="utf-8",
    )

    (app_dir / "app-redis.yml").write_text(
        textwrap.dedent("""\
        app: redis
        category: cache
        name:
          en-US: Redis
        metrics:
          - name: server
            priority: 0
            protocol: redis
            fields:
              - field: redis_version
                type: 1
              - field: uptime_in_seconds
                type: 0
            redis:
              host: ^_^host^_^
              port: ^_^port^_^
        """),
        encoding="utf-8",
    )

    (param_dir / "param-api.yml").write_text(
        textwrap.dedent("""\
        app: api
        param:
          - field: host
            name:
              en-US: Host
              zh-CN: 主机
            type: host
            required: true
          - field: port
            name:
              en-US: Port
            type: number
            range: '[0,65535]'
            required: true
            defaultValue: 80
          - field: ssl
            name:
              en-US: HTTPS
            type: boolean
            required: false
          - field: mode
            name:
              en-US: Mode
            type: radio
            options:
              - label: Fast
                value: fast
              - label: Full
                value: full
        """),
        encoding="utf-8",
    )

    (param_dir / "param-redis.yml").write_text(
        textwrap.dedent("""\
        app: redis
        param:
          - field: host
            name:
              en-US: Host
            type: host
            required: true
          - field: port
            name:
              en-US: Port
            type: number
            required: true
            defaultValue: 6379
          - field: password
            name:
              en-US: Password
            type: password
        """),
        encoding="utf-8",
    )

    # Not a definition document (should be skipped)
    (app_dir / "README.md").write_text("notes\n", encoding="utf-8")

    return root


@pytest.fixture()
def settings(define_dir: Path) -> Settings:
    return Settings(define_dir=str(define_dir))


@pytest.fixture()
def service(settings: Settings) -> AppService:
    """A bootstrapped service backed by the temporary define directory."""
    return AppService.bootstrap(settings)
