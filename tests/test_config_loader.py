"""Tests for config loader."""

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

import pytest

from stool.config import StoolConfig, load_config
from stool.errors import ErrorKind, StoolError
from stool.models import CredentialKind


@pytest.fixture(autouse=True)
def _isolate_search_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("STOOL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr("platform.system", lambda: "Linux")
    monkeypatch.chdir(tmp_path)


def test_load_config_no_file() -> None:
    """Loading with no config file returns empty registries."""
    config = load_config()

    assert config == StoolConfig()
    assert config.servers == []
    assert config.ecr_registries == []
    assert config.sso_profiles == []


def test_load_config_from_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text(
        dedent("""
        servers:
          - name: web
            ip: 10.0.0.5
            user: ubuntu
            key_path: ~/.ssh/web.pem
          - name: db
            host: 10.0.0.6
            user: admin
            password: s3cret
        ecr_registries:
          - name: prod
            account_id: 123456789012
            region: ap-northeast-2
            images: [api, worker]
        sso_profiles:
          - name: dev
            start_url: https://example.awsapps.com/start
            sso_region: us-east-1
            account_id: "123456789012"
            role_name: Admin
            region: us-east-1
        """)
    )

    config = load_config(config_path=config_file)

    web, db = config.targets()
    assert web.destination == "ubuntu@10.0.0.5"
    assert web.credential.kind == CredentialKind.key
    assert web.credential.key_path == "~/.ssh/web.pem"
    assert db.host == "10.0.0.6"
    assert db.credential.kind == CredentialKind.password
    assert db.credential.password is not None
    assert db.credential.password.get_secret_value() == "s3cret"

    registry = config.ecr_registries[0]
    assert registry.account_id == "123456789012"
    assert registry.url == "123456789012.dkr.ecr.ap-northeast-2.amazonaws.com"
    assert registry.images == ["api", "worker"]
    assert config.sso_profiles[0].output == "json"


def test_load_config_found_in_search_path(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("servers:\n  - {name: a, ip: 1.2.3.4, user: me}\n")

    config = load_config()

    assert [server.name for server in config.servers] == ["a"]


def test_load_config_env_var(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_file = tmp_path / "elsewhere.yaml"
    config_file.write_text("ecr_registries: []\nservers:\n  - {name: b, ip: h, user: u}\n")
    monkeypatch.setenv("STOOL_CONFIG", str(config_file))

    config = load_config()

    assert config.servers[0].name == "b"


def test_load_config_explicit_missing_file(tmp_path: Path) -> None:
    with pytest.raises(StoolError) as excinfo:
        load_config(config_path=tmp_path / "missing.yaml")

    assert excinfo.value.kind == ErrorKind.config_load_failed


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text("servers: [unclosed\n")

    with pytest.raises(StoolError) as excinfo:
        load_config(config_path=config_file)

    assert excinfo.value.kind == ErrorKind.config_parse_error


def test_load_config_rejects_unknown_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text("serverz: []\n")

    with pytest.raises(StoolError) as excinfo:
        load_config(config_path=config_file)

    assert excinfo.value.kind == ErrorKind.config_parse_error


def test_load_config_empty_document(tmp_path: Path) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text("")

    assert load_config(config_path=config_file) == StoolConfig()


def test_key_and_password_warns_and_key_wins(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text(
        dedent("""
        servers:
          - name: both
            ip: 10.0.0.7
            user: root
            key_path: /keys/id
            password: 1234
        """)
    )

    with caplog.at_level(logging.WARNING, logger="stool.config.settings"):
        config = load_config(config_path=config_file)

    assert "both" in caplog.text
    credential = config.targets()[0].credential
    assert credential.kind == CredentialKind.key
    assert credential.password is None


def test_blank_key_path_falls_back_to_password(tmp_path: Path) -> None:
    config_file = tmp_path / "stool.yaml"
    config_file.write_text(
        "servers:\n  - {name: s, ip: h, user: u, key_path: '', password: pw}\n"
    )

    config = load_config(config_path=config_file)

    assert config.targets()[0].credential.kind == CredentialKind.password
