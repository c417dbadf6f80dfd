"""Startup key check and operator CLI tests."""

import logging
import re

import pytest

from counsel_vault.cli import main
from counsel_vault.config.settings import AppSettings, get_settings
from counsel_vault.main import startup
from counsel_vault.security.cipher import CipherEngine
from counsel_vault.security.exceptions import ConfigurationError
from tests.helpers import TEST_KEY_HEX


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_ENCRYPTION_KEY", raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    root = logging.getLogger()
    handlers = list(root.handlers)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    root.handlers = handlers


def test_startup_builds_cipher():
    cipher = startup(AppSettings(_env_file=None, database_encryption_key=TEST_KEY_HEX))
    assert isinstance(cipher, CipherEngine)


@pytest.mark.parametrize("key", [None, "not-hex", "abcd"])
def test_startup_fails_without_valid_key(key):
    with pytest.raises(ConfigurationError):
        startup(AppSettings(_env_file=None, database_encryption_key=key))


def test_generate_key(capsys):
    assert main(["generate-key"]) == 0
    key = capsys.readouterr().out.strip()
    assert re.fullmatch(r"[0-9a-f]{64}", key)


def test_check_config_ok(monkeypatch, capsys):
    monkeypatch.setenv("DATABASE_ENCRYPTION_KEY", TEST_KEY_HEX)
    assert main(["check-config"]) == 0
    assert "encryption key OK" in capsys.readouterr().out


def test_check_config_reports_missing_key(capsys):
    assert main(["check-config"]) == 1
    err = capsys.readouterr().err
    assert "DATABASE_ENCRYPTION_KEY is not set" in err


def test_check_config_never_prints_key(monkeypatch, capsys):
    monkeypatch.setenv("DATABASE_ENCRYPTION_KEY", TEST_KEY_HEX[:-2])
    assert main(["check-config"]) == 1
    captured = capsys.readouterr()
    assert TEST_KEY_HEX[:-2] not in captured.out + captured.err


def test_init_db_creates_tables(tmp_path):
    assert main(["init-db"]) == 0
    assert (tmp_path / "cli.db").exists()
