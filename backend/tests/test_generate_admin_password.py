"""Tests for the admin password hash generator script."""

import importlib.util
from pathlib import Path

import pytest

from gameads.services.credential_store import verify_password

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "generate_admin_password.py"


@pytest.fixture(scope="module")
def generator():
    spec = importlib.util.spec_from_file_location("generate_admin_password", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_strong_password_prints_env_lines(generator, capsys):
    exit_code = generator.main(
        ["MySecure@Password123", "--email", "ops@gameads.io", "--username", "Ops"]
    )

    assert exit_code == 0
    lines = capsys.readouterr().out.splitlines()
    assert "ADMIN_EMAIL=ops@gameads.io" in lines
    assert "ADMIN_USERNAME=Ops" in lines
    hash_line = next(line for line in lines if line.startswith("ADMIN_PASSWORD_HASH="))
    assert verify_password("MySecure@Password123", hash_line.split("=", 1)[1])


def test_weak_password_rejected(generator, capsys):
    exit_code = generator.main(["password"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "ADMIN_PASSWORD_HASH" not in captured.out
    assert "one uppercase letter" in captured.err


def test_prompts_when_password_omitted(generator, capsys, monkeypatch):
    monkeypatch.setattr(generator.getpass, "getpass", lambda prompt: "Prompted@Pass1")

    assert generator.main([]) == 0
    assert "ADMIN_PASSWORD_HASH=$argon2" in capsys.readouterr().out
