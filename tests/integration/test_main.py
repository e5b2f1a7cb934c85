from __future__ import annotations

import pytest

from inventory_desk.app.main import build_parser, main


@pytest.fixture
def env(monkeypatch, tmp_path):
    for name in ("BACKEND", "API_URL", "API_KEY"):
        monkeypatch.delenv(f"INVENTORY_DESK_{name}", raising=False)
    monkeypatch.setenv("INVENTORY_DESK_DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'desk.db'}")
    return str(tmp_path / "missing.env")


def test_seed_admin_is_idempotent(env, capsys) -> None:
    argv = ["--env-file", env, "seed-admin", "--email", "boss@example.com", "--password", "boss-pass"]

    assert main(argv) == 0
    first = capsys.readouterr().out
    assert main(argv) == 0
    second = capsys.readouterr().out

    assert first.startswith("Admin ready: boss@example.com")
    assert first == second


def test_remote_backend_without_credentials_is_config_error(env, capsys) -> None:
    code = main(["--env-file", env, "--backend", "remote", "seed-admin", "--email", "a@b.co", "--password", "x"])

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_seed_admin_refuses_remote_backend(env, monkeypatch, capsys) -> None:
    monkeypatch.setenv("INVENTORY_DESK_API_URL", "https://demo.supabase.co")
    monkeypatch.setenv("INVENTORY_DESK_API_KEY", "anon-key")

    code = main(["--env-file", env, "--backend", "remote", "seed-admin", "--email", "a@b.co", "--password", "x"])

    assert code == 2
    assert "local backend" in capsys.readouterr().err


def test_parser_defaults_to_running_the_shell() -> None:
    args = build_parser().parse_args(["--route", "/products"])

    assert args.func.__name__ == "cmd_run"
    assert args.route == "/products"
