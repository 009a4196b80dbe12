"""Tests for the operator CLI in main.py."""

from unittest.mock import patch

import pytest

import main
from auth.store import UserStore


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


def test_create_user(db_url, capsys):
    with patch("main.getpass.getpass", side_effect=["secret1", "secret1"]):
        rc = main.main(["create-user", "ops@example.com", "--name", "Ops", "--db", db_url])
    assert rc == 0
    assert "ops@example.com" in capsys.readouterr().out

    store = UserStore(db_url)
    try:
        assert store.get_by_email("ops@example.com").name == "Ops"
    finally:
        store.close()


def test_create_user_rejects_short_password(db_url, capsys):
    with patch("main.getpass.getpass", side_effect=["123", "123"]):
        rc = main.main(["create-user", "ops@example.com", "--db", db_url])
    assert rc == 1
    assert "at least 6" in capsys.readouterr().err


def test_password_mismatch_retries(db_url):
    with patch("main.getpass.getpass", side_effect=["secret1", "nope", "secret1", "secret1"]):
        rc = main.main(["create-user", "retry@example.com", "--db", db_url])
    assert rc == 0


def test_serve_invokes_uvicorn():
    with patch("uvicorn.run") as run:
        rc = main.main(["serve", "--port", "9000"])
    assert rc == 0
    run.assert_called_once_with("asgi:app", host="127.0.0.1", port=9000, reload=False)


def test_command_required():
    with pytest.raises(SystemExit):
        main.main([])
