"""
tests/test_cli.py
=================

End‑to‑end runs of ``python -m tsfclub.cli`` against a temporary SQLite file.
"""

import pytest

from tsfclub.cli import main


@pytest.fixture
def db_url(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'club.db'}"
    assert main(["--db-url", url, "init-db"]) == 0
    assert main(["--db-url", url, "seed"]) == 0
    return url


def test_init_and_seed(capsys, db_url):
    out = capsys.readouterr().out
    assert "✅ database schema initialised" in out
    assert "✅ seeded 37 rows" in out


def test_evaluate_without_new_points(capsys, db_url):
    assert main(["--db-url", db_url, "evaluate", "--user", "6", "--chapter", "2"]) == 0
    assert "no new certificates" in capsys.readouterr().out


def test_reconcile(capsys, db_url):
    assert main(["--db-url", db_url, "reconcile"]) == 0
    assert "corrected 0 cached values" in capsys.readouterr().out


def test_charts(db_url, tmp_path):
    out = tmp_path / "images"
    assert main(["--db-url", db_url, "charts", "--chapter", "1", "--out", str(out)]) == 0
    assert (out / "chapter_status.png").exists()
    assert (out / "leaderboard_1.png").exists()


def test_unknown_user_exits_non_zero(capsys, db_url):
    assert main(["--db-url", db_url, "evaluate", "--user", "99", "--chapter", "1"]) == 1
    assert "⛔" in capsys.readouterr().err
