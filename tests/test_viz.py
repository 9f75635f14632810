"""
tests/test_viz.py
=================

Smoke tests for the matplotlib charts.
"""

from tsfclub import viz


def test_chapter_status_summary(store, tmp_path):
    out = viz.chapter_status_summary(store, tmp_path / "charts" / "status.png")
    assert out.exists()
    assert out.stat().st_size > 0


def test_points_leaderboard_default_path(store, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = viz.points_leaderboard(store, "1")
    assert out == viz._IMG_DIR / "leaderboard_1.png"
    assert (tmp_path / out).exists()
