"""
tests/test_network.py
=====================

Unit tests for tsfclub.network.ChapterNetwork
"""

import pytest

from tsfclub.models import Chapter
from tsfclub.network import ChapterNetwork


def test_chapters_in_district(store):
    net = ChapterNetwork.from_store(store)
    assert net.chapters_in_district("Kozhikode") == ["1", "4"]
    assert sorted(net.chapters_in_district("Ernakulam")) == ["3", "5"]
    assert net.chapters_in_district("Idukki") == []


def test_district_stats(store):
    stats = ChapterNetwork.from_store(store).district_stats()
    assert set(stats) == {"Kozhikode", "Thrissur", "Thiruvananthapuram", "Ernakulam"}
    assert stats["Ernakulam"] == {"colleges": 2, "pending": 1, "active": 0, "deactivated": 1}
    assert stats["Thiruvananthapuram"]["colleges"] == 1


def test_chapter_needs_known_college(store):
    net = ChapterNetwork.from_store(store)
    with pytest.raises(KeyError):
        net.add_chapter(Chapter("9", "Orphan", "99"))


def test_to_json(store):
    data = ChapterNetwork.from_store(store).to_json()
    assert len(data["nodes"]) == 4 + 6 + 5
    assert len(data["links"]) == 6 + 5
    chapter = next(n for n in data["nodes"] if n["id"] == "chapter:1")
    assert chapter["kind"] == "chapter"
    assert chapter["status"] == "active"
