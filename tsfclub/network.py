"""
tsfclub.network
===============

District → college → chapter hierarchy built on NetworkX.
"""

from __future__ import annotations

from typing import Any, Dict, List

import networkx as nx

from .models import Chapter, ChapterStatus, College
from .store import EntityStore


class ChapterNetwork:
    """
    Lightweight wrapper around a DiGraph of the club network.

    Node ids are ``district:<name>``, ``college:<id>`` and ``chapter:<id>``;
    each node carries ``kind`` and ``name`` attributes, chapter nodes also
    ``status``.

    Example
    -------
    >>> net = ChapterNetwork.from_store(store)
    >>> net.district_stats()["Kozhikode"]
    {'colleges': 2, 'pending': 1, 'active': 1, 'deactivated': 0}
    """

    def __init__(self) -> None:
        self.g = nx.DiGraph()

    @classmethod
    def from_store(cls, store: EntityStore) -> "ChapterNetwork":
        net = cls()
        for college in store.all("college"):
            net.add_college(college)
        for chapter in store.all("chapter"):
            net.add_chapter(chapter)
        return net

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add_college(self, college: College) -> None:
        """Add the college (and its district, if new)."""
        district = f"district:{college.district}"
        if district not in self.g:
            self.g.add_node(district, kind="district", name=college.district)
        node = f"college:{college.id}"
        self.g.add_node(node, kind="college", name=college.name, city=college.city)
        self.g.add_edge(district, node)

    def add_chapter(self, chapter: Chapter) -> None:
        """Add or refresh a chapter under its college."""
        parent = f"college:{chapter.college_id}"
        if parent not in self.g:
            raise KeyError(f"college {chapter.college_id} is not in the network")
        node = f"chapter:{chapter.id}"
        self.g.add_node(node, kind="chapter", name=chapter.name, status=chapter.status.value)
        self.g.add_edge(parent, node)

    def chapters_in_district(self, district: str) -> List[str]:
        """Chapter ids below *district*, in graph order."""
        root = f"district:{district}"
        if root not in self.g:
            return []
        return [
            n.split(":", 1)[1]
            for n in nx.dfs_preorder_nodes(self.g, root)
            if self.g.nodes[n]["kind"] == "chapter"
        ]

    def district_stats(self) -> Dict[str, Dict[str, int]]:
        """Per district: number of colleges and of chapters in each status."""
        stats: Dict[str, Dict[str, int]] = {}
        for node, data in self.g.nodes(data=True):
            if data["kind"] != "district":
                continue
            row = {"colleges": 0, **{s.value: 0 for s in ChapterStatus}}
            for college in self.g.successors(node):
                row["colleges"] += 1
                for chapter in self.g.successors(college):
                    row[self.g.nodes[chapter]["status"]] += 1
            stats[data["name"]] = row
        return stats

    def to_json(self) -> Dict[str, Any]:
        """Nodes and links arrays for a front‑end graph view."""
        nodes = [{"id": n, **data} for n, data in self.g.nodes(data=True)]
        links = [{"source": s, "target": t} for s, t in self.g.edges()]
        return {"nodes": nodes, "links": links}
