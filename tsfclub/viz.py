"""
tsfclub.viz
===========

Minimal plotting helpers for dashboard exports and reports.  Importing
this module pulls in *matplotlib* (Agg backend), so `import tsfclub`
alone stays lightweight.

Outputs are PNGs written to the *images/* folder (auto‑created on first
save).  Filenames can be overridden via keyword argument.
"""
from __future__ import annotations

import os
from collections import Counter
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from . import queries  # noqa: E402
from .models import ChapterStatus, MembershipStatus  # noqa: E402
from .store import EntityStore  # noqa: E402

# default output dir
_IMG_DIR = Path("images")


def _save(out_path: str | os.PathLike) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path


# ---------------------------------------------------------------------
# Plot 1 – bar chart of chapter counts by status
# ---------------------------------------------------------------------
def chapter_status_summary(
    store: EntityStore,
    out_path: str | os.PathLike = _IMG_DIR / "chapter_status.png",
) -> Path:
    """
    Generate a bar chart of how many chapters are in each status.

    Parameters
    ----------
    store : EntityStore
        The populated store.
    out_path : str or Path, default='images/chapter_status.png'
        Where to save the PNG.

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    counts = Counter(ch.status for ch in store.all("chapter"))
    xs = [s.value for s in ChapterStatus]
    ys = [counts.get(s, 0) for s in ChapterStatus]

    plt.figure()
    bars = plt.bar(xs, ys, color="#2b9348", edgecolor="#333")
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.title("Chapter Status")
    plt.ylabel("Chapters")
    plt.tight_layout()
    return _save(out_path)


# ---------------------------------------------------------------------
# Plot 2 – horizontal points leaderboard for one chapter
# ---------------------------------------------------------------------
def points_leaderboard(
    store: EntityStore,
    chapter_id: str,
    out_path: str | os.PathLike | None = None,
    top: int = 10,
) -> Path:
    """
    Draw the *top* approved members of a chapter by ledger points.

    Returns
    -------
    pathlib.Path
        Final image path.
    """
    rows = []
    for m in queries.memberships_by_chapter(store, chapter_id):
        if m.status is not MembershipStatus.APPROVED:
            continue
        user = store.get("user", m.user_id)
        rows.append((user.name, queries.total_points_for_user(store, m.user_id, chapter_id)))
    rows.sort(key=lambda t: t[1], reverse=True)
    rows = rows[:top]

    plt.figure(figsize=(6, max(2, 0.4 * len(rows) + 1)))
    names = [r[0] for r in reversed(rows)]
    pts = [r[1] for r in reversed(rows)]
    plt.barh(names, pts, color="#8d99ae", edgecolor="#333")
    for tier_line in (100, 200, 300):
        plt.axvline(tier_line, linestyle=":", color="#999", linewidth=0.8)
    plt.title(f"Points Leaderboard – {store.get('chapter', chapter_id).name}")
    plt.xlabel("Points")
    plt.tight_layout()
    return _save(out_path or _IMG_DIR / f"leaderboard_{chapter_id}.png")
