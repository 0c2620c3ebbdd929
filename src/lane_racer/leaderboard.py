"""
leaderboard.py: Prints the local leaderboard for the last hour and day.
"""

import logging
import sys
from typing import List

from .constants import DB_FILE, HOUR_MS, DAY_MS, HOUR_BOARD_LIMIT, DAY_BOARD_LIMIT
from .data_models import LeaderboardEntry
from .storage import KeyValueStore, LeaderboardStore

SECTIONS = (
    ("Last hour", HOUR_MS, HOUR_BOARD_LIMIT),
    ("Last 24 hours", DAY_MS, DAY_BOARD_LIMIT),
)


def format_board(title: str, entries: List[LeaderboardEntry]) -> str:
    lines = [title, "-" * 32]
    if not entries:
        lines.append("No scores")
    for rank, entry in enumerate(entries, start=1):
        lines.append(f"{rank:>3}. {entry.name:<20} {entry.score:>6}")
    return "\n".join(lines)


def render_boards(store: LeaderboardStore, now=None) -> str:
    now = store.clock() if now is None else now
    return "\n\n".join(
        format_board(title, store.top_by_window(window, limit, now=now))
        for title, window, limit in SECTIONS
    )


def main(argv=None):
    logging.basicConfig(level=logging.WARNING)
    argv = sys.argv[1:] if argv is None else argv
    db_file = argv[0] if argv else DB_FILE
    kv = KeyValueStore(db_file)
    try:
        print(render_boards(LeaderboardStore(kv)))
    finally:
        kv.close()


if __name__ == "__main__":
    main()
