"""Tests for the printed leaderboard."""

from lane_racer.constants import HOUR_MS
from lane_racer.data_models import LeaderboardEntry
from lane_racer.leaderboard import format_board, render_boards, main
from lane_racer.storage import KeyValueStore, LeaderboardStore


def test_empty_board():
    assert "No scores" in format_board("Last hour", [])


def test_board_ranks_entries():
    text = format_board("Last hour", [LeaderboardEntry("Ada", 30, 0), LeaderboardEntry("Bob", 12, 0)])
    lines = text.splitlines()
    assert lines[0] == "Last hour"
    assert lines[2].split() == ["1.", "Ada", "30"]
    assert lines[3].split() == ["2.", "Bob", "12"]


def test_render_boards_splits_windows(leaderboard, clock):
    leaderboard.append(LeaderboardEntry("recent", 5, clock()))
    leaderboard.append(LeaderboardEntry("earlier", 9, clock() - HOUR_MS - 1))
    hour, day = render_boards(leaderboard).split("\n\n")
    assert "recent" in hour and "earlier" not in hour
    assert "earlier" in day and "recent" in day
    assert day.index("earlier") < day.index("recent")


def test_main_prints_boards(tmp_path, capsys):
    path = str(tmp_path / "board.db")
    kv = KeyValueStore(path)
    LeaderboardStore(kv).submit("Ada", 7)
    kv.close()

    main([path])

    out = capsys.readouterr().out
    assert "Last hour" in out and "Last 24 hours" in out
    assert "Ada" in out
