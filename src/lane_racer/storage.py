"""
storage.py: Persistence for the best score and the local leaderboard.

Both live in a small SQLite key-value table. Storage problems never reach the
game loop: reads fall back to defaults and writes report failure by
returning False.
"""

import json
import logging
import math
import sqlite3
from typing import Callable, List, Optional

from .clock import WallClock
from .constants import (
    DB_FILE, BEST_SCORE_KEY, LEADERBOARD_KEY, MAX_NAME_LENGTH,
    DEFAULT_PLAYER_NAME, MAX_SUBMITTED_SCORE
)
from .data_models import LeaderboardEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Handles all interaction with the SQLite database.
    A file that cannot be opened as a database is replaced by an in-memory
    one, so scores still work for the session but are not kept.
    """
    def __init__(self, db_file: str = DB_FILE):
        self.db_file = db_file
        try:
            self._connect(db_file)
        except sqlite3.Error as e:
            logger.warning("Cannot use %s (%s), scores will not be saved", db_file, e)
            self._connect(":memory:")

    def _connect(self, db_file: str):
        conn = sqlite3.connect(db_file)
        try:
            self.conn = conn
            self.cur = conn.cursor()
            self.setup()
        except sqlite3.Error:
            conn.close()
            raise

    def setup(self):
        """Creates the table if it doesn't exist."""
        self.cur.execute("""
            CREATE TABLE IF NOT EXISTS KeyValue (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)
        self.conn.commit()

    def get(self, key: str) -> Optional[str]:
        """Fetches the value stored under key, or None."""
        try:
            self.cur.execute("SELECT value FROM KeyValue WHERE key=?", (key,))
            row = self.cur.fetchone()
        except sqlite3.Error as e:
            logger.warning("Failed to read %r: %s", key, e)
            return None
        return row[0] if row else None

    def set(self, key: str, value: str) -> bool:
        """Stores value under key. Returns False if the write failed."""
        try:
            self.cur.execute(
                "INSERT OR REPLACE INTO KeyValue (key, value) VALUES (?, ?)", (key, value))
            self.conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning("Failed to write %r: %s", key, e)
            return False

    def close(self):
        self.conn.close()


class BestScoreStore:
    """The player's personal best."""

    def __init__(self, kv: KeyValueStore, key: str = BEST_SCORE_KEY):
        self.kv = kv
        self.key = key

    def get_best(self) -> int:
        """Returns the stored best, or 0 when missing or corrupt."""
        raw = self.kv.get(self.key)
        if raw is None:
            return 0
        try:
            best = int(raw)
        except ValueError:
            logger.warning("Ignoring corrupt best score %r", raw)
            return 0
        return max(best, 0)

    def set_best(self, value: int) -> bool:
        return self.kv.set(self.key, str(int(value)))


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def parse_entry(raw) -> Optional[LeaderboardEntry]:
    """Builds an entry from decoded JSON, or None if it is malformed."""
    if not isinstance(raw, dict):
        return None
    name, score, time = raw.get("name"), raw.get("score"), raw.get("time")
    if not isinstance(name, str) or not _is_number(score) or not _is_number(time):
        return None
    if score < 0:
        return None
    return LeaderboardEntry(name=name, score=score, time=time)


def clean_name(name: Optional[str]) -> str:
    name = (name or "").strip() or DEFAULT_PLAYER_NAME
    return name[:MAX_NAME_LENGTH]


class LeaderboardStore:
    """
    Append-only list of submitted scores, stored as one JSON document.
    `clock` supplies epoch milliseconds for new entries and window queries.
    """

    def __init__(self, kv: KeyValueStore, key: str = LEADERBOARD_KEY,
                 clock: Optional[Callable[[], float]] = None):
        self.kv = kv
        self.key = key
        self.clock = clock or WallClock().now

    def load(self) -> List[LeaderboardEntry]:
        """Every well-formed stored entry. Corrupt data yields an empty list."""
        raw = self.kv.get(self.key)
        if raw is None:
            return []
        try:
            decoded = json.loads(raw)
        except ValueError as e:
            logger.warning("Failed to load leaderboard entries: %s", e)
            return []
        if not isinstance(decoded, list):
            logger.warning("Leaderboard data is not a list, ignoring it")
            return []
        entries = [parse_entry(item) for item in decoded]
        valid = [e for e in entries if e is not None]
        if len(valid) != len(decoded):
            logger.info("Dropped %d malformed leaderboard entries", len(decoded) - len(valid))
        return valid

    def append(self, entry: LeaderboardEntry) -> bool:
        entries = self.load()
        entries.append(LeaderboardEntry(name=entry.name[:MAX_NAME_LENGTH],
                                        score=entry.score, time=entry.time))
        return self.kv.set(self.key, json.dumps([e.to_dict() for e in entries]))

    def submit(self, name: Optional[str], score) -> Optional[LeaderboardEntry]:
        """
        Records a score for name at the current time.
        Returns the stored entry, or None if the score is out of range or
        could not be saved.
        """
        if not _is_number(score) or not 0 <= score <= MAX_SUBMITTED_SCORE:
            logger.warning("Rejected leaderboard score %r", score)
            return None
        entry = LeaderboardEntry(name=clean_name(name), score=score, time=self.clock())
        if not self.append(entry):
            logger.error("Failed to save leaderboard entry for %s", entry.name)
            return None
        return entry

    def top_by_window(self, window_ms: float, limit: int,
                      now: Optional[float] = None) -> List[LeaderboardEntry]:
        """Highest scores submitted within the last window_ms, best first."""
        if limit <= 0:
            return []
        now = self.clock() if now is None else now
        window_ms = max(window_ms, 0)
        recent = [e for e in self.load() if now - e.time <= window_ms]
        recent.sort(key=lambda e: e.score, reverse=True)
        return recent[:limit]
