import logging
import re
import threading
from datetime import datetime

import requests

logger = logging.getLogger(__name__)

TODAY = "today"
ALL_TIME = "alltime"
SCOPES = (TODAY, ALL_TIME)

FETCH_WINDOW = 100


def sanitize_name(name):
    """Three upper-case letters; anything else is stripped. Empty becomes 'AAA'."""
    letters = re.sub(r"[^A-Z]", "", (name or "").upper())
    return letters[:3] or "AAA"


def today_string(tz=None):
    if tz is not None:
        from zoneinfo import ZoneInfo
        return datetime.now(ZoneInfo(tz)).strftime("%Y-%m-%d")
    return datetime.now().strftime("%Y-%m-%d")


def _valid_row(row):
    # bool is an int subclass; a true/false score is still garbage.
    return (
        isinstance(row, dict)
        and isinstance(row.get("score"), int)
        and not isinstance(row.get("score"), bool)
    )


def _check_scope(scope):
    if scope not in SCOPES:
        raise ValueError(f"scope must be one of {SCOPES}, got {scope!r}")


class LeaderboardClient:
    """Best-effort HTTP client for the shared score table.

    Every call makes exactly one request. Network and decoding failures are
    logged and come back as None or an empty list; nothing here raises into
    the game loop. The *_async variants run on daemon threads and hand
    their result to a callback.
    """

    def __init__(self, api_url, timeout=10, tz=None, background=True):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.tz = tz
        self.background = background

    @property
    def scores_url(self):
        return f"{self.api_url}/scores"

    def submit(self, name, score, won=False):
        payload = {
            "name": sanitize_name(name),
            "score": int(score),
            "date": today_string(self.tz),
            "victory": bool(won),
        }
        try:
            response = requests.post(self.scores_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()["id"]
        except requests.exceptions.RequestException as e:
            logger.warning("Score submission failed: %s", e)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Unexpected submission response: %s", e)
        return None

    def _fetch(self, params):
        try:
            response = requests.get(self.scores_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            scores = response.json()["scores"]
        except requests.exceptions.RequestException as e:
            logger.warning("Leaderboard request failed: %s", e)
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Unexpected leaderboard response: %s", e)
            return None
        if not isinstance(scores, list):
            logger.warning("Unexpected leaderboard payload type: %s", type(scores).__name__)
            return None
        rows = [row for row in scores if _valid_row(row)]
        if len(rows) != len(scores):
            logger.warning("Dropped %d malformed leaderboard rows", len(scores) - len(rows))
        return rows

    def _in_scope(self, entries, scope):
        if scope == TODAY:
            today = today_string(self.tz)
            return [e for e in entries if e.get("date") == today]
        return entries

    def query(self, scope=TODAY, limit=10):
        """Top entries for the scope, highest score first."""
        _check_scope(scope)
        scores = self._fetch({"order": "desc", "limit": FETCH_WINDOW})
        if scores is None:
            return []
        scores = sorted(self._in_scope(scores, scope), key=lambda e: e.get("score", 0), reverse=True)
        return [{"name": e.get("name", "???"), "score": e.get("score", 0)} for e in scores[:limit]]

    def rank(self, score, scope=TODAY):
        """1-based position: entries strictly above `score`, plus one."""
        _check_scope(scope)
        higher = self._fetch({"above": int(score)})
        if higher is None:
            return None
        higher = [e for e in self._in_scope(higher, scope) if e.get("score", 0) > score]
        return len(higher) + 1

    def _spawn(self, target):
        if not self.background:
            target()
            return None
        thread = threading.Thread(target=target, daemon=True)
        thread.start()
        return thread

    def submit_async(self, name, score, won=False, callback=None):
        def _submit():
            result = self.submit(name, score, won)
            if callback:
                callback(result)
        return self._spawn(_submit)

    def query_async(self, scope=TODAY, limit=10, callback=None):
        _check_scope(scope)

        def _query():
            result = self.query(scope, limit)
            if callback:
                callback(result)
        return self._spawn(_query)

    def rank_async(self, score, scope=TODAY, callback=None):
        _check_scope(scope)

        def _rank():
            result = self.rank(score, scope)
            if callback:
                callback(result)
        return self._spawn(_rank)


class LeaderboardPanel:
    """Game-over / victory leaderboard state for one finished run.

    Results that arrive after the player has started another run are
    dropped: `current_run` is asked for the live run id on every delivery.
    """

    def __init__(self, client, run_id, current_run, score, won=False, store=None):
        self.client = client
        self.run_id = run_id
        self.current_run = current_run
        self.score = score
        self.won = won
        self.store = store
        self.scope = TODAY
        self.button = "SUBMIT"
        self.entries = []
        self.rank_text = ""
        self.loading = False
        self.submitted_name = None

    @property
    def stale(self):
        return self.current_run() != self.run_id

    def open(self):
        """Initial fetch when the screen appears."""
        self.refresh()
        self.client.rank_async(self.score, TODAY, callback=self._on_rank)

    def refresh(self, scope=None):
        if scope is not None:
            _check_scope(scope)
            self.scope = scope
        self.loading = True
        self.client.query_async(self.scope, 10, callback=self._on_entries)

    def submit(self, name):
        if self.button != "SUBMIT":
            return False
        name = sanitize_name(name)
        self.submitted_name = name
        if self.store is not None:
            self.store.remember_name(name)
        self.button = "..."
        self.client.submit_async(name, self.score, self.won, callback=self._on_submitted)
        return True

    def _on_submitted(self, doc_id):
        if self.stale:
            return
        if doc_id is None:
            self.button = "ERROR"
            return
        self.button = "DONE!"
        self.refresh(TODAY)
        self.client.rank_async(self.score, TODAY, callback=self._on_rank)

    def _on_entries(self, entries):
        if self.stale:
            return
        self.loading = False
        self.entries = entries

    def _on_rank(self, rank):
        if self.stale or not rank:
            return
        self.rank_text = f"Your rank: #{rank} today"

    def highlighted(self, entry):
        return (
            self.submitted_name is not None
            and entry["name"] == self.submitted_name
            and entry["score"] == self.score
        )
