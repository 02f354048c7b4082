"""Reporting a final score to the highscore server and reading back the table."""

from __future__ import annotations

import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable

log = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://highscore.example.com/games/chainscape-1/highscore"
ENDPOINT_VARIABLE = "CHAINSCAPE_HIGHSCORE_URL"
MAX_ENTRIES = 20
REQUEST_TIMEOUT = 10.0

Fetch = Callable[[str], "tuple[int, bytes]"]


class HighscoreState(Enum):
    """What the highscore overlay currently shows."""

    LOADING = auto()
    AVAILABLE = auto()
    CLOSED = auto()

    @classmethod
    def default(cls) -> HighscoreState:
        return cls.CLOSED


@dataclass(frozen=True)
class HighscoreItem:
    """One row of the highscore table."""

    player: str
    score: int


class HighscoreError(Exception):
    """Reporting the score or reading the table failed."""


def _with_params(endpoint: str, player: str, score: int) -> str:
    parts = urllib.parse.urlsplit(endpoint)
    query = urllib.parse.urlencode([("player", player), ("score", str(score))])
    combined = f"{parts.query}&{query}" if parts.query else query
    return urllib.parse.urlunsplit(parts._replace(query=combined))


def highscore_url(player: str, score: int) -> str:
    """The URL that records ``score`` for ``player`` on the default server."""
    if score < 0:
        raise ValueError("score must not be negative")
    return _with_params(DEFAULT_ENDPOINT, player, score)


def parse_highscore(data: bytes | str) -> list[HighscoreItem]:
    """Decode the server's JSON list of ``{"player": ..., "score": ...}`` objects."""
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise HighscoreError(f"Failed to parse highscore response: {err}") from err

    if not isinstance(payload, list):
        raise HighscoreError("Failed to parse highscore response: expected a list")

    items = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise HighscoreError("Failed to parse highscore response: expected an object")
        player = entry.get("player")
        score = entry.get("score")
        if not isinstance(player, str):
            raise HighscoreError("Failed to parse highscore response: invalid player")
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise HighscoreError("Failed to parse highscore response: invalid score")
        items.append(HighscoreItem(player, score))
    return items


def sort_highscore(items: Iterable[HighscoreItem]) -> list[HighscoreItem]:
    """Order by score, highest first; equal scores end up in reverse input order."""
    ordered = sorted(items, key=lambda item: item.score)
    ordered.reverse()
    return ordered


def _http_post(url: str) -> tuple[int, bytes]:
    request = urllib.request.Request(url, data=b"", method="POST")
    try:
        with urllib.request.urlopen(request, timeout=REQUEST_TIMEOUT) as response:
            return response.status, response.read()
    except urllib.error.HTTPError as err:
        return err.code, err.read()


def _report(fetch: Fetch, url: str) -> list[HighscoreItem]:
    try:
        status, body = fetch(url)
    except (OSError, ValueError) as err:
        raise HighscoreError(f"Failed to report highscore: {err}") from err

    if not 200 <= status < 300:
        raise HighscoreError(f"Failed to report highscore, got status code {status}")

    log.info("Got successful response, parsing highscore now")
    items = parse_highscore(body)
    log.info("Highscore contains %d items", len(items))
    return items


class HighscoreClient:
    """Posts scores in the background and hands over the table once it arrives."""

    def __init__(
        self,
        endpoint: str | None = None,
        fetch: Fetch | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.endpoint = endpoint or os.environ.get(ENDPOINT_VARIABLE, DEFAULT_ENDPOINT)
        self._fetch = fetch or _http_post
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="highscore"
        )
        self._task: Future | None = None
        self.state = HighscoreState.default()

    @property
    def pending(self) -> bool:
        return self._task is not None

    def post(self, player: str, score: int) -> None:
        """Report ``score`` for ``player``, dropping any request still running."""
        if score < 0:
            raise ValueError("score must not be negative")
        self.cancel()

        log.info("Reporting highscore %d for player %r", score, player)
        url = _with_params(self.endpoint, player, score)
        self._task = self._executor.submit(_report, self._fetch, url)
        self.state = HighscoreState.LOADING

    def take(self) -> list[HighscoreItem] | None:
        """The table once the request is done, else None; raises HighscoreError on failure."""
        task = self._task
        if task is None or not task.done():
            return None
        self._task = None
        self.state = HighscoreState.AVAILABLE
        return task.result()

    def cancel(self) -> None:
        """Forget the running request and close the overlay."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self.state = HighscoreState.CLOSED