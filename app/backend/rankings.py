import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

RANKING_MODES = ("streak-attack", "time-attack")
MAX_NAME_LENGTH = 10
MAX_ENTRIES = 100


def normalize_ranking(name, score, mode, date: Optional[int] = None) -> Dict:
    """Validate a leaderboard submission and return the stored record.

    Raises ValueError with the same messages the public leaderboard uses.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Invalid name")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or score < 0:
        raise ValueError("Invalid score")
    if mode not in RANKING_MODES:
        raise ValueError("Invalid mode")
    return {
        "name": name.strip().upper()[:MAX_NAME_LENGTH],
        "score": score,
        "mode": mode,
        "date": int(date if date is not None else time.time() * 1000),
    }


def _top(entries: List[Dict]) -> List[Dict]:
    return sorted(entries, key=lambda e: e["score"], reverse=True)[:MAX_ENTRIES]


def _clean_entries(raw) -> List[Dict]:
    """Records from a stored or remote board, skipping anything unrankable.

    The public service stores members as JSON strings, so those are decoded.
    """
    entries = []
    if not isinstance(raw, list):
        return entries
    for entry in raw:
        if isinstance(entry, str):
            try:
                entry = json.loads(entry)
            except ValueError:
                continue
        if not isinstance(entry, dict):
            continue
        score = entry.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            continue
        entries.append(entry)
    return entries


def _merge(local: List[Dict], remote: List[Dict]) -> List[Dict]:
    seen = set()
    merged = []
    for entry in remote + local:
        key = (entry.get("name"), entry["score"], entry.get("date"))
        if key not in seen:
            seen.add(key)
            merged.append(entry)
    return _top(merged)


class RankingStore:
    """Per-mode top-100 leaderboard.

    Records always land in a local JSON file. When ``remote_url`` is set the
    remote service is the source of truth, and the local file is the fallback
    whenever it cannot be reached.
    """

    def __init__(
        self,
        path: Path,
        remote_url: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.path = Path(path)
        self.remote_url = remote_url
        self.timeout = timeout
        self._transport = transport

    # --- local file ---

    def load_local(self) -> Dict[str, List[Dict]]:
        board = {mode: [] for mode in RANKING_MODES}
        if not self.path.exists():
            return board
        try:
            with open(self.path, "r") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.exception("Could not read rankings file %s", self.path)
            return board
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed rankings file %s", self.path)
            return board
        for mode in RANKING_MODES:
            board[mode] = _top(_clean_entries(raw.get(mode)))
        return board

    def _save_local(self, board: Dict[str, List[Dict]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(board, f, indent=2)

    def _record_local(self, ranking: Dict) -> None:
        board = self.load_local()
        board[ranking["mode"]] = _top(board[ranking["mode"]] + [ranking])
        self._save_local(board)

    # --- remote service ---

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _backup(self, remote: Dict[str, List[Dict]]) -> None:
        board = self.load_local()
        for mode in RANKING_MODES:
            board[mode] = _merge(board[mode], remote[mode])
        try:
            self._save_local(board)
        except OSError as e:
            logger.warning("Could not back up remote rankings to %s (%s)", self.path, e)

    async def fetch(self) -> Dict[str, List[Dict]]:
        """Both leaderboards, best first.

        A successful remote read is merged into the local file so the
        fallback still shows the shared board once the service goes away.
        """
        if self.remote_url:
            try:
                async with self._client() as client:
                    resp = await client.get(self.remote_url)
                    resp.raise_for_status()
                    data = resp.json()
                remote = {mode: _top(_clean_entries(data.get(mode))) for mode in RANKING_MODES}
            except (httpx.HTTPError, ValueError, AttributeError, TypeError, KeyError) as e:
                logger.warning("Remote rankings unavailable (%s); using local file", e)
            else:
                self._backup(remote)
                return remote
        return self.load_local()

    async def submit(self, name, score, mode) -> Dict:
        ranking = normalize_ranking(name, score, mode)
        self._record_local(ranking)
        if self.remote_url:
            try:
                async with self._client() as client:
                    resp = await client.post(
                        self.remote_url,
                        json={"name": ranking["name"], "score": ranking["score"], "mode": ranking["mode"]},
                    )
                    resp.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning("Remote ranking submit failed (%s); kept locally", e)
        logger.info("Ranking recorded: %s %s (%s)", ranking["name"], ranking["score"], mode)
        return ranking
