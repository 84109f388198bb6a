import threading
import time
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

from utils.config import Config
from utils.debounce import Debouncer
from utils.models import Medicine, SearchState
from utils.utils import setup_logger

logger = setup_logger(__name__)

MIN_QUERY_LENGTH = 2


def search_medicines(query: str, medicines: Sequence[Medicine], limit: int = None) -> Tuple[List[Medicine], bool]:
    """
    Match medicines whose name or any use contains the query,
    case-insensitively. Returns (results, search_initiated).
    """
    if limit is None:
        limit = Config.SEARCH_RESULT_LIMIT
    term = (query or "").strip()
    if len(term) < MIN_QUERY_LENGTH:
        return [], False

    term = term.lower()
    results = []
    for medicine in medicines:
        if len(results) >= limit:
            break
        # name first, uses only when the name misses
        if term in medicine.name.lower() or any(term in use.lower() for use in medicine.uses):
            results.append(medicine)
    return results, True


def suggest_medicines(query: str, medicines: Sequence[Medicine], limit: int = None) -> List[Medicine]:
    if limit is None:
        limit = Config.SUGGESTION_LIMIT
    if not medicines or len(query or "") < MIN_QUERY_LENGTH:
        return []
    term = query.lower()
    return [m for m in medicines if term in m.name.lower()][:limit]


def summarize(medicine: Medicine) -> Dict:
    """List row for a search hit: name and the first two uses."""
    uses = ", ".join(medicine.uses[:2])
    if len(medicine.uses) > 2:
        uses += "..."
    return {"id": medicine.id, "name": medicine.name, "uses": uses}


class SearchSession:
    """Incremental search state for one view, re-filtered after typing pauses."""

    def __init__(self, medicines: Sequence[Medicine], wait_ms: int = None, timer_factory=None):
        self.medicines = medicines
        wait_ms = wait_ms if wait_ms is not None else Config.SEARCH_DEBOUNCE_MS
        self._state = SearchState()
        self._lock = threading.Lock()
        self._debouncer = Debouncer(self._run, wait_ms / 1000.0, timer_factory=timer_factory)

    def update(self, term: str):
        with self._lock:
            self._state.term = term
        self._debouncer(term)

    def flush(self):
        self._debouncer.flush()

    def close(self):
        self._debouncer.cancel()

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def _run(self, term: str):
        results, initiated = search_medicines(term, self.medicines)
        with self._lock:
            self._state.results = results
            self._state.search_initiated = initiated
        logger.debug(f"Search '{term}' matched {len(results)} medicines")

    def state(self) -> SearchState:
        with self._lock:
            return SearchState(
                term=self._state.term,
                results=list(self._state.results),
                search_initiated=self._state.search_initiated,
            )

    def summary(self) -> Dict:
        state = self.state()
        return {
            "term": state.term,
            "search_initiated": state.search_initiated,
            "pending": self.pending,
            "no_results": bool(state.term) and state.search_initiated and not state.results,
            "results": [summarize(m) for m in state.results],
        }


class SearchSessionPool:
    """
    Search sessions keyed by view. Sessions idle longer than
    `idle_seconds` are closed, and the least recently used ones are
    closed once more than `limit` are open.
    """

    def __init__(self, factory, limit: int = None, idle_seconds: int = None, clock=None):
        self.factory = factory
        self.limit = limit if limit is not None else Config.SEARCH_SESSION_LIMIT
        self.idle_seconds = idle_seconds if idle_seconds is not None else Config.SEARCH_SESSION_IDLE_SECONDS
        self.clock = clock or time.monotonic
        self._sessions: "OrderedDict[str, Tuple[SearchSession, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, key):
        with self._lock:
            return key in self._sessions

    def get(self, key: str) -> SearchSession:
        now = self.clock()
        with self._lock:
            evicted = self._evict_idle(now)
            entry = self._sessions.pop(key, None)
            live = entry[0] if entry else self.factory()
            self._sessions[key] = (live, now)
            while len(self._sessions) > self.limit:
                _, (oldest, _) = self._sessions.popitem(last=False)
                evicted.append(oldest)
        for stale in evicted:
            stale.close()
        if evicted:
            logger.debug(f"Closed {len(evicted)} search sessions")
        return live

    def _evict_idle(self, now: float) -> List[SearchSession]:
        idle = [k for k, (_, seen) in self._sessions.items() if now - seen > self.idle_seconds]
        return [self._sessions.pop(k)[0] for k in idle]

    def close(self, key: Optional[str]) -> bool:
        with self._lock:
            entry = self._sessions.pop(key, None)
        if entry:
            entry[0].close()
        return entry is not None

    def close_all(self):
        with self._lock:
            sessions = [live for live, _ in self._sessions.values()]
            self._sessions.clear()
        for live in sessions:
            live.close()
