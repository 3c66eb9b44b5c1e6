"""
Data manager for caching snapshot access.
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..records.loader import load_snapshot, parse_snapshot
from ..records.models import Battle
from ..utils.date_utils import get_week_key

logger = logging.getLogger(__name__)


class DataManager:
    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(DataManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, snapshot_path: Optional[Path] = None, cache_ttl: int = 300):
        if self._initialized:
            return

        self.snapshot_path = Path(snapshot_path or Path("data") / "ledger.json")
        self._data: Optional[Dict[str, Any]] = None
        self._last_loaded: float = 0
        self._cache_ttl = cache_ttl

        # Pre-calculated indexes
        self._battles_by_week: Dict[str, List[Battle]] = {}
        self._weeks: List[str] = []

        self._initialized = True

    def get_data(self, force_refresh: bool = False) -> Dict[str, Any]:
        """Get cached decks and battles, reloading if necessary."""
        current_time = time.time()

        if self._data is None or force_refresh or (current_time - self._last_loaded > self._cache_ttl):
            logger.info("Loading snapshot from %s (force=%s)", self.snapshot_path, force_refresh)
            raw = load_snapshot(self.snapshot_path)

            if raw is not None:
                decks, battles = parse_snapshot(raw)
                self._data = {
                    "project": raw.get("project"),
                    "exported_at": raw.get("exported_at"),
                    "decks": decks,
                    "battles": battles,
                }
            else:
                logger.info("No snapshot at %s, serving empty data", self.snapshot_path)
                self._data = {"project": None, "exported_at": None, "decks": [], "battles": []}

            self._last_loaded = current_time
            self._build_indexes()

        return self._data

    def _build_indexes(self):
        """Pre-calculate common lookup structures."""
        self._battles_by_week = {}

        for battle in self._data.get("battles", []):
            week = get_week_key(battle.date)
            self._battles_by_week.setdefault(week, []).append(battle)

        self._weeks = sorted(w for w in self._battles_by_week if w != "Unknown")
        logger.debug("Data indexes built: %d weeks", len(self._weeks))

    def get_weekly_counts(self) -> Dict[str, int]:
        """Battles recorded per ISO week, oldest first."""
        self.get_data()
        return {week: len(self._battles_by_week[week]) for week in self._weeks}

    def get_all_weeks(self) -> List[str]:
        self.get_data()  # Ensure loaded
        return self._weeks
