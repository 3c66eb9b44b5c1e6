"""
Configuration for the deck battle analyzer.

Engine constants are plain module values; every analyzer function takes the
relevant one as a keyword argument so callers can override it per call.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path


# Rating engine
INITIAL_RATING = 1500.0
K_FACTOR = 32

# Triangle / cycle detection
TRIANGLE_MIN_GAMES = 2
TRIANGLE_MIN_WIN_RATE = 55.0
MAX_CYCLE_SIZE = 5

# Matchup suggestions
SUGGESTION_LIMIT = 5
FEW_GAMES_THRESHOLD = 5
UNPLAYED_PRIORITY = 1000
FEW_GAMES_BASE_PRIORITY = 500
FEW_GAMES_STEP = 50
UNBALANCED_WEIGHT = 10

# Rivalries (evenly matched pairs)
RIVALRY_MIN_GAMES = 3
RIVALRY_MAX_BALANCE = 15.0

# Per-deck matchup classification
MATCHUP_MIN_GAMES = 3
FAVORABLE_WIN_RATE = 55.0
UNFAVORABLE_WIN_RATE = 45.0

RECENT_FORM_LENGTH = 5


@dataclass
class AppConfig:
    """Application settings loaded from environment variables."""

    data_dir: Path
    snapshot_name: str
    cache_ttl: int
    log_level: str

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_name

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        raw_ttl = os.getenv("BATTLE_CACHE_TTL", "300")
        try:
            cache_ttl = int(raw_ttl)
        except ValueError:
            raise ValueError(f"BATTLE_CACHE_TTL must be an integer, got {raw_ttl!r}") from None

        log_level = os.getenv("BATTLE_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"BATTLE_LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(
            data_dir=Path(os.getenv("BATTLE_DATA_DIR", "data")),
            snapshot_name=os.getenv("BATTLE_SNAPSHOT", "ledger.json"),
            cache_ttl=cache_ttl,
            log_level=log_level,
        )
