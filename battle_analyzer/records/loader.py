"""
Loading deck and battle records from exported JSON snapshots.

Records come from an external store and are often incomplete (older
battles have no going-first counts, some dates are missing). Conversion
never rejects a record; unreadable fields are left as None and the
analyzers decide what to skip.
"""
import json
import logging
import math
from pathlib import Path
from typing import Any, Optional

from .models import Battle, Deck
from ..utils.date_utils import parse_battle_date

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file does not have the expected shape."""


def _pick(raw: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return default


def _as_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_count(value: Any) -> Optional[int]:
    """Return an integer count, or None for missing / NaN / non-numeric values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def deck_from_dict(raw: dict) -> Deck:
    """Build a Deck from a stored record (camelCase or snake_case keys)."""
    colors = _pick(raw, "colors", default=[]) or []
    if not isinstance(colors, list):
        colors = []

    return Deck(
        id=_as_id(_pick(raw, "id")),
        name=str(_pick(raw, "name", default="") or ""),
        colors=[str(c) for c in colors],
        image_url=_pick(raw, "imageUrl", "image_url"),
        created_at=parse_battle_date(_pick(raw, "createdAt", "created_at")),
        project_id=_pick(raw, "projectId", "project_id"),
    )


def battle_from_dict(raw: dict) -> Battle:
    """Build a Battle from a stored record (camelCase or snake_case keys)."""
    return Battle(
        id=_as_id(_pick(raw, "id")),
        deck1_id=_as_id(_pick(raw, "deck1Id", "deck1_id")),
        deck2_id=_as_id(_pick(raw, "deck2Id", "deck2_id")),
        deck1_wins=_as_count(_pick(raw, "deck1Wins", "deck1_wins")),
        deck2_wins=_as_count(_pick(raw, "deck2Wins", "deck2_wins")),
        deck1_going_first=_as_count(_pick(raw, "deck1GoingFirst", "deck1_going_first")),
        deck2_going_first=_as_count(_pick(raw, "deck2GoingFirst", "deck2_going_first")),
        date=parse_battle_date(_pick(raw, "date")),
        memo=str(_pick(raw, "memo", default="") or ""),
        project_id=_pick(raw, "projectId", "project_id"),
    )


def parse_snapshot(data: dict) -> tuple[list[Deck], list[Battle]]:
    """
    Convert a raw snapshot mapping into deck and battle records.

    Args:
        data: Mapping with ``decks`` and ``battles`` lists

    Returns:
        (decks, battles) in stored order
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    raw_decks = data.get("decks", [])
    raw_battles = data.get("battles", [])
    if not isinstance(raw_decks, list) or not isinstance(raw_battles, list):
        raise SnapshotError("Snapshot 'decks' and 'battles' must be lists")

    decks = [deck_from_dict(d) for d in raw_decks if isinstance(d, dict)]
    battles = [battle_from_dict(b) for b in raw_battles if isinstance(b, dict)]

    skipped = (len(raw_decks) - len(decks)) + (len(raw_battles) - len(battles))
    if skipped:
        logger.debug("Ignored %d non-object entries in snapshot", skipped)

    return decks, battles


def load_snapshot(path: Path) -> Optional[dict]:
    """Load a snapshot file, returning None when it does not exist."""
    path = Path(path)
    if not path.exists():
        return None

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"{path} must contain a JSON object")
    return data
