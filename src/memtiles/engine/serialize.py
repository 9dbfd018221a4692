from __future__ import annotations

from typing import Mapping

from .persistence import CardRecord, SaveSnapshot


class SnapshotFormatError(ValueError):
    pass


def _card_to_dict(r: CardRecord) -> dict[str, object]:
    return {"index": r.index, "pair_id": r.pair_id, "state": r.state}


def snapshot_to_dict(s: SaveSnapshot) -> dict[str, object]:
    """Return the JSON-serializable form of a save snapshot."""
    return {
        "score": s.score,
        "turns": s.turns,
        "matched_pairs": s.matched_pairs,
        "grid_rows": s.grid_rows,
        "grid_columns": s.grid_columns,
        "card_states": [_card_to_dict(r) for r in s.card_states],
        "timestamp": s.timestamp,
    }


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    # bool is an int subclass; a save never legitimately holds one
    if not isinstance(v, int) or isinstance(v, bool):
        raise SnapshotFormatError(f"Expected int for {key}")
    return v


def _card_from_dict(d: Mapping[str, object]) -> CardRecord:
    state = d.get("state")
    if not isinstance(state, str):
        raise SnapshotFormatError("Expected string for state")
    return CardRecord(
        index=_require_int(d, "index"),
        pair_id=_require_int(d, "pair_id"),
        state=state,  # type: ignore[arg-type]  # range checked by PersistenceManager
    )


def snapshot_from_dict(d: Mapping[str, object]) -> SaveSnapshot:
    raw_cards = d.get("card_states", [])
    if not isinstance(raw_cards, list):
        raise SnapshotFormatError("card_states must be a list")
    cards: list[CardRecord] = []
    for item in raw_cards:
        if not isinstance(item, dict):
            raise SnapshotFormatError("card_states entries must be objects")
        cards.append(_card_from_dict(item))
    timestamp = d.get("timestamp", "")
    return SaveSnapshot(
        score=_require_int(d, "score"),
        turns=_require_int(d, "turns"),
        matched_pairs=_require_int(d, "matched_pairs"),
        grid_rows=_require_int(d, "grid_rows"),
        grid_columns=_require_int(d, "grid_columns"),
        card_states=tuple(cards),
        timestamp=str(timestamp),
    )
