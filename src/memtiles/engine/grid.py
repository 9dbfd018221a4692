from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from .card import Card


class InvalidGridSize(ValueError):
    def __init__(self, rows: int, columns: int) -> None:
        super().__init__(f"Invalid grid size {rows}x{columns}: need positive dimensions and an even cell count.")
        self.rows = rows
        self.columns = columns


def is_valid_grid_size(rows: int, columns: int) -> bool:
    return rows > 0 and columns > 0 and (rows * columns) % 2 == 0


@dataclass
class Grid:
    rows: int
    columns: int
    cards: list[Card]

    @property
    def total_cards(self) -> int:
        return self.rows * self.columns

    @property
    def total_pairs(self) -> int:
        return self.total_cards // 2

    @property
    def size_label(self) -> str:
        return f"{self.rows}x{self.columns}"

    def card(self, index: int) -> Card | None:
        if 0 <= index < len(self.cards):
            return self.cards[index]
        return None

    def position_of(self, index: int) -> tuple[int, int]:
        """Row-major (row, column) of a card slot."""
        return divmod(index, self.columns)

    def cards_with_pair(self, pair_id: int) -> list[Card]:
        return [c for c in self.cards if c.pair_id == pair_id]

    def matched_pair_count(self) -> int:
        matched = Counter(c.pair_id for c in self.cards if c.state == "matched")
        return sum(1 for n in matched.values() if n == 2)

    def is_complete(self) -> bool:
        return self.matched_pair_count() == self.total_pairs


def shuffle_in_place(rng: random.Random, items: list[int]) -> None:
    # Fisher-Yates, walking down from the last slot.
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def paired_ids(total_pairs: int) -> list[int]:
    ids: list[int] = []
    for pair_id in range(total_pairs):
        ids.append(pair_id)
        ids.append(pair_id)
    return ids


def grid_from_pair_ids(rows: int, columns: int, pair_ids: Sequence[int]) -> Grid:
    if not is_valid_grid_size(rows, columns):
        raise InvalidGridSize(rows, columns)
    if len(pair_ids) != rows * columns:
        raise ValueError(f"Expected {rows * columns} pair ids, got {len(pair_ids)}.")
    counts = Counter(pair_ids)
    if any(n != 2 for n in counts.values()):
        raise ValueError("Every pair id must appear exactly twice.")
    cards = [Card(index=i, pair_id=pid) for i, pid in enumerate(pair_ids)]
    return Grid(rows=rows, columns=columns, cards=cards)


def generate_grid(rows: int, columns: int, rng: random.Random | None = None) -> Grid:
    """Build a freshly shuffled grid of face-down pairs.

    Raises InvalidGridSize before anything is built, so callers never see a
    partial grid.
    """
    if not is_valid_grid_size(rows, columns):
        raise InvalidGridSize(rows, columns)
    ids = paired_ids(rows * columns // 2)
    shuffle_in_place(rng or random.Random(), ids)
    return grid_from_pair_ids(rows, columns, ids)
