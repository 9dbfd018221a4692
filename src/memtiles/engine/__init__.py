"""Headless core of the memtiles matching game.

IMPORTANT: This package must never import pygame.
"""

from .card import Card
from .events import EventBus, EventRecorder
from .flow import AppFlow, Transition
from .grid import Grid, InvalidGridSize, generate_grid
from .persistence import CardRecord, LoadFailed, PersistenceManager, SaveSnapshot
from .processor import FlipQueueProcessor
from .scheduler import ManualScheduler, TimerHandle
from .scoring import ScoringEngine
from .session import GameSession
from .types import CardState, GameConfig, IntakeMode, ScoringConfig

__all__ = [
    "AppFlow",
    "Card",
    "CardRecord",
    "CardState",
    "EventBus",
    "EventRecorder",
    "FlipQueueProcessor",
    "GameConfig",
    "GameSession",
    "Grid",
    "IntakeMode",
    "InvalidGridSize",
    "LoadFailed",
    "ManualScheduler",
    "PersistenceManager",
    "SaveSnapshot",
    "ScoringConfig",
    "ScoringEngine",
    "TimerHandle",
    "Transition",
    "generate_grid",
]
