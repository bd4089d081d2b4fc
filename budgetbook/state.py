"""Shared state object handed to every component.

Components never keep their own copy of budgets, transactions or settings;
they read ``handle.state`` and change it through ``handle.mutate``.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, TypeVar

from .models import AppState
from .storage import JsonStateStorage

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _load_or_seed(storage: JsonStateStorage) -> AppState:
    """Load the stored state; a fresh default seed is saved once so its ids stay stable."""
    if storage.exists():
        return storage.load()
    state = storage.load()
    storage.save(state)
    logger.info("Saved default seed to %s", storage.path)
    return state


class StateHandle:
    """Owns the in-memory state and its load/save lifecycle."""

    def __init__(self, storage: JsonStateStorage, state: AppState):
        self.storage = storage
        self.state = state

    @classmethod
    def open(cls, storage: JsonStateStorage) -> 'StateHandle':
        return cls(storage, _load_or_seed(storage))

    def reload(self) -> None:
        self.state = _load_or_seed(self.storage)

    def mutate(self, change: Callable[[AppState], T]) -> T:
        """Apply ``change`` to a copy of the state, persist it, then adopt it.

        If ``change`` raises or the save fails, the current state is left
        exactly as it was.
        """
        draft = copy.deepcopy(self.state)
        result = change(draft)
        self.storage.save(draft)
        self.state = draft
        return result
