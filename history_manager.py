from dataclasses import dataclass, replace
from typing import Any, Optional


MAX_HISTORY_DEFAULT = 50


@dataclass(frozen=True)
class HistoryState:
    """Past/present/future stack of row snapshots.

    ``past`` is ordered oldest first, ``future`` nearest first. Snapshots are
    never mutated once recorded.
    """

    present: Any
    past: tuple = ()
    future: tuple = ()


# ---------- pure transitions ----------
def record(state: HistoryState, snapshot, max_history: int = MAX_HISTORY_DEFAULT) -> HistoryState:
    past = state.past + (state.present,)
    if len(past) > max_history:
        past = past[len(past) - max_history :]
    return HistoryState(present=snapshot, past=past, future=())


def undo(state: HistoryState) -> HistoryState:
    if not state.past:
        return state
    return HistoryState(
        present=state.past[-1],
        past=state.past[:-1],
        future=(state.present,) + state.future,
    )


def redo(state: HistoryState, max_history: int = MAX_HISTORY_DEFAULT) -> HistoryState:
    if not state.future:
        return state
    past = state.past + (state.present,)
    if len(past) > max_history:
        past = past[len(past) - max_history :]
    return replace(state, present=state.future[0], past=past, future=state.future[1:])


def replace_present(state: HistoryState, snapshot) -> HistoryState:
    """Swap in a new present without touching past or future."""
    return replace(state, present=snapshot)


class HistoryManager:
    """Holds the current HistoryState and applies transitions to it."""

    def __init__(self, initial, max_history: int = MAX_HISTORY_DEFAULT):
        self.max_history = max(1, int(max_history))
        self.state = HistoryState(present=initial)

    def replace_present(self, snapshot):
        self.state = replace_present(self.state, snapshot)

    def record(self, snapshot):
        self.state = record(self.state, snapshot, self.max_history)

    def undo(self) -> Optional[Any]:
        if not self.state.past:
            return None
        self.state = undo(self.state)
        return self.state.present

    def redo(self) -> Optional[Any]:
        if not self.state.future:
            return None
        self.state = redo(self.state, self.max_history)
        return self.state.present

    @property
    def present(self):
        return self.state.present

    @property
    def can_undo(self) -> bool:
        return bool(self.state.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.state.future)

    @property
    def undo_depth(self) -> int:
        return len(self.state.past)

    @property
    def redo_depth(self) -> int:
        return len(self.state.future)
