"""
Result log and undo stack.

The log maps (workout_index, slot_id) to the latest Outcome. Every write
pushes the outcome it replaced onto a bounded undo stack, so the most recent
edits can be reversed either in order (undo_last) or individually
(undo_specific). The log knows nothing about program definitions; callers
check that a target exists before writing.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from core.constants import MAX_UNDO_STACK
from models.outcome import Outcome, UndoEntry

logger = logging.getLogger(__name__)

OutcomeKey = Tuple[int, str]


class ResultLog:
    """
    Append-only outcome record with a bounded undo history.

    Usage:
        >>> log = ResultLog()
        >>> entry = log.log_outcome(Outcome(workout_index=0, slot_id="squat-t1", result="success"))
        >>> log.undo_last()
        UndoEntry(workout_index=0, slot_id='squat-t1', previous_outcome=None)
    """

    def __init__(self, max_undo: int = MAX_UNDO_STACK):
        """
        Initialize an empty log.

        Args:
            max_undo: Maximum undo entries kept; oldest entries are dropped
        """
        self._outcomes: Dict[OutcomeKey, Outcome] = {}
        self._undo_stack: List[UndoEntry] = []
        self._max_undo = max_undo

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, workout_index: int, slot_id: str) -> Optional[Outcome]:
        """Outcome logged for a target, None when nothing was logged."""
        return self._outcomes.get((workout_index, slot_id))

    def outcomes(self) -> List[Outcome]:
        """All logged outcomes ordered by workout index, then slot id."""
        return [self._outcomes[key] for key in sorted(self._outcomes)]

    def as_mapping(self) -> Dict[OutcomeKey, Outcome]:
        """Copy of the log keyed by (workout_index, slot_id)."""
        return dict(self._outcomes)

    @property
    def undo_history(self) -> List[UndoEntry]:
        """Undo entries, oldest first."""
        return list(self._undo_stack)

    def __len__(self) -> int:
        return len(self._outcomes)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def log_outcome(self, outcome: Outcome) -> UndoEntry:
        """
        Write an outcome, remembering the one it replaces.

        Args:
            outcome: New outcome for (workout_index, slot_id)

        Returns:
            The UndoEntry pushed for this write
        """
        entry = UndoEntry(
            workout_index=outcome.workout_index,
            slot_id=outcome.slot_id,
            previous_outcome=self._outcomes.get(outcome.key),
        )
        self._outcomes[outcome.key] = outcome
        self._push(entry)
        logger.debug(
            "Logged %s for workout %d slot %s",
            outcome.result.value if outcome.result else "undefined",
            outcome.workout_index,
            outcome.slot_id,
        )
        return entry

    def undo_last(self) -> Optional[UndoEntry]:
        """
        Reverse the most recent write.

        Returns:
            The consumed UndoEntry, or None when there is nothing to undo
        """
        if not self._undo_stack:
            return None
        entry = self._undo_stack.pop()
        self._restore(entry)
        return entry

    def undo_specific(self, workout_index: int, slot_id: str) -> Optional[UndoEntry]:
        """
        Reverse the most recent write to one target, wherever it sits in the stack.

        Other undo entries are left untouched. When the target has an outcome
        but its undo entry was already trimmed, the outcome is simply cleared.

        Args:
            workout_index: Workout index of the target
            slot_id: Slot id of the target

        Returns:
            The UndoEntry applied, or None when the target has nothing to undo
        """
        key = (workout_index, slot_id)
        for position in range(len(self._undo_stack) - 1, -1, -1):
            if self._undo_stack[position].key == key:
                entry = self._undo_stack.pop(position)
                self._restore(entry)
                return entry

        if key in self._outcomes:
            del self._outcomes[key]
            logger.debug("Cleared workout %d slot %s without undo entry", workout_index, slot_id)
            return UndoEntry(workout_index=workout_index, slot_id=slot_id, previous_outcome=None)
        return None

    def reset_all(self) -> None:
        """Clear every outcome and the whole undo history."""
        self._outcomes.clear()
        self._undo_stack.clear()

    def _push(self, entry: UndoEntry) -> None:
        self._undo_stack.append(entry)
        overflow = len(self._undo_stack) - self._max_undo
        if overflow > 0:
            del self._undo_stack[:overflow]

    def _restore(self, entry: UndoEntry) -> None:
        if entry.previous_outcome is None:
            self._outcomes.pop(entry.key, None)
        else:
            self._outcomes[entry.key] = entry.previous_outcome

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready snapshot: {"results": [...], "undo_history": [...]}."""
        return {
            "results": [o.model_dump(mode="json") for o in self.outcomes()],
            "undo_history": [e.model_dump(mode="json") for e in self._undo_stack],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], max_undo: int = MAX_UNDO_STACK) -> "ResultLog":
        """
        Rebuild a log from a to_dict() snapshot.

        Args:
            data: Snapshot dictionary (None or empty for a fresh log)
            max_undo: Maximum undo entries kept

        Returns:
            ResultLog instance
        """
        log = cls(max_undo=max_undo)
        data = data or {}
        for raw in data.get("results") or []:
            outcome = Outcome.model_validate(raw)
            log._outcomes[outcome.key] = outcome
        for raw in data.get("undo_history") or []:
            log._push(UndoEntry.model_validate(raw))
        return log
