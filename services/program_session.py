"""
Program session.

A ProgramSession is the single owner of one athlete's run through a program:
the definition, the validated config, and the result log. Every mutation
re-runs the full replay and diffs the new schedule against the previous one
so changed weights can be highlighted.
"""

import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from application.exceptions import (
    ConfigValidationError,
    InvalidLogTargetError,
    InvalidOutcomeError,
)
from core.constants import MAX_UNDO_STACK
from models.outcome import Outcome, ResultValue, UndoEntry
from models.program_definition import ProgramDefinition
from models.workout import WorkoutRow
from services.config_validator import Config, ConfigValidator
from services.reference_resolver import ReferenceReport, resolve_references
from services.replay_engine import mark_changes, replay
from services.result_log import ResultLog

logger = logging.getLogger(__name__)


class ProgramSession:
    """
    Owns (definition, config, result_log) and the last rendered schedule.

    Usage:
        >>> session = ProgramSession(definition)
        >>> rows = session.generate_program({"squat": "60"})
        >>> rows = session.log_outcome(0, "squat-t1", "success")
    """

    def __init__(
        self,
        definition: ProgramDefinition,
        config: Optional[Config] = None,
        result_log: Optional[ResultLog] = None,
        max_undo: int = MAX_UNDO_STACK,
        validator: Optional[ConfigValidator] = None,
    ):
        """
        Initialize a session.

        Args:
            definition: Program definition this session replays
            config: Previously validated config, None for a new program
            result_log: Existing result log, None for an empty one
            max_undo: Undo stack bound for a new result log
            validator: Config validator (defaults to ConfigValidator())
        """
        self._definition = definition
        self._config: Optional[Config] = dict(config) if config is not None else None
        self._log = result_log if result_log is not None else ResultLog(max_undo=max_undo)
        self._validator = validator or ConfigValidator()
        self._rows: Optional[List[WorkoutRow]] = None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def definition(self) -> ProgramDefinition:
        return self._definition

    @property
    def config(self) -> Optional[Config]:
        return dict(self._config) if self._config is not None else None

    @property
    def result_log(self) -> ResultLog:
        return self._log

    @property
    def rows(self) -> List[WorkoutRow]:
        """Current schedule; empty until a config has been accepted."""
        if self._rows is None:
            if self._config is None:
                return []
            self._rows = replay(self._definition, self._config, self._log.as_mapping())
        return list(self._rows)

    def reference_report(self) -> ReferenceReport:
        """Per-slot reference errors under the current config."""
        return resolve_references(self._definition, self._config)

    # -------------------------------------------------------------------------
    # Config
    # -------------------------------------------------------------------------

    def generate_program(self, raw: Mapping[str, Any]) -> List[WorkoutRow]:
        """
        Validate starting numbers and render a fresh schedule.

        Any previous results are discarded.

        Args:
            raw: Raw config values keyed by field key

        Returns:
            Full schedule, no slot marked changed

        Raises:
            ConfigValidationError: one or more fields were rejected
        """
        self._config = self._validate(raw)
        self._log.reset_all()
        self._rows = replay(self._definition, self._config, ())
        logger.info("Generated %s with %d workouts", self._definition.id, len(self._rows))
        return list(self._rows)

    def update_config(self, raw: Mapping[str, Any]) -> List[WorkoutRow]:
        """
        Replace the config atomically and recompute every weight.

        Logged outcomes are kept. On rejection nothing changes.

        Args:
            raw: Raw config values keyed by field key

        Returns:
            Full schedule with changed weights flagged

        Raises:
            ConfigValidationError: one or more fields were rejected
        """
        config = self._validate(raw)
        previous = self.rows
        self._config = config
        logger.info("Config updated for %s", self._definition.id)
        return self._refresh(previous)

    def _validate(self, raw: Mapping[str, Any]) -> Config:
        result = self._validator.validate(self._definition.config_fields, raw)
        if not result.is_valid:
            raise ConfigValidationError(result.errors)
        return result.config

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def log_outcome(
        self,
        workout_index: int,
        slot_id: str,
        result: Optional[ResultValue] = None,
        amrap_reps: Optional[int] = None,
        rpe: Optional[int] = None,
        note: Optional[str] = None,
    ) -> List[WorkoutRow]:
        """
        Record an outcome for one slot of one workout.

        Args:
            workout_index: Workout index, 0-based
            slot_id: Slot id on that workout's day
            result: success, fail, or None to clear back to not attempted
            amrap_reps: Reps achieved on an AMRAP set
            rpe: Rate of perceived exertion
            note: Free-text note

        Returns:
            Full schedule with changed weights flagged

        Raises:
            InvalidLogTargetError: the workout has no such slot
            InvalidOutcomeError: outcome values are out of range
        """
        if not self._definition.has_slot(workout_index, slot_id):
            raise InvalidLogTargetError(workout_index, slot_id)

        try:
            outcome = Outcome(
                workout_index=workout_index,
                slot_id=slot_id,
                result=result,
                amrap_reps=amrap_reps,
                rpe=rpe,
                note=note,
            )
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidOutcomeError(workout_index, slot_id, reason) from e
        previous = self.rows
        self._log.log_outcome(outcome)
        return self._refresh(previous)

    def undo_last(self) -> Optional[UndoEntry]:
        """Reverse the most recent write. Returns None when there is nothing to undo."""
        previous = self.rows
        entry = self._log.undo_last()
        if entry is not None:
            self._refresh(previous)
        return entry

    def undo_specific(self, workout_index: int, slot_id: str) -> Optional[UndoEntry]:
        """Reverse the most recent write to one slot. Returns None when it has nothing to undo."""
        previous = self.rows
        entry = self._log.undo_specific(workout_index, slot_id)
        if entry is not None:
            self._refresh(previous)
        return entry

    def reset_all(self) -> List[WorkoutRow]:
        """Clear every result and the undo history; the config is kept."""
        previous = self.rows
        self._log.reset_all()
        logger.info("Reset all results for %s", self._definition.id)
        return self._refresh(previous)

    def _refresh(self, previous: List[WorkoutRow]) -> List[WorkoutRow]:
        if self._config is None:
            self._rows = None
            return []
        rows = replay(self._definition, self._config, self._log.as_mapping())
        self._rows = mark_changes(previous, rows)
        return list(self._rows)
