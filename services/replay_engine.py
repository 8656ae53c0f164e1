"""
Program replay engine.

Replays a program definition, a validated config, and the outcome log into
the full ordered list of materialized workouts. replay() is a pure function:
it keeps no state between calls, so any edit (new outcome, undo, config
change, reset) is handled by running it again from scratch.

Cross-slot coupling: slots sharing a training max / 1RM key read one shared
reference table. Only the keys slots declare through reads_key and writes_key
enter that table. Ordering invariant: every read of workout k sees all writes
made by workouts before k, and writes made at workout k are committed only
after every slot of workout k has been materialized.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from models.outcome import Outcome
from models.program_definition import ProgramDefinition, Slot, SlotMode
from models.workout import SlotRow, WorkoutRow
from services.progression_rules import SlotState, round_to_increment, transition
from services.reference_resolver import (
    ConfigValues,
    config_number,
    resolve_references,
    seed_weight,
)
from services.slot_progression import (
    SlotPrescription,
    materialize_gpp,
    materialize_prescription_ladder,
    materialize_stage_ladder,
)

logger = logging.getLogger(__name__)

OutcomeKey = Tuple[int, str]
OutcomeLog = Union[Mapping[OutcomeKey, Outcome], Iterable[Outcome]]


def index_outcomes(outcomes: OutcomeLog) -> Dict[OutcomeKey, Outcome]:
    """Normalize an outcome log into a (workout_index, slot_id) lookup."""
    if isinstance(outcomes, Mapping):
        return dict(outcomes)
    return {outcome.key: outcome for outcome in outcomes}


class _ReplayPass:
    """State of a single replay. Never reused across calls."""

    def __init__(
        self,
        definition: ProgramDefinition,
        config: ConfigValues,
        outcomes: Dict[OutcomeKey, Outcome],
    ):
        self._definition = definition
        self._config = config
        self._outcomes = outcomes
        self._report = resolve_references(definition, config)
        self._states: Dict[str, SlotState] = {}
        self._references: Dict[str, float] = {}
        self._last_weight_by_exercise: Dict[str, float] = {}

    def run(self) -> List[WorkoutRow]:
        if not self._report.is_valid:
            logger.warning(
                "Replaying %s with %d unresolved slot(s): %s",
                self._definition.id,
                len(self._report.errors),
                ", ".join(sorted(self._report.errors)),
            )
        self._seed()

        rows: List[WorkoutRow] = []
        for index in range(self._definition.total_workouts):
            day = self._definition.day_for(index)
            slot_rows = [self._materialize(index, slot) for slot in day.slots]
            rows.append(WorkoutRow(index=index, day_name=day.name, slots=slot_rows))
            for slot in day.slots:
                self._advance(index, slot)
        return rows

    def _seed(self) -> None:
        for slot in self._definition.iter_slots():
            if self._report.error_for(slot.id):
                continue
            if slot.mode is SlotMode.STAGE_LADDER:
                weight = seed_weight(self._definition, slot, self._config)
                self._states[slot.id] = SlotState(weight=weight, stage=0)
            keys = (slot.reads_key if slot.reads_reference else None, slot.writes_key)
            for key in keys:
                if key is not None and key not in self._references:
                    self._references[key] = config_number(self._config, key) or 0.0

    def _prescribe(self, slot: Slot) -> SlotPrescription:
        rounding = self._definition.rounding_for(slot)
        if slot.mode is SlotMode.GPP:
            return materialize_gpp(slot)
        if slot.mode is SlotMode.PRESCRIPTION_LADDER:
            return materialize_prescription_ladder(
                slot, self._references[slot.reads_key], rounding_increment=rounding
            )
        return materialize_stage_ladder(
            slot,
            self._states[slot.id],
            rounding_increment=rounding,
            training_max=self._references[slot.reads_key] if slot.reads_reference else None,
        )

    def _materialize(self, index: int, slot: Slot) -> SlotRow:
        outcome = self._outcomes.get((index, slot.id))
        common = dict(
            slot_id=slot.id,
            exercise_id=slot.exercise_id,
            exercise_name=self._definition.exercise_name(slot.exercise_id),
            tier=slot.tier,
            role=slot.resolved_role,
            is_gpp=slot.mode is SlotMode.GPP,
            complex_reps=slot.complex_reps,
            notes=slot.notes,
            result=outcome.result if outcome else None,
            amrap_reps=outcome.amrap_reps if outcome else None,
            rpe=outcome.rpe if outcome else None,
            note=outcome.note if outcome else None,
        )

        error = self._report.error_for(slot.id)
        if error:
            return SlotRow(**common, **_display_scheme(slot), unresolved=error)

        prescription = self._prescribe(slot)
        weight = prescription.weight
        previous = self._last_weight_by_exercise.get(slot.exercise_id)
        is_deload = previous is not None and 0 < weight < previous
        if weight > 0:
            self._last_weight_by_exercise[slot.exercise_id] = weight

        return SlotRow(
            **common,
            weight=weight,
            stage=prescription.stage,
            stages_count=prescription.stages_count,
            sets=prescription.sets,
            reps=prescription.reps,
            is_amrap=prescription.is_amrap,
            reps_max=prescription.reps_max,
            prescriptions=prescription.prescriptions,
            is_deload=is_deload,
        )

    def _advance(self, index: int, slot: Slot) -> None:
        if slot.mode is not SlotMode.STAGE_LADDER or self._report.error_for(slot.id):
            return

        rounding = self._definition.rounding_for(slot)
        step = transition(
            slot,
            self._states[slot.id],
            self._outcomes.get((index, slot.id)),
            weight_increment=self._definition.weight_increment_for(slot.exercise_id),
            rounding_increment=rounding,
        )
        self._states[slot.id] = step.state

        if step.reference_delta is not None:
            key = slot.writes_key
            updated = round_to_increment(self._references[key] + step.reference_delta, rounding)
            logger.debug(
                "Workout %d slot %s wrote %s: %s -> %s",
                index,
                slot.id,
                key,
                self._references[key],
                updated,
            )
            self._references[key] = updated


def _display_scheme(slot: Slot) -> Dict[str, int]:
    """Sets/reps shown for a slot whose weight could not be resolved."""
    if slot.prescriptions:
        working = slot.prescriptions[-1]
        return {"sets": working.sets, "reps": working.reps}
    if slot.stages:
        return {"sets": slot.stages[0].sets, "reps": slot.stages[0].reps}
    return {"sets": 0, "reps": 0}


def replay(
    definition: ProgramDefinition,
    config: ConfigValues,
    outcomes: OutcomeLog = (),
) -> List[WorkoutRow]:
    """
    Materialize every workout of a program.

    Args:
        definition: Program definition
        config: Validated config (weight values and select choices)
        outcomes: Logged outcomes, as a sequence or keyed by (workout_index, slot_id)

    Returns:
        One WorkoutRow per workout, in order; every is_changed flag is False
    """
    return _ReplayPass(definition, config, index_outcomes(outcomes)).run()


def mark_changes(
    previous: Optional[Sequence[WorkoutRow]],
    rows: Sequence[WorkoutRow],
) -> List[WorkoutRow]:
    """
    Flag slots whose weight moved relative to a previous replay.

    Args:
        previous: Rows from the previous replay, or None on first render
        rows: Rows from the current replay

    Returns:
        Rows with is_changed set where (index, slot_id) has a different weight
    """
    if not previous:
        return list(rows)

    prior = {(row.index, slot.slot_id): slot.weight for row in previous for slot in row.slots}
    marked: List[WorkoutRow] = []
    for row in rows:
        changed = False
        slots = []
        for slot in row.slots:
            key = (row.index, slot.slot_id)
            if key in prior and prior[key] != slot.weight:
                slot = slot.model_copy(update={"is_changed": True})
                changed = True
            slots.append(slot)
        marked.append(row.model_copy(update={"slots": slots}) if changed else row)
    return marked
