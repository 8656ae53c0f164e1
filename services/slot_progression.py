"""
Slot progression engine.

Computes what a single slot prescribes at each of its occurrences:

- stage ladder: tracked (weight, stage) state, advanced by the slot's
  transition rules after each occurrence's outcome is known
- prescription ladder: stateless, every entry is a percentage of a
  reference 1RM
- GPP: no weight, pass/fail only

The replay engine drives these functions across a whole program; the
project_stage_ladder helper runs one slot in isolation.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from models.outcome import Outcome
from models.program_definition import Slot
from models.workout import ResolvedPrescription
from services.progression_rules import SlotState, round_to_increment, transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotPrescription:
    """What one slot occurrence asks the athlete to do."""

    weight: float
    stage: int
    stages_count: int
    sets: int
    reps: int
    is_amrap: bool = False
    reps_max: Optional[int] = None
    prescriptions: Optional[List[ResolvedPrescription]] = None


def materialize_stage_ladder(
    slot: Slot,
    state: SlotState,
    *,
    rounding_increment: float,
    training_max: Optional[float] = None,
) -> SlotPrescription:
    """
    Prescription for a stage-ladder occurrence, before its outcome is known.

    Args:
        slot: Stage-ladder slot template
        state: Current tracked state
        rounding_increment: Rounding step for the weight
        training_max: Current value of the slot's training max, when it uses one

    Returns:
        SlotPrescription for this occurrence
    """
    stage_index = min(state.stage, slot.last_stage)
    stage = slot.stages[stage_index]

    if slot.uses_training_max and training_max is not None:
        weight = round_to_increment(training_max * slot.tm_percent, rounding_increment)
    else:
        weight = round_to_increment(state.weight, rounding_increment)

    return SlotPrescription(
        weight=weight,
        stage=stage_index,
        stages_count=len(slot.stages),
        sets=stage.sets,
        reps=stage.reps,
        is_amrap=stage.amrap,
        reps_max=stage.reps_max,
    )


def materialize_prescription_ladder(
    slot: Slot,
    reference_value: float,
    *,
    rounding_increment: float,
) -> SlotPrescription:
    """
    Prescription for a percentage-ladder occurrence.

    Each entry's weight is round(reference × percent / 100). The last entry is
    the working set and supplies the row's weight, sets, and reps.

    Args:
        slot: Prescription-ladder slot template
        reference_value: Current value of the slot's percent_of key
        rounding_increment: Rounding step for every entry

    Returns:
        SlotPrescription for this occurrence
    """
    resolved = [
        ResolvedPrescription(
            percent=entry.percent,
            reps=entry.reps,
            sets=entry.sets,
            weight=round_to_increment(reference_value * entry.percent / 100, rounding_increment),
        )
        for entry in slot.prescriptions
    ]
    working = resolved[-1]
    return SlotPrescription(
        weight=working.weight,
        stage=0,
        stages_count=1,
        sets=working.sets,
        reps=working.reps,
        prescriptions=resolved,
    )


def materialize_gpp(slot: Slot) -> SlotPrescription:
    """Prescription for a GPP occurrence: display scheme only, no weight."""
    stage = slot.stages[0] if slot.stages else None
    return SlotPrescription(
        weight=0.0,
        stage=0,
        stages_count=1,
        sets=stage.sets if stage else 0,
        reps=stage.reps if stage else 0,
        is_amrap=stage.amrap if stage else False,
        reps_max=stage.reps_max if stage else None,
    )


def project_stage_ladder(
    slot: Slot,
    seed: float,
    outcomes: Sequence[Optional[Outcome]],
    *,
    weight_increment: float,
    rounding_increment: float,
    training_max: Optional[float] = None,
    occurrences: Optional[int] = None,
) -> List[SlotPrescription]:
    """
    Run one stage-ladder slot over its ordered occurrence history.

    outcomes[i] is the outcome of occurrence i (None when not attempted). By
    default one occurrence past the last outcome is included so the state
    that outcome produced is visible. update_tm writes apply to the local
    training max only; cross-slot coupling is the replay engine's job.

    Args:
        slot: Stage-ladder slot template
        seed: Starting tracked weight
        outcomes: Ordered outcomes, one per occurrence
        weight_increment: Default add_weight amount for the exercise
        rounding_increment: Rounding step for weights
        training_max: Starting training max, for slots that use one
        occurrences: Number of occurrences to project

    Returns:
        One SlotPrescription per occurrence
    """
    count = occurrences if occurrences is not None else len(outcomes) + 1
    state = SlotState(weight=round_to_increment(seed, rounding_increment), stage=0)
    projected: List[SlotPrescription] = []

    for i in range(count):
        projected.append(
            materialize_stage_ladder(
                slot, state, rounding_increment=rounding_increment, training_max=training_max
            )
        )
        outcome = outcomes[i] if i < len(outcomes) else None
        step = transition(
            slot,
            state,
            outcome,
            weight_increment=weight_increment,
            rounding_increment=rounding_increment,
        )
        state = step.state
        if step.reference_delta is not None and training_max is not None:
            training_max = round_to_increment(training_max + step.reference_delta, rounding_increment)

    return projected
