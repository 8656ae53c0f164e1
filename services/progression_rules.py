"""
Progression rule interpreter.

Turns a slot's declarative transition rules into state changes. The rule set
is a closed union (see models.program_definition.ProgressionRule); every
member is handled explicitly and an unhandled member fails loudly through
assert_never.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, assert_never

from models.outcome import Outcome, ResultValue
from models.program_definition import (
    AddWeight,
    AddWeightResetStage,
    AdvanceStage,
    AdvanceStageAddWeight,
    DeloadPercent,
    NoChange,
    ProgressionRule,
    Slot,
    UpdateTrainingMax,
)

logger = logging.getLogger(__name__)


def round_to_increment(value: float, increment: float) -> float:
    """
    Round a weight to the nearest multiple of increment (halves round up).

    Non-finite or negative values collapse to 0.

    Args:
        value: Raw weight
        increment: Rounding step (e.g. 2.5, 1.25, 0.5)

    Returns:
        Rounded weight
    """
    if not math.isfinite(value) or value <= 0:
        return 0.0
    if increment <= 0:
        return round(value, 2)
    steps = math.floor(value / increment + 0.5)
    return round(steps * increment, 6)


@dataclass(frozen=True)
class SlotState:
    """Tracked state of a stage-ladder slot between occurrences."""

    weight: float
    stage: int = 0


@dataclass(frozen=True)
class Transition:
    """Result of applying one rule: the next state plus any reference write."""

    state: SlotState
    reference_delta: Optional[float] = None


def select_rule(slot: Slot, state: SlotState, result: Optional[ResultValue]) -> ProgressionRule:
    """
    Pick the transition rule for an occurrence's result.

    Args:
        slot: Stage-ladder slot template
        state: State the occurrence was materialized with
        result: Logged result, None when not yet attempted

    Returns:
        The rule to apply for the next occurrence
    """
    at_last_stage = state.stage >= slot.last_stage

    if result is None:
        return slot.on_undefined
    if result == ResultValue.SUCCESS:
        if at_last_stage and slot.on_final_stage_success is not None:
            return slot.on_final_stage_success
        return slot.on_success
    if at_last_stage:
        return slot.on_final_stage_fail
    return slot.on_mid_stage_fail


def apply_rule(
    rule: ProgressionRule,
    state: SlotState,
    *,
    last_stage: int,
    weight_increment: float,
    rounding_increment: float,
    amrap_reps: Optional[int] = None,
) -> Transition:
    """
    Apply a single progression rule.

    Args:
        rule: The rule to interpret
        state: Current slot state
        last_stage: Index of the slot's final stage
        weight_increment: Default add_weight amount for the exercise
        rounding_increment: Rounding step for resulting weights
        amrap_reps: Logged AMRAP reps, gates update_tm

    Returns:
        Transition with the next state and an optional training max delta
    """
    match rule:
        case NoChange():
            return Transition(state)
        case AdvanceStage():
            return Transition(replace(state, stage=min(state.stage + 1, last_stage)))
        case AdvanceStageAddWeight():
            return Transition(
                SlotState(
                    weight=round_to_increment(state.weight + weight_increment, rounding_increment),
                    stage=min(state.stage + 1, last_stage),
                )
            )
        case AddWeight(amount=amount):
            step = amount if amount is not None else weight_increment
            return Transition(
                replace(state, weight=round_to_increment(state.weight + step, rounding_increment))
            )
        case AddWeightResetStage(amount=amount):
            return Transition(
                SlotState(
                    weight=round_to_increment(state.weight + amount, rounding_increment),
                    stage=0,
                )
            )
        case DeloadPercent(percent=percent):
            return Transition(
                SlotState(
                    weight=round_to_increment(
                        state.weight * (1 - percent / 100), rounding_increment
                    ),
                    stage=0,
                )
            )
        case UpdateTrainingMax(amount=amount, min_amrap_reps=threshold):
            if amrap_reps is not None and amrap_reps >= threshold:
                return Transition(state, reference_delta=amount)
            logger.debug(
                "update_tm skipped: amrap_reps=%s below threshold %s", amrap_reps, threshold
            )
            return Transition(state)
        case _:
            assert_never(rule)


def transition(
    slot: Slot,
    state: SlotState,
    outcome: Optional[Outcome],
    *,
    weight_increment: float,
    rounding_increment: float,
) -> Transition:
    """
    Compute the state for a slot's next occurrence from this occurrence's outcome.

    Args:
        slot: Stage-ladder slot template
        state: State the occurrence was materialized with
        outcome: Logged outcome, or None when nothing was logged
        weight_increment: Default add_weight amount for the exercise
        rounding_increment: Rounding step for resulting weights

    Returns:
        Transition for the next occurrence
    """
    result = outcome.result if outcome is not None else None
    amrap_reps = outcome.amrap_reps if outcome is not None else None
    rule = select_rule(slot, state, result)
    return apply_rule(
        rule,
        state,
        last_stage=slot.last_stage,
        weight_increment=weight_increment,
        rounding_increment=rounding_increment,
        amrap_reps=amrap_reps,
    )
