"""
Materialized schedule models.

These are the output of a replay: one WorkoutRow per workout, each holding
one SlotRow per slot of that workout's day, with the weight, stage, and
scheme the athlete should perform.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from models.outcome import ResultValue
from models.program_definition import SlotRole


class ResolvedPrescription(BaseModel):
    """A prescription ladder entry with its computed weight."""

    model_config = ConfigDict(frozen=True)

    percent: float
    reps: int
    sets: int
    weight: float


class SlotRow(BaseModel):
    """One materialized slot instance within a workout."""

    model_config = ConfigDict(frozen=True)

    slot_id: str
    exercise_id: str
    exercise_name: str
    tier: str
    role: Optional[SlotRole] = None
    weight: float = 0.0
    stage: int = 0
    stages_count: int = 1
    sets: int = 0
    reps: int = 0
    is_amrap: bool = False
    reps_max: Optional[int] = None
    result: Optional[ResultValue] = None
    amrap_reps: Optional[int] = None
    rpe: Optional[int] = None
    note: Optional[str] = None
    is_changed: bool = False
    is_deload: bool = False
    is_gpp: bool = False
    prescriptions: Optional[List[ResolvedPrescription]] = None
    complex_reps: Optional[str] = None
    notes: Optional[str] = None
    unresolved: Optional[str] = Field(
        None, description="Reason the slot's weight could not be resolved"
    )


class WorkoutRow(BaseModel):
    """One materialized workout."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    day_name: str
    slots: List[SlotRow] = Field(default_factory=list)

    @computed_field
    @property
    def is_changed(self) -> bool:
        """True when any slot moved since the previous replay."""
        return any(slot.is_changed for slot in self.slots)

    def slot(self, slot_id: str) -> Optional[SlotRow]:
        """Find a slot row by id."""
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        return None
