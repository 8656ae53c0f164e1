"""
Domain models for logged workout outcomes.

An Outcome records what happened to one slot of one workout. A missing
result means "not yet attempted", which is distinct from a failure.
UndoEntry captures the outcome that a write replaced so the write can be
reversed.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import MAX_AMRAP_REPS, MAX_NOTE_LENGTH, MAX_RPE, MIN_RPE
from core.sanitization import sanitize_note


class ResultValue(str, Enum):
    """Result of an attempted slot."""

    SUCCESS = "success"
    FAIL = "fail"


class Outcome(BaseModel):
    """A logged result for (workout_index, slot_id)."""

    model_config = ConfigDict(frozen=True)

    workout_index: int = Field(ge=0)
    slot_id: str = Field(min_length=1)
    result: Optional[ResultValue] = None
    amrap_reps: Optional[int] = Field(None, ge=0, le=MAX_AMRAP_REPS)
    rpe: Optional[int] = Field(None, ge=MIN_RPE, le=MAX_RPE)
    note: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v: Optional[str]) -> Optional[str]:
        """Strip control characters; blank notes become None."""
        if v is None:
            return None
        cleaned = sanitize_note(str(v))
        return cleaned or None

    @property
    def key(self) -> tuple:
        """Log key for this outcome."""
        return (self.workout_index, self.slot_id)

    @property
    def is_attempted(self) -> bool:
        """True once a success or fail has been recorded."""
        return self.result is not None


class UndoEntry(BaseModel):
    """The state a log write replaced. previous_outcome None means no entry existed."""

    model_config = ConfigDict(frozen=True)

    workout_index: int = Field(ge=0)
    slot_id: str = Field(min_length=1)
    previous_outcome: Optional[Outcome] = None

    @property
    def key(self) -> tuple:
        """Log key this entry restores."""
        return (self.workout_index, self.slot_id)
