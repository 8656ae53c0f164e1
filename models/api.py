"""
Request and response models for the HTTP API.

Engine models (Outcome, UndoEntry, WorkoutRow, ProgramDefinition) are
reused as-is in responses; everything here is transport framing.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.constants import MAX_AMRAP_REPS, MAX_NOTE_LENGTH, MAX_RPE, MIN_RPE
from models.outcome import Outcome, ResultValue, UndoEntry
from models.program_definition import ProgramDefinition
from models.workout import WorkoutRow


# =============================================================================
# Requests
# =============================================================================


class GenerateProgramRequest(BaseModel):
    """Start a program from a definition and raw starting numbers."""

    definition_id: str = Field(..., min_length=1)
    definition_version: Optional[int] = Field(None, ge=1)
    config: Dict[str, Any] = Field(default_factory=dict)


class UpdateConfigRequest(BaseModel):
    """Replace an instance's config."""

    config: Dict[str, Any]


class RecordOutcomeRequest(BaseModel):
    """Log a result for one slot of one workout. result None clears it."""

    workout_index: int = Field(..., ge=0)
    slot_id: str = Field(..., min_length=1)
    result: Optional[ResultValue] = None
    amrap_reps: Optional[int] = Field(None, ge=0, le=MAX_AMRAP_REPS)
    rpe: Optional[int] = Field(None, ge=MIN_RPE, le=MAX_RPE)
    note: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)


class CreateDefinitionRequest(BaseModel):
    """Author a definition revision. The document's version is assigned on save."""

    definition: Dict[str, Any]


# =============================================================================
# Responses
# =============================================================================


class DefinitionResponse(BaseModel):
    """A definition with its load-time reference report."""

    definition: ProgramDefinition
    reference_errors: Dict[str, str] = Field(default_factory=dict)


class DefinitionSummary(BaseModel):
    """One entry of the definition list."""

    id: str
    version: int
    name: str
    description: str = ""
    total_workouts: int
    workouts_per_week: int


class DefinitionListResponse(BaseModel):
    """Latest revision of each stored definition."""

    definitions: List[DefinitionSummary] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    """Instance state plus the fully replayed schedule."""

    instance_id: str
    definition_id: str
    definition_version: int
    config: Dict[str, Any]
    results: List[Outcome] = Field(default_factory=list)
    undo_depth: int = 0
    rows: List[WorkoutRow] = Field(default_factory=list)
    reference_errors: Dict[str, str] = Field(default_factory=dict)
    undone: Optional[UndoEntry] = None


class ConfigErrorDetail(BaseModel):
    """Body of a 422 config rejection."""

    message: str
    field_errors: Dict[str, str]


class ProgramSummary(BaseModel):
    """One entry of a user's instance list."""

    instance_id: str
    definition_id: str
    definition_version: int
    results_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProgramListResponse(BaseModel):
    """A user's instances, newest first."""

    programs: List[ProgramSummary] = Field(default_factory=list)
