"""Models package: program definitions, logged outcomes, materialized schedule."""

from models.outcome import Outcome, ResultValue, UndoEntry
from models.program_definition import (
    AddWeight,
    AddWeightResetStage,
    AdvanceStage,
    AdvanceStageAddWeight,
    ConfigField,
    Day,
    DeloadPercent,
    ExerciseInfo,
    NoChange,
    ProgramDefinition,
    ProgressionRule,
    SelectConfigField,
    SelectOption,
    SetPrescription,
    Slot,
    SlotMode,
    SlotRole,
    Stage,
    UpdateTrainingMax,
    WeightConfigField,
)
from models.workout import ResolvedPrescription, SlotRow, WorkoutRow
from models.api import (
    ConfigErrorDetail,
    CreateDefinitionRequest,
    DefinitionListResponse,
    DefinitionResponse,
    DefinitionSummary,
    GenerateProgramRequest,
    ProgramListResponse,
    ProgramSummary,
    RecordOutcomeRequest,
    ScheduleResponse,
    UpdateConfigRequest,
)

__all__ = [
    # Definition
    "ProgramDefinition",
    "Day",
    "Slot",
    "SlotMode",
    "SlotRole",
    "Stage",
    "SetPrescription",
    "ExerciseInfo",
    "ConfigField",
    "WeightConfigField",
    "SelectConfigField",
    "SelectOption",
    # Rules
    "ProgressionRule",
    "NoChange",
    "AdvanceStage",
    "AdvanceStageAddWeight",
    "AddWeight",
    "AddWeightResetStage",
    "UpdateTrainingMax",
    "DeloadPercent",
    # Outcomes
    "Outcome",
    "ResultValue",
    "UndoEntry",
    # Schedule
    "ResolvedPrescription",
    "SlotRow",
    "WorkoutRow",
    # API
    "ConfigErrorDetail",
    "CreateDefinitionRequest",
    "DefinitionListResponse",
    "DefinitionResponse",
    "DefinitionSummary",
    "GenerateProgramRequest",
    "ProgramListResponse",
    "ProgramSummary",
    "RecordOutcomeRequest",
    "ScheduleResponse",
    "UpdateConfigRequest",
]
