"""
Domain models for declarative program definitions.

A ProgramDefinition describes a training program as data: ordered days made
of slots, the progression rules each slot follows, and the config fields an
athlete fills in (starting weights, training maxes, 1RMs) before a schedule
can be generated. Definitions are immutable once loaded and are versioned so
that a later revision never reinterprets an existing instance's history.

Usage:
    >>> definition = ProgramDefinition.model_validate(raw_json)
    >>> day = definition.day_for(workout_index=5)
    >>> for slot in day.slots:
    ...     print(slot.id, slot.mode, slot.reads_key)
"""

from enum import Enum
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from core.constants import DEFAULT_ROUNDING_INCREMENT, TIER_ROLE_MAP


class DefinitionModel(BaseModel):
    """Base for definition models: immutable, unknown keys rejected, camelCase or snake_case keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Progression Rules (closed tagged union)
# =============================================================================


class NoChange(DefinitionModel):
    """Carry weight and stage forward unchanged."""

    type: Literal["no_change"] = "no_change"


class AdvanceStage(DefinitionModel):
    """Move to the next stage (clamped at the last one), weight unchanged."""

    type: Literal["advance_stage"] = "advance_stage"


class AdvanceStageAddWeight(DefinitionModel):
    """Move to the next stage and add the exercise's weight increment."""

    type: Literal["advance_stage_add_weight"] = "advance_stage_add_weight"


class AddWeight(DefinitionModel):
    """Add a fixed amount; defaults to the exercise's weight increment."""

    type: Literal["add_weight"] = "add_weight"
    amount: Optional[float] = Field(None, gt=0)


class AddWeightResetStage(DefinitionModel):
    """Add a fixed amount and return to the first stage."""

    type: Literal["add_weight_reset_stage"] = "add_weight_reset_stage"
    amount: float = Field(gt=0)


class UpdateTrainingMax(DefinitionModel):
    """
    Write back into the slot's training max.

    Only applies when the logged AMRAP reps meet or exceed min_amrap_reps.
    """

    type: Literal["update_tm"] = "update_tm"
    amount: float
    min_amrap_reps: int = Field(0, ge=0)


class DeloadPercent(DefinitionModel):
    """Reduce weight by a percentage and return to the first stage."""

    type: Literal["deload_percent"] = "deload_percent"
    percent: float = Field(ge=1, le=99)


ProgressionRule = Annotated[
    Union[
        NoChange,
        AdvanceStage,
        AdvanceStageAddWeight,
        AddWeight,
        AddWeightResetStage,
        UpdateTrainingMax,
        DeloadPercent,
    ],
    Field(discriminator="type"),
]


# =============================================================================
# Slot Building Blocks
# =============================================================================


class SlotRole(str, Enum):
    """Role of a slot within a day."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    ACCESSORY = "accessory"


class SlotMode(str, Enum):
    """How a slot produces its weight."""

    STAGE_LADDER = "stage_ladder"
    PRESCRIPTION_LADDER = "prescription_ladder"
    GPP = "gpp"


class Stage(DefinitionModel):
    """One rung of a slot's set/rep ladder."""

    sets: int = Field(gt=0)
    reps: int = Field(gt=0)
    amrap: bool = False
    reps_max: Optional[int] = Field(None, gt=0)


class SetPrescription(DefinitionModel):
    """A percentage-of-1RM entry. The last entry of a ladder is the working set."""

    percent: float = Field(ge=0, le=120)
    reps: int = Field(gt=0)
    sets: int = Field(gt=0)


class Slot(DefinitionModel):
    """
    The unit of progression: one prescribed exercise within a day.

    A slot is in exactly one mode:
    - stage ladder: `stages` + transition rules, seeded from `start_weight_key`
      (or `training_max_key`), optionally loaded as `tm_percent` of a training max
    - prescription ladder: `prescriptions` loaded as a percentage of `percent_of`
    - GPP: `is_gpp`, tracked pass/fail only
    """

    id: str = Field(min_length=1)
    exercise_id: str = Field(min_length=1)
    tier: str = Field(min_length=1)
    role: Optional[SlotRole] = None
    notes: Optional[str] = Field(None, min_length=1)
    complex_reps: Optional[str] = Field(None, min_length=1)

    # Stage ladder
    stages: Optional[List[Stage]] = Field(None, min_length=1)
    on_success: Optional[ProgressionRule] = None
    on_mid_stage_fail: Optional[ProgressionRule] = None
    on_final_stage_fail: Optional[ProgressionRule] = None
    on_final_stage_success: Optional[ProgressionRule] = None
    on_undefined: ProgressionRule = NoChange()
    start_weight_key: Optional[str] = Field(None, min_length=1)
    start_weight_multiplier: Optional[float] = Field(None, gt=0)
    start_weight_offset: int = 0
    training_max_key: Optional[str] = Field(None, min_length=1)
    tm_percent: Optional[float] = Field(None, gt=0, le=1)

    # Prescription ladder
    prescriptions: Optional[List[SetPrescription]] = Field(None, min_length=1)
    percent_of: Optional[str] = Field(None, min_length=1)

    # GPP
    is_gpp: bool = False

    rounding_increment: Optional[float] = Field(None, gt=0)

    @model_validator(mode="after")
    def validate_mode(self) -> "Slot":
        """Ensure the slot declares exactly one well-formed progression mode."""
        if self.is_gpp:
            if self.prescriptions is not None or self.percent_of is not None:
                raise ValueError(f"Slot '{self.id}': GPP slots cannot declare prescriptions")
            if self.start_weight_key is not None or self.training_max_key is not None:
                raise ValueError(f"Slot '{self.id}': GPP slots cannot declare weight keys")
            return self

        if self.prescriptions is not None:
            if self.percent_of is None:
                raise ValueError(f"Slot '{self.id}': prescriptions require percent_of")
            if self.stages is not None:
                raise ValueError(
                    f"Slot '{self.id}': a slot cannot declare both stages and prescriptions"
                )
            if self.start_weight_key is not None or self.training_max_key is not None:
                raise ValueError(
                    f"Slot '{self.id}': prescription slots derive weight from percent_of only"
                )
            return self

        if self.percent_of is not None:
            raise ValueError(f"Slot '{self.id}': percent_of requires prescriptions")
        if self.stages is None:
            raise ValueError(
                f"Slot '{self.id}': declare stages, prescriptions, or is_gpp"
            )
        if self.start_weight_key is None and self.training_max_key is None:
            raise ValueError(
                f"Slot '{self.id}': stage slots require start_weight_key or training_max_key"
            )
        missing = [
            name
            for name in ("on_success", "on_mid_stage_fail", "on_final_stage_fail")
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"Slot '{self.id}': missing rules: {', '.join(missing)}")
        if self.tm_percent is not None and self.training_max_key is None:
            raise ValueError(f"Slot '{self.id}': tm_percent requires training_max_key")
        if self.training_max_key is None and any(
            isinstance(rule, UpdateTrainingMax) for rule in self.rules
        ):
            raise ValueError(f"Slot '{self.id}': update_tm requires training_max_key")
        return self

    @property
    def mode(self) -> SlotMode:
        """The progression mode this slot follows."""
        if self.is_gpp:
            return SlotMode.GPP
        if self.prescriptions is not None:
            return SlotMode.PRESCRIPTION_LADDER
        return SlotMode.STAGE_LADDER

    @property
    def rules(self) -> Tuple[ProgressionRule, ...]:
        """All transition rules declared on the slot."""
        candidates = (
            self.on_success,
            self.on_mid_stage_fail,
            self.on_final_stage_fail,
            self.on_final_stage_success,
            self.on_undefined,
        )
        return tuple(rule for rule in candidates if rule is not None)

    @property
    def last_stage(self) -> int:
        """Index of the final stage (0 for slots without stages)."""
        return len(self.stages) - 1 if self.stages else 0

    @property
    def seed_key(self) -> Optional[str]:
        """Key supplying the slot's initial tracked weight."""
        return self.start_weight_key or self.training_max_key

    @property
    def uses_training_max(self) -> bool:
        """True when the working weight is a percentage of a training max."""
        return self.training_max_key is not None and self.tm_percent is not None

    @property
    def reads_key(self) -> Optional[str]:
        """Reference key the slot's materialized weight is derived from."""
        if self.mode is SlotMode.GPP:
            return None
        if self.mode is SlotMode.PRESCRIPTION_LADDER:
            return self.percent_of
        if self.uses_training_max:
            return self.training_max_key
        return self.seed_key

    @property
    def reads_reference(self) -> bool:
        """True when reads_key names an entry of the shared reference table."""
        return self.mode is SlotMode.PRESCRIPTION_LADDER or self.uses_training_max

    @property
    def writes_key(self) -> Optional[str]:
        """Reference key the slot may write back through an update_tm rule."""
        if any(isinstance(rule, UpdateTrainingMax) for rule in self.rules):
            return self.training_max_key
        return None

    @property
    def resolved_role(self) -> Optional[SlotRole]:
        """Explicit role, else the role inferred from the tier label."""
        if self.role is not None:
            return self.role
        inferred = TIER_ROLE_MAP.get(self.tier)
        return SlotRole(inferred) if inferred else None


def _progression_shape(slot: Slot) -> Tuple:
    """What occurrences of one slot id share: a state, its seed and its reference keys."""
    return (
        slot.mode,
        slot.start_weight_key,
        slot.training_max_key,
        slot.percent_of,
        slot.reads_key,
        slot.writes_key,
        len(slot.stages or ()),
    )


class Day(DefinitionModel):
    """A named training day: an ordered list of slots."""

    name: str = Field(min_length=1)
    slots: List[Slot] = Field(min_length=1)


# =============================================================================
# Config Fields
# =============================================================================


class WeightConfigField(DefinitionModel):
    """A numeric input: starting weight, training max, or 1RM."""

    type: Literal["weight"] = "weight"
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    min: float = 0
    step: float = Field(2.5, gt=0)
    group: Optional[str] = Field(None, min_length=1)


class SelectOption(DefinitionModel):
    """One allowed value of a select field."""

    label: str = Field(min_length=1)
    value: str = Field(min_length=1)


class SelectConfigField(DefinitionModel):
    """A choice input restricted to declared options."""

    type: Literal["select"] = "select"
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    options: List[SelectOption] = Field(min_length=1)
    group: Optional[str] = Field(None, min_length=1)


ConfigField = Annotated[
    Union[WeightConfigField, SelectConfigField],
    Field(discriminator="type"),
]


class ExerciseInfo(DefinitionModel):
    """Display metadata for an exercise referenced by slots."""

    name: str = Field(min_length=1)


# =============================================================================
# Program Definition
# =============================================================================


class ProgramDefinition(DefinitionModel):
    """
    Immutable, versioned description of a training program.

    Workout n uses days[n mod len(days)]; the schedule runs for
    total_workouts workouts.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    version: int = Field(1, ge=1)
    cycle_length: int = Field(ge=1)
    total_workouts: int = Field(ge=1)
    workouts_per_week: int = Field(ge=1, le=7)
    config_fields: List[ConfigField] = Field(default_factory=list)
    days: List[Day] = Field(min_length=1)
    exercises: Dict[str, ExerciseInfo] = Field(default_factory=dict)
    weight_increments: Dict[str, float] = Field(default_factory=dict)
    rounding_increment: float = Field(DEFAULT_ROUNDING_INCREMENT, gt=0)

    @model_validator(mode="after")
    def validate_structure(self) -> "ProgramDefinition":
        """Check config keys are unique, exercises are declared and repeated slot ids agree."""
        keys = [f.key for f in self.config_fields]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate config field keys: {', '.join(duplicates)}")

        first: Dict[str, Slot] = {}
        for day in self.days:
            day_ids = [slot.id for slot in day.slots]
            repeated = sorted({i for i in day_ids if day_ids.count(i) > 1})
            if repeated:
                raise ValueError(f"Day '{day.name}' repeats slot ids: {', '.join(repeated)}")
            for slot in day.slots:
                if slot.exercise_id not in self.exercises:
                    raise ValueError(
                        f"Slot '{slot.id}' references unknown exercise '{slot.exercise_id}'"
                    )
                template = first.setdefault(slot.id, slot)
                if _progression_shape(template) != _progression_shape(slot):
                    raise ValueError(
                        f"Slot '{slot.id}' is declared differently on day '{day.name}'; "
                        "repeated slot ids must share mode, weight keys and stage count"
                    )

        negative = sorted(k for k, v in self.weight_increments.items() if v < 0)
        if negative:
            raise ValueError(f"Negative weight increments: {', '.join(negative)}")
        return self

    def day_for(self, workout_index: int) -> Day:
        """Day template used by the given workout index."""
        return self.days[workout_index % len(self.days)]

    def iter_slots(self) -> Iterator[Slot]:
        """Yield each distinct slot id once, first occurrence wins."""
        seen = set()
        for day in self.days:
            for slot in day.slots:
                if slot.id not in seen:
                    seen.add(slot.id)
                    yield slot

    def slots_by_id(self) -> Dict[str, Slot]:
        """Map of slot id to its first declared template."""
        return {slot.id: slot for slot in self.iter_slots()}

    def has_slot(self, workout_index: int, slot_id: str) -> bool:
        """True when (workout_index, slot_id) names a materialized slot."""
        if workout_index < 0 or workout_index >= self.total_workouts:
            return False
        return any(slot.id == slot_id for slot in self.day_for(workout_index).slots)

    def field_keys(self, field_type: Optional[str] = None) -> List[str]:
        """Keys of the declared config fields, optionally filtered by type."""
        return [
            f.key for f in self.config_fields if field_type is None or f.type == field_type
        ]

    def rounding_for(self, slot: Slot) -> float:
        """Rounding step for a slot's materialized weights."""
        return slot.rounding_increment or self.rounding_increment

    def weight_increment_for(self, exercise_id: str) -> float:
        """Default add_weight amount for an exercise."""
        return self.weight_increments.get(exercise_id, 0.0)

    def exercise_name(self, exercise_id: str) -> str:
        """Display name of an exercise."""
        return self.exercises[exercise_id].name
