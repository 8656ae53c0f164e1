"""
Services package for the progression engine.

Contains the pure program logic:
- Config validation against declared fields
- Reference resolution (load-time definition errors)
- Progression rule interpretation
- Slot progression (stage ladder, prescription ladder, GPP)
- Full program replay and change diff
- Result log with bounded undo
- Program session (owner of config, log and schedule)
"""

from services.config_validator import (
    Config,
    ConfigValidationResult,
    ConfigValidator,
    validate_config,
)
from services.program_session import ProgramSession
from services.progression_rules import (
    SlotState,
    Transition,
    apply_rule,
    round_to_increment,
    select_rule,
    transition,
)
from services.reference_resolver import ReferenceReport, resolve_references, seed_weight
from services.replay_engine import mark_changes, replay
from services.result_log import ResultLog
from services.slot_progression import (
    SlotPrescription,
    materialize_gpp,
    materialize_prescription_ladder,
    materialize_stage_ladder,
    project_stage_ladder,
)

__all__ = [
    # Config
    "Config",
    "ConfigValidationResult",
    "ConfigValidator",
    "validate_config",
    # Rules
    "SlotState",
    "Transition",
    "apply_rule",
    "round_to_increment",
    "select_rule",
    "transition",
    # References
    "ReferenceReport",
    "resolve_references",
    "seed_weight",
    # Slot engine
    "SlotPrescription",
    "materialize_gpp",
    "materialize_prescription_ladder",
    "materialize_stage_ladder",
    "project_stage_ladder",
    # Replay
    "mark_changes",
    "replay",
    # Session
    "ResultLog",
    "ProgramSession",
]
