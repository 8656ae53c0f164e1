"""
Application use cases for the progression service.

Use cases orchestrate the pure services (config validation, replay, result
log) with the repository ports. Dependencies are injected via constructors
for testability, and every use case returns a result dataclass instead of
raising.

Usage:
    from application.use_cases import RecordOutcomeUseCase

    use_case = RecordOutcomeUseCase(definition_repo, instance_repo)
    result = use_case.execute(instance_id, user_id, 0, "squat-t1", ResultValue.SUCCESS)
"""

from application.use_cases.common import ErrorCode, ProgramInstanceUseCase, ScheduleResult
from application.use_cases.create_definition import CreateDefinitionUseCase
from application.use_cases.delete_program import DeleteProgramResult, DeleteProgramUseCase
from application.use_cases.generate_program import GenerateProgramUseCase
from application.use_cases.get_definition import DefinitionResult, GetDefinitionUseCase
from application.use_cases.get_schedule import GetScheduleUseCase
from application.use_cases.list_definitions import DefinitionListResult, ListDefinitionsUseCase
from application.use_cases.list_programs import ListProgramsUseCase, ProgramListResult
from application.use_cases.record_outcome import RecordOutcomeUseCase
from application.use_cases.reset_program import ResetProgramUseCase
from application.use_cases.undo_outcome import UndoOutcomeUseCase
from application.use_cases.update_config import UpdateConfigUseCase

__all__ = [
    # Shared
    "ErrorCode",
    "ProgramInstanceUseCase",
    "ScheduleResult",
    # Definitions
    "DefinitionResult",
    "DefinitionListResult",
    "GetDefinitionUseCase",
    "ListDefinitionsUseCase",
    "CreateDefinitionUseCase",
    # Instances
    "GenerateProgramUseCase",
    "GetScheduleUseCase",
    "UpdateConfigUseCase",
    "RecordOutcomeUseCase",
    "UndoOutcomeUseCase",
    "ResetProgramUseCase",
    "ProgramListResult",
    "ListProgramsUseCase",
    "DeleteProgramResult",
    "DeleteProgramUseCase",
]
