"""
Shared plumbing for program instance use cases.

Every mutating workflow follows the same shape:
1. Load the instance (scoped to the user) and its pinned definition version
2. Rebuild a ProgramSession from the stored config and result log
3. Apply the mutation through the session
4. Persist config, results and undo history
5. Return a ScheduleResult with the rows diffed against the pre-mutation state
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from application.exceptions import (
    ConfigValidationError,
    InvalidLogTargetError,
    InvalidOutcomeError,
    ProgramDefinitionNotFoundError,
    ProgramInstanceNotFoundError,
)
from application.ports import ProgramDefinitionRepository, ProgramInstanceRepository
from core.constants import MAX_UNDO_STACK
from models.outcome import UndoEntry
from models.program_definition import ProgramDefinition
from models.workout import WorkoutRow
from services.program_session import ProgramSession
from services.result_log import ResultLog

logger = logging.getLogger(__name__)


class ErrorCode:
    """Machine-readable failure codes carried by ScheduleResult."""

    DEFINITION_NOT_FOUND = "definition_not_found"
    INSTANCE_NOT_FOUND = "instance_not_found"
    INVALID_DEFINITION = "invalid_definition"
    INVALID_CONFIG = "invalid_config"
    INVALID_OUTCOME = "invalid_outcome"
    INVALID_TARGET = "invalid_target"
    INTERNAL = "internal"


@dataclass
class ScheduleResult:
    """Result of a program instance use case."""

    success: bool
    instance: Optional[Dict[str, Any]] = None
    rows: List[WorkoutRow] = field(default_factory=list)
    reference_errors: Dict[str, str] = field(default_factory=dict)
    undone: Optional[UndoEntry] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "ScheduleResult":
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            field_errors=field_errors or {},
        )


def load_definition(
    definition_repo: ProgramDefinitionRepository,
    definition_id: str,
    version: Optional[int] = None,
) -> ProgramDefinition:
    """
    Load and validate a stored definition.

    Raises:
        ProgramDefinitionNotFoundError: no row for (definition_id, version)
        pydantic.ValidationError: the stored document is malformed
    """
    row = definition_repo.get_by_id(definition_id, version)
    if row is None:
        raise ProgramDefinitionNotFoundError(definition_id, version)
    return ProgramDefinition.model_validate(row["definition"])


class ProgramInstanceUseCase:
    """
    Base class for use cases operating on a stored program instance.

    Dependencies are injected via constructor for testability.
    """

    def __init__(
        self,
        definition_repo: ProgramDefinitionRepository,
        instance_repo: ProgramInstanceRepository,
        max_undo: int = MAX_UNDO_STACK,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            definition_repo: Repository for program definitions
            instance_repo: Repository for program instances
            max_undo: Undo stack bound applied when loading result logs
        """
        self._definition_repo = definition_repo
        self._instance_repo = instance_repo
        self._max_undo = max_undo

    def _load(self, instance_id: str, user_id: str):
        """
        Load an instance and rebuild its session.

        Returns:
            (instance row, ProgramSession)

        Raises:
            ProgramInstanceNotFoundError: unknown instance or not owned by user
            ProgramDefinitionNotFoundError: pinned definition version is gone
        """
        instance = self._instance_repo.get_by_id(instance_id, user_id)
        if instance is None:
            raise ProgramInstanceNotFoundError(instance_id)

        definition = load_definition(
            self._definition_repo,
            instance["definition_id"],
            instance.get("definition_version"),
        )
        result_log = ResultLog.from_dict(
            {
                "results": instance.get("results"),
                "undo_history": instance.get("undo_history"),
            },
            max_undo=self._max_undo,
        )
        session = ProgramSession(
            definition,
            config=instance.get("config") or {},
            result_log=result_log,
        )
        return instance, session

    def _save(self, instance_id: str, session: ProgramSession) -> Dict[str, Any]:
        """Persist the session's config and result log."""
        data = {"config": session.config or {}, **session.result_log.to_dict()}
        return self._instance_repo.update(instance_id, data)

    def _run(self, instance_id: str, user_id: str, mutate=None, persist: bool = True) -> ScheduleResult:
        """
        Load, optionally mutate, persist, and build the result.

        Args:
            instance_id: Instance to operate on
            user_id: Owner's user ID
            mutate: Callable(session) applying the change; may return an UndoEntry
            persist: Whether to write the instance back

        Returns:
            ScheduleResult
        """
        instance, session = self._load(instance_id, user_id)
        undone = mutate(session) if mutate is not None else None
        rows = session.rows
        if persist:
            instance = self._save(instance_id, session)
        return ScheduleResult(
            success=True,
            instance=instance,
            rows=rows,
            reference_errors=session.reference_report().errors,
            undone=undone if isinstance(undone, UndoEntry) else None,
        )

    def _guarded(self, action: str, run) -> ScheduleResult:
        """
        Run a workflow, translating application errors into failed results.

        Args:
            action: Workflow name used in logs
            run: Zero-argument callable returning a ScheduleResult

        Returns:
            ScheduleResult from run, or a failure result
        """
        try:
            return run()
        except ProgramInstanceNotFoundError as e:
            return ScheduleResult.failure(str(e), ErrorCode.INSTANCE_NOT_FOUND)
        except ProgramDefinitionNotFoundError as e:
            return ScheduleResult.failure(str(e), ErrorCode.DEFINITION_NOT_FOUND)
        except ConfigValidationError as e:
            return ScheduleResult.failure(
                "Invalid program config", ErrorCode.INVALID_CONFIG, e.field_errors
            )
        except InvalidLogTargetError as e:
            logger.info(f"{action} rejected: {e}")
            return ScheduleResult.failure(str(e), ErrorCode.INVALID_TARGET)
        except InvalidOutcomeError as e:
            logger.info(f"{action} rejected: {e}")
            return ScheduleResult.failure(str(e), ErrorCode.INVALID_OUTCOME)
        except ValidationError as e:
            logger.warning(f"{action} failed validation: {e}")
            return ScheduleResult.failure(
                "Stored program data is invalid", ErrorCode.INVALID_DEFINITION
            )
        except Exception as e:
            logger.exception(f"{action} use case failed: {e}")
            return ScheduleResult.failure(str(e), ErrorCode.INTERNAL)
