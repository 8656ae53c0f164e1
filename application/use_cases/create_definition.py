"""
CreateDefinition use case.

Validates a definition document and stores it as a new revision:
1. Parse the document (schema, slot modes, repeated slot ids)
2. Number it one past the latest stored version of the same id (or 1)
3. Store the revision; earlier revisions are never touched
4. Return it with its load-time reference report

Dangling or cyclic references do not block creation; they are reported per
slot, exactly as GetDefinition reports them.
"""

import logging
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from application.ports import ProgramDefinitionRepository
from application.use_cases.common import ErrorCode
from application.use_cases.get_definition import DefinitionResult
from models.program_definition import ProgramDefinition
from services.reference_resolver import resolve_references

logger = logging.getLogger(__name__)


class CreateDefinitionUseCase:
    """
    Use case for authoring a program definition revision.

    Usage:
        >>> use_case = CreateDefinitionUseCase(definition_repo)
        >>> result = use_case.execute(document)
        >>> if result.success:
        ...     print(result.definition.id, result.definition.version)
    """

    def __init__(self, definition_repo: ProgramDefinitionRepository) -> None:
        self._definition_repo = definition_repo

    def execute(self, document: Mapping[str, Any]) -> DefinitionResult:
        """
        Execute the create workflow.

        Args:
            document: Definition JSON; its "version" is ignored and assigned

        Returns:
            DefinitionResult with the stored revision, or INVALID_DEFINITION
            with the schema errors
        """
        try:
            definition = ProgramDefinition.model_validate(document)
        except ValidationError as e:
            logger.info(f"Rejected program definition: {e.error_count()} error(s)")
            return DefinitionResult(
                success=False,
                error=_describe(e),
                error_code=ErrorCode.INVALID_DEFINITION,
            )

        try:
            latest = self._definition_repo.get_by_id(definition.id)
            version = latest["version"] + 1 if latest else 1
            definition = definition.model_copy(update={"version": version})
            self._definition_repo.create(
                {
                    "id": definition.id,
                    "version": version,
                    "definition": definition.model_dump(mode="json"),
                }
            )
        except Exception as e:
            logger.exception(f"CreateDefinition use case failed: {e}")
            return DefinitionResult(success=False, error=str(e), error_code=ErrorCode.INTERNAL)

        logger.info(f"Created program definition {definition.id} v{version}")
        return DefinitionResult(
            success=True,
            definition=definition,
            reference_errors=resolve_references(definition).errors,
        )


def _describe(error: ValidationError) -> str:
    """One line per schema error: location and message."""
    lines = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        lines.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(lines)
