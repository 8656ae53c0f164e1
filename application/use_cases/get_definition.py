"""
GetDefinition use case.

Loads a program definition and runs load-time reference analysis, so
clients can show which slots would render unresolved before a program is
started.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import ValidationError

from application.exceptions import ProgramDefinitionNotFoundError
from application.ports import ProgramDefinitionRepository
from application.use_cases.common import ErrorCode, load_definition
from models.program_definition import ProgramDefinition
from services.reference_resolver import resolve_references

logger = logging.getLogger(__name__)


@dataclass
class DefinitionResult:
    """Result of the GetDefinition use case."""

    success: bool
    definition: Optional[ProgramDefinition] = None
    reference_errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    error_code: Optional[str] = None


class GetDefinitionUseCase:
    """Use case for reading a definition with its reference report."""

    def __init__(self, definition_repo: ProgramDefinitionRepository) -> None:
        self._definition_repo = definition_repo

    def execute(self, definition_id: str, version: Optional[int] = None) -> DefinitionResult:
        """
        Execute the read workflow.

        Args:
            definition_id: Definition slug
            version: Exact version; None loads the latest

        Returns:
            DefinitionResult with the definition and per-slot reference errors
        """
        try:
            definition = load_definition(self._definition_repo, definition_id, version)
        except ProgramDefinitionNotFoundError as e:
            return DefinitionResult(
                success=False, error=str(e), error_code=ErrorCode.DEFINITION_NOT_FOUND
            )
        except ValidationError as e:
            logger.warning(f"Definition {definition_id} failed validation: {e}")
            return DefinitionResult(
                success=False,
                error="Stored program definition is invalid",
                error_code=ErrorCode.INVALID_DEFINITION,
            )

        report = resolve_references(definition)
        return DefinitionResult(
            success=True,
            definition=definition,
            reference_errors=report.errors,
        )
