"""
ListDefinitions use case.

Lists the latest revision of every stored definition. Documents that no
longer validate are skipped with a warning instead of failing the list.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import ValidationError

from application.ports import ProgramDefinitionRepository
from application.use_cases.common import ErrorCode
from models.program_definition import ProgramDefinition

logger = logging.getLogger(__name__)


@dataclass
class DefinitionListResult:
    """Result of the ListDefinitions use case."""

    success: bool
    definitions: List[ProgramDefinition] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None


class ListDefinitionsUseCase:
    """Use case for browsing available program definitions."""

    def __init__(self, definition_repo: ProgramDefinitionRepository) -> None:
        self._definition_repo = definition_repo

    def execute(self, limit: int = 20, offset: int = 0) -> DefinitionListResult:
        """
        Execute the list workflow.

        Args:
            limit: Maximum definitions to return
            offset: Definitions to skip

        Returns:
            DefinitionListResult with the latest revision of each definition
        """
        try:
            rows = self._definition_repo.list_latest(limit=limit, offset=offset)
        except Exception as e:
            logger.exception(f"ListDefinitions use case failed: {e}")
            return DefinitionListResult(success=False, error=str(e), error_code=ErrorCode.INTERNAL)

        definitions = []
        for row in rows:
            try:
                definitions.append(ProgramDefinition.model_validate(row["definition"]))
            except ValidationError as e:
                logger.warning(f"Skipping definition {row.get('id')} v{row.get('version')}: {e}")
        return DefinitionListResult(success=True, definitions=definitions)
