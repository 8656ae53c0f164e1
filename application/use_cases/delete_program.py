"""
DeleteProgram use case.

Permanently removes a program instance together with its results and undo
history. Only the owner can delete an instance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.exceptions import ProgramInstanceNotFoundError
from application.ports import ProgramInstanceRepository
from application.use_cases.common import ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class DeleteProgramResult:
    """Result of the DeleteProgram use case."""

    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None


class DeleteProgramUseCase:
    """Use case for deleting a program instance."""

    def __init__(self, instance_repo: ProgramInstanceRepository) -> None:
        self._instance_repo = instance_repo

    def execute(self, instance_id: str, user_id: str) -> DeleteProgramResult:
        """
        Execute the delete workflow.

        Args:
            instance_id: Instance to delete
            user_id: Owner's user ID

        Returns:
            DeleteProgramResult; INSTANCE_NOT_FOUND when nothing was deleted
        """
        try:
            deleted = self._instance_repo.delete(instance_id, user_id)
        except Exception as e:
            logger.exception(f"DeleteProgram use case failed: {e}")
            return DeleteProgramResult(success=False, error=str(e), error_code=ErrorCode.INTERNAL)

        if not deleted:
            return DeleteProgramResult(
                success=False,
                error=str(ProgramInstanceNotFoundError(instance_id)),
                error_code=ErrorCode.INSTANCE_NOT_FOUND,
            )
        logger.info(f"Deleted program instance {instance_id} for user {user_id}")
        return DeleteProgramResult(success=True)
