"""
ListPrograms use case.

Lists a user's program instances, newest first. Schedules are not replayed
here; clients fetch a single instance for its rows.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from application.ports import ProgramInstanceRepository
from application.use_cases.common import ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class ProgramListResult:
    """Result of the ListPrograms use case."""

    success: bool
    instances: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None


class ListProgramsUseCase:
    """Use case for listing a user's program instances."""

    def __init__(self, instance_repo: ProgramInstanceRepository) -> None:
        self._instance_repo = instance_repo

    def execute(self, user_id: str, limit: int = 20, offset: int = 0) -> ProgramListResult:
        """
        Execute the list workflow.

        Args:
            user_id: Owner's user ID
            limit: Maximum instances to return
            offset: Instances to skip

        Returns:
            ProgramListResult with instance rows, newest first
        """
        try:
            instances = self._instance_repo.list_by_user(user_id, limit=limit, offset=offset)
        except Exception as e:
            logger.exception(f"ListPrograms use case failed: {e}")
            return ProgramListResult(success=False, error=str(e), error_code=ErrorCode.INTERNAL)
        return ProgramListResult(success=True, instances=instances)
