"""
GenerateProgram use case.

Starts a new program instance for a user:
1. Load the latest (or requested) definition version
2. Validate the starting numbers against the declared config fields
3. Replay the full schedule
4. Persist the instance pinned to that definition version
"""

import logging
from typing import Any, Dict, Mapping, Optional

from application.use_cases.common import (
    ProgramInstanceUseCase,
    ScheduleResult,
    load_definition,
)
from services.program_session import ProgramSession

logger = logging.getLogger(__name__)


class GenerateProgramUseCase(ProgramInstanceUseCase):
    """
    Use case for creating a program instance from raw config input.

    Usage:
        >>> use_case = GenerateProgramUseCase(definition_repo, instance_repo)
        >>> result = use_case.execute("user-123", "gzclp", {"squat": "60"})
        >>> if result.success:
        ...     print(result.instance["id"], len(result.rows))
    """

    def execute(
        self,
        user_id: str,
        definition_id: str,
        config: Mapping[str, Any],
        version: Optional[int] = None,
    ) -> ScheduleResult:
        """
        Execute the generate workflow.

        Args:
            user_id: Owner of the new instance
            definition_id: Definition to run
            config: Raw starting numbers keyed by config field key
            version: Definition version to pin; None uses the latest

        Returns:
            ScheduleResult with the created instance and its schedule
        """
        return self._guarded(
            "GenerateProgram",
            lambda: self._generate(user_id, definition_id, config, version),
        )

    def _generate(
        self,
        user_id: str,
        definition_id: str,
        config: Mapping[str, Any],
        version: Optional[int],
    ) -> ScheduleResult:
        definition = load_definition(self._definition_repo, definition_id, version)
        session = ProgramSession(definition, max_undo=self._max_undo)
        rows = session.generate_program(config)

        data: Dict[str, Any] = {
            "user_id": user_id,
            "definition_id": definition.id,
            "definition_version": definition.version,
            "config": session.config,
            **session.result_log.to_dict(),
        }
        instance = self._instance_repo.create(data)
        logger.info(
            f"Created program instance {instance.get('id')} "
            f"({definition.id} v{definition.version}) for user {user_id}"
        )
        return ScheduleResult(
            success=True,
            instance=instance,
            rows=rows,
            reference_errors=session.reference_report().errors,
        )
