"""
UpdateConfig use case.

Replaces an instance's config atomically. Every weight is recomputed from
the new numbers; logged outcomes are kept. A rejected config leaves the
stored instance untouched.
"""

from typing import Any, Mapping

from application.use_cases.common import ProgramInstanceUseCase, ScheduleResult


class UpdateConfigUseCase(ProgramInstanceUseCase):
    """Use case for editing an instance's starting numbers."""

    def execute(self, instance_id: str, user_id: str, config: Mapping[str, Any]) -> ScheduleResult:
        """
        Execute the config update workflow.

        Args:
            instance_id: Instance to update
            user_id: Owner's user ID
            config: Raw config values keyed by field key

        Returns:
            ScheduleResult with changed weights flagged, or field errors
        """
        return self._guarded(
            "UpdateConfig",
            lambda: self._run(
                instance_id,
                user_id,
                mutate=lambda session: session.update_config(config),
            ),
        )
