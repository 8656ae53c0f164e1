"""
ResetProgram use case.

Clears every logged result and the undo history of an instance. The
config is kept, so the schedule returns to its generated state.
"""

from application.use_cases.common import ProgramInstanceUseCase, ScheduleResult


class ResetProgramUseCase(ProgramInstanceUseCase):
    """Use case for resetting an instance's results."""

    def execute(self, instance_id: str, user_id: str) -> ScheduleResult:
        """
        Execute the reset workflow.

        Args:
            instance_id: Instance to reset
            user_id: Owner's user ID

        Returns:
            ScheduleResult with changed weights flagged
        """
        return self._guarded(
            "ResetProgram",
            lambda: self._run(instance_id, user_id, mutate=lambda session: session.reset_all()),
        )
