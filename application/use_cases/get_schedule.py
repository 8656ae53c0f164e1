"""
GetSchedule use case.

Loads a program instance and replays its current schedule. Read-only.
"""

from application.use_cases.common import ProgramInstanceUseCase, ScheduleResult


class GetScheduleUseCase(ProgramInstanceUseCase):
    """Use case for rendering an instance's schedule without changing it."""

    def execute(self, instance_id: str, user_id: str) -> ScheduleResult:
        """
        Execute the read workflow.

        Args:
            instance_id: Instance to render
            user_id: Owner's user ID

        Returns:
            ScheduleResult with the instance and its schedule
        """
        return self._guarded(
            "GetSchedule",
            lambda: self._run(instance_id, user_id, persist=False),
        )
