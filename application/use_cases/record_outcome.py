"""
RecordOutcome use case.

Logs a success, fail or cleared result for one slot of one workout and
returns the replayed schedule. Targets outside the program are rejected
before anything is written.
"""

from typing import Optional

from application.use_cases.common import ProgramInstanceUseCase, ScheduleResult
from models.outcome import ResultValue


class RecordOutcomeUseCase(ProgramInstanceUseCase):
    """
    Use case for logging a workout result.

    Usage:
        >>> use_case = RecordOutcomeUseCase(definition_repo, instance_repo)
        >>> result = use_case.execute(
        ...     instance_id="abc123",
        ...     user_id="user-123",
        ...     workout_index=0,
        ...     slot_id="squat-t1",
        ...     result=ResultValue.SUCCESS,
        ... )
    """

    def execute(
        self,
        instance_id: str,
        user_id: str,
        workout_index: int,
        slot_id: str,
        result: Optional[ResultValue] = None,
        amrap_reps: Optional[int] = None,
        rpe: Optional[int] = None,
        note: Optional[str] = None,
    ) -> ScheduleResult:
        """
        Execute the log workflow.

        Args:
            instance_id: Instance to log against
            user_id: Owner's user ID
            workout_index: Workout index, 0-based
            slot_id: Slot id on that workout's day
            result: success, fail, or None to clear
            amrap_reps: Reps achieved on an AMRAP set
            rpe: Rate of perceived exertion
            note: Free-text note

        Returns:
            ScheduleResult with changed weights flagged
        """
        return self._guarded(
            "RecordOutcome",
            lambda: self._run(
                instance_id,
                user_id,
                mutate=lambda session: session.log_outcome(
                    workout_index,
                    slot_id,
                    result=result,
                    amrap_reps=amrap_reps,
                    rpe=rpe,
                    note=note,
                ),
            ),
        )
