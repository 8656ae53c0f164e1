"""
UndoOutcome use case.

Reverses logged results, either the most recent write or the latest write
to one specific slot. Undoing with nothing to undo succeeds with
undone=None and leaves the schedule as it was.
"""

from typing import Optional

from application.use_cases.common import ProgramInstanceUseCase, ScheduleResult


class UndoOutcomeUseCase(ProgramInstanceUseCase):
    """Use case for undoing logged results."""

    def execute(
        self,
        instance_id: str,
        user_id: str,
        workout_index: Optional[int] = None,
        slot_id: Optional[str] = None,
    ) -> ScheduleResult:
        """
        Execute the undo workflow.

        With workout_index and slot_id the latest write to that slot is
        undone; without them the latest write overall is.

        Args:
            instance_id: Instance to update
            user_id: Owner's user ID
            workout_index: Workout index of a specific target
            slot_id: Slot id of a specific target

        Returns:
            ScheduleResult with the applied UndoEntry in `undone`
        """

        def mutate(session):
            if workout_index is not None and slot_id is not None:
                return session.undo_specific(workout_index, slot_id)
            return session.undo_last()

        return self._guarded(
            "UndoOutcome",
            lambda: self._run(instance_id, user_id, mutate=mutate),
        )
