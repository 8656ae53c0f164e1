"""
Application-layer exceptions.

These exceptions are used across the services, application and
infrastructure layers. Routers translate them into HTTP errors.
"""

from typing import Dict, Optional


class ProgramDefinitionNotFoundError(Exception):
    """No program definition exists for the requested id (and version)."""

    def __init__(self, definition_id: str, version: Optional[int] = None):
        self.definition_id = definition_id
        self.version = version
        suffix = f" v{version}" if version is not None else ""
        super().__init__(f"Program definition {definition_id}{suffix} not found")


class ProgramInstanceNotFoundError(Exception):
    """No program instance exists for the requested id and user."""

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Program instance {instance_id} not found")


class InvalidLogTargetError(Exception):
    """Outcome targets a workout index or slot the program does not have.

    Raised before any mutation, so the result log is left untouched.
    """

    def __init__(self, workout_index: int, slot_id: str):
        self.workout_index = workout_index
        self.slot_id = slot_id
        super().__init__(f"Workout {workout_index} has no slot '{slot_id}'")


class ConfigValidationError(Exception):
    """Raw config was rejected; carries one message per invalid field."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__(f"Invalid config: {', '.join(sorted(self.field_errors))}")


class InvalidOutcomeError(Exception):
    """Outcome values are out of range (AMRAP reps, RPE, note length)."""

    def __init__(self, workout_index: int, slot_id: str, reason: str):
        self.workout_index = workout_index
        self.slot_id = slot_id
        self.reason = reason
        super().__init__(f"Invalid outcome for workout {workout_index} slot '{slot_id}': {reason}")
