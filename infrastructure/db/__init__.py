"""Database infrastructure package."""

from infrastructure.db.program_definition_repository import SupabaseProgramDefinitionRepository
from infrastructure.db.program_instance_repository import SupabaseProgramInstanceRepository

__all__ = [
    "SupabaseProgramDefinitionRepository",
    "SupabaseProgramInstanceRepository",
]
