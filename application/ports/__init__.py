"""
Repository interfaces (ports) for the progression service.

Architecture follows the Ports & Adapters pattern:
- Ports: Protocol interfaces defined here (what the use cases need)
- Adapters: Supabase implementations in infrastructure/db, in-memory
  fakes in tests/fakes

Usage:
    from application.ports import ProgramInstanceRepository

    class GetScheduleUseCase:
        def __init__(self, instance_repo: ProgramInstanceRepository):
            self._instance_repo = instance_repo
"""

from application.ports.definition_repository import ProgramDefinitionRepository
from application.ports.instance_repository import ProgramInstanceRepository

__all__ = [
    "ProgramDefinitionRepository",
    "ProgramInstanceRepository",
]
