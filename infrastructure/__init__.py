"""
Infrastructure layer package for the progression service.

This package contains concrete implementations of the port interfaces.
"""

from infrastructure.db import (
    SupabaseProgramDefinitionRepository,
    SupabaseProgramInstanceRepository,
)

__all__ = [
    "SupabaseProgramDefinitionRepository",
    "SupabaseProgramInstanceRepository",
]
