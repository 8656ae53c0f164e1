"""
Fake implementations for testing.

This package provides in-memory fake implementations of repository
interfaces for fast, isolated testing without database dependencies.
"""

from tests.fakes.definition_repository import FakeProgramDefinitionRepository
from tests.fakes.instance_repository import FakeProgramInstanceRepository

__all__ = [
    "FakeProgramDefinitionRepository",
    "FakeProgramInstanceRepository",
]
