"""
FastAPI dependency providers for the progression API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and use case providers create new instances per-request
- Auth providers extract user from headers

Usage in routers:
    from api.deps import get_current_user, get_record_outcome_use_case

    @router.post("/programs/{instance_id}/results")
    def record(
        instance_id: str,
        user_id: str = Depends(get_current_user),
        use_case: RecordOutcomeUseCase = Depends(get_record_outcome_use_case),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_instance_repo] = lambda: FakeProgramInstanceRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from application.ports import ProgramDefinitionRepository, ProgramInstanceRepository
from application.use_cases import (
    CreateDefinitionUseCase,
    DeleteProgramUseCase,
    GenerateProgramUseCase,
    GetDefinitionUseCase,
    GetScheduleUseCase,
    ListDefinitionsUseCase,
    ListProgramsUseCase,
    RecordOutcomeUseCase,
    ResetProgramUseCase,
    UndoOutcomeUseCase,
    UpdateConfigUseCase,
)
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.db import (
    SupabaseProgramDefinitionRepository,
    SupabaseProgramInstanceRepository,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_definition_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProgramDefinitionRepository:
    """
    Get ProgramDefinitionRepository implementation.

    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseProgramDefinitionRepository(client)


def get_instance_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProgramInstanceRepository:
    """
    Get ProgramInstanceRepository implementation.

    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseProgramInstanceRepository(client)


# =============================================================================
# Use Case Providers
# =============================================================================


def get_definition_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
) -> GetDefinitionUseCase:
    return GetDefinitionUseCase(definition_repo)


def get_list_definitions_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
) -> ListDefinitionsUseCase:
    return ListDefinitionsUseCase(definition_repo)


def get_create_definition_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
) -> CreateDefinitionUseCase:
    return CreateDefinitionUseCase(definition_repo)


def get_generate_program_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> GenerateProgramUseCase:
    return GenerateProgramUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_schedule_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> GetScheduleUseCase:
    return GetScheduleUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_update_config_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> UpdateConfigUseCase:
    return UpdateConfigUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_record_outcome_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> RecordOutcomeUseCase:
    return RecordOutcomeUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_undo_outcome_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> UndoOutcomeUseCase:
    return UndoOutcomeUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_reset_program_use_case(
    definition_repo: ProgramDefinitionRepository = Depends(get_definition_repo),
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
    settings: Settings = Depends(get_settings),
) -> ResetProgramUseCase:
    return ResetProgramUseCase(definition_repo, instance_repo, settings.max_undo_stack)


def get_list_programs_use_case(
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
) -> ListProgramsUseCase:
    return ListProgramsUseCase(instance_repo)


def get_delete_program_use_case(
    instance_repo: ProgramInstanceRepository = Depends(get_instance_repo),
) -> DeleteProgramUseCase:
    return DeleteProgramUseCase(instance_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> str:
    """
    Get the current authenticated user ID.

    Extracts user ID from the Authorization header.

    Args:
        authorization: Bearer token header

    Returns:
        str: User ID from authentication

    Raises:
        HTTPException: 401 if authentication fails
        RuntimeError: If auth stub is used in production
    """
    if _get_settings().is_production:
        raise RuntimeError(
            "Authentication stub cannot be used in production. "
            "Implement JWT validation before deploying."
        )

    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing authorization header",
        )

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header format",
        )

    token = authorization[7:]
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
        )

    # Stub: token is the user id
    return token


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_definition_repo",
    "get_instance_repo",
    # Use cases
    "get_definition_use_case",
    "get_list_definitions_use_case",
    "get_create_definition_use_case",
    "get_generate_program_use_case",
    "get_schedule_use_case",
    "get_update_config_use_case",
    "get_record_outcome_use_case",
    "get_undo_outcome_use_case",
    "get_reset_program_use_case",
    "get_list_programs_use_case",
    "get_delete_program_use_case",
    # Authentication
    "get_current_user",
]
