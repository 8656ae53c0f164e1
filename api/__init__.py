"""
API package for the progression service.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

from api.deps import (
    get_create_definition_use_case,
    get_current_user,
    get_definition_repo,
    get_definition_use_case,
    get_delete_program_use_case,
    get_generate_program_use_case,
    get_instance_repo,
    get_list_definitions_use_case,
    get_list_programs_use_case,
    get_record_outcome_use_case,
    get_reset_program_use_case,
    get_schedule_use_case,
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_undo_outcome_use_case,
    get_update_config_use_case,
)

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
