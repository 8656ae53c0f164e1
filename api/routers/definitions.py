"""
Program definitions router.

Browse and author program definitions. Reads include the load-time
reference report listing slots that would render unresolved. Authoring
stores a new revision; existing revisions are never edited, so running
programs keep the version they were started on.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    get_create_definition_use_case,
    get_current_user,
    get_definition_use_case,
    get_list_definitions_use_case,
)
from application.use_cases import (
    CreateDefinitionUseCase,
    DefinitionResult,
    ErrorCode,
    GetDefinitionUseCase,
    ListDefinitionsUseCase,
)
from models.api import (
    CreateDefinitionRequest,
    DefinitionListResponse,
    DefinitionResponse,
    DefinitionSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/definitions",
    tags=["Definitions"],
)


def _to_response(result: DefinitionResult) -> DefinitionResponse:
    if not result.success:
        if result.error_code == ErrorCode.DEFINITION_NOT_FOUND:
            raise HTTPException(status_code=404, detail=result.error)
        logger.error(f"Definition request failed ({result.error_code}): {result.error}")
        raise HTTPException(status_code=500, detail=result.error)
    return DefinitionResponse(
        definition=result.definition,
        reference_errors=result.reference_errors,
    )


@router.get("", response_model=DefinitionListResponse)
def list_definitions(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user),
    use_case: ListDefinitionsUseCase = Depends(get_list_definitions_use_case),
):
    """List the latest revision of every definition."""
    result = use_case.execute(limit=limit, offset=offset)
    if not result.success:
        raise HTTPException(status_code=500, detail="Internal error")
    return DefinitionListResponse(
        definitions=[
            DefinitionSummary(
                id=definition.id,
                version=definition.version,
                name=definition.name,
                description=definition.description,
                total_workouts=definition.total_workouts,
                workouts_per_week=definition.workouts_per_week,
            )
            for definition in result.definitions
        ]
    )


@router.post("", response_model=DefinitionResponse, status_code=201)
def create_definition(
    request: CreateDefinitionRequest,
    user_id: str = Depends(get_current_user),
    use_case: CreateDefinitionUseCase = Depends(get_create_definition_use_case),
):
    """
    Store a definition as a new revision.

    Returns 422 with the schema errors when the document is rejected.
    """
    result = use_case.execute(request.definition)
    if result.error_code == ErrorCode.INVALID_DEFINITION:
        raise HTTPException(status_code=422, detail=result.error)
    return _to_response(result)


@router.get("/{definition_id}", response_model=DefinitionResponse)
def get_definition(
    definition_id: str,
    version: Optional[int] = Query(None, ge=1),
    user_id: str = Depends(get_current_user),
    use_case: GetDefinitionUseCase = Depends(get_definition_use_case),
):
    """
    Get a program definition.

    Args:
        definition_id: Definition slug
        version: Exact version; latest when omitted

    Returns:
        The definition and its per-slot reference errors
    """
    return _to_response(use_case.execute(definition_id, version))
