"""
Program instances router.

This router provides endpoints for running a program:
- List a user's programs, start one from a definition and starting numbers,
  delete one
- Get the replayed schedule
- Edit the config (every weight is recomputed)
- Log results, undo them (last or specific), reset everything

Single-instance responses carry the full schedule. Slots whose weight moved because
of the request are flagged with is_changed.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.deps import (
    get_current_user,
    get_delete_program_use_case,
    get_generate_program_use_case,
    get_list_programs_use_case,
    get_record_outcome_use_case,
    get_reset_program_use_case,
    get_schedule_use_case,
    get_undo_outcome_use_case,
    get_update_config_use_case,
)
from application.use_cases import (
    DeleteProgramUseCase,
    ErrorCode,
    GenerateProgramUseCase,
    GetScheduleUseCase,
    ListProgramsUseCase,
    RecordOutcomeUseCase,
    ResetProgramUseCase,
    ScheduleResult,
    UndoOutcomeUseCase,
    UpdateConfigUseCase,
)
from models.api import (
    ConfigErrorDetail,
    GenerateProgramRequest,
    ProgramListResponse,
    ProgramSummary,
    RecordOutcomeRequest,
    ScheduleResponse,
    UpdateConfigRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/programs",
    tags=["Programs"],
)

_NOT_FOUND_CODES = {
    ErrorCode.INSTANCE_NOT_FOUND,
    ErrorCode.DEFINITION_NOT_FOUND,
    ErrorCode.INVALID_TARGET,
}


# =============================================================================
# Helpers
# =============================================================================


def _raise_for_failure(result: ScheduleResult) -> None:
    """Map a failed use case result onto an HTTP error."""
    if result.success:
        return
    if result.error_code in _NOT_FOUND_CODES:
        raise HTTPException(status_code=404, detail=result.error)
    if result.error_code == ErrorCode.INVALID_CONFIG:
        detail = ConfigErrorDetail(message=result.error, field_errors=result.field_errors)
        raise HTTPException(status_code=422, detail=detail.model_dump())
    if result.error_code == ErrorCode.INVALID_OUTCOME:
        raise HTTPException(status_code=422, detail=result.error)
    logger.error(f"Program request failed ({result.error_code}): {result.error}")
    raise HTTPException(status_code=500, detail="Internal error")


def _to_response(result: ScheduleResult) -> ScheduleResponse:
    _raise_for_failure(result)
    instance = result.instance or {}
    return ScheduleResponse(
        instance_id=str(instance["id"]),
        definition_id=instance["definition_id"],
        definition_version=instance["definition_version"],
        config=instance.get("config") or {},
        results=instance.get("results") or [],
        undo_depth=len(instance.get("undo_history") or []),
        rows=result.rows,
        reference_errors=result.reference_errors,
        undone=result.undone,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=ProgramListResponse)
def list_programs(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user),
    use_case: ListProgramsUseCase = Depends(get_list_programs_use_case),
):
    """List the user's programs, newest first. Rows are not included."""
    result = use_case.execute(user_id, limit=limit, offset=offset)
    if not result.success:
        logger.error(f"Listing programs failed: {result.error}")
        raise HTTPException(status_code=500, detail="Internal error")
    return ProgramListResponse(
        programs=[
            ProgramSummary(
                instance_id=str(instance["id"]),
                definition_id=instance["definition_id"],
                definition_version=instance["definition_version"],
                results_count=len(instance.get("results") or []),
                created_at=instance.get("created_at"),
                updated_at=instance.get("updated_at"),
            )
            for instance in result.instances
        ]
    )


@router.post("", response_model=ScheduleResponse, status_code=201)
def generate_program(
    request: GenerateProgramRequest,
    user_id: str = Depends(get_current_user),
    use_case: GenerateProgramUseCase = Depends(get_generate_program_use_case),
):
    """
    Start a program.

    Args:
        request: Definition id (and optional version) with raw config values

    Returns:
        The created instance and its schedule
    """
    result = use_case.execute(
        user_id,
        request.definition_id,
        request.config,
        version=request.definition_version,
    )
    return _to_response(result)


@router.get("/{instance_id}", response_model=ScheduleResponse)
def get_schedule(
    instance_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetScheduleUseCase = Depends(get_schedule_use_case),
):
    """Get an instance and its replayed schedule."""
    return _to_response(use_case.execute(instance_id, user_id))


@router.put("/{instance_id}/config", response_model=ScheduleResponse)
def update_config(
    instance_id: str,
    request: UpdateConfigRequest,
    user_id: str = Depends(get_current_user),
    use_case: UpdateConfigUseCase = Depends(get_update_config_use_case),
):
    """
    Replace an instance's config.

    Logged results are kept; weights affected by the new numbers are flagged.
    """
    return _to_response(use_case.execute(instance_id, user_id, request.config))


@router.post("/{instance_id}/results", response_model=ScheduleResponse)
def record_outcome(
    instance_id: str,
    request: RecordOutcomeRequest,
    user_id: str = Depends(get_current_user),
    use_case: RecordOutcomeUseCase = Depends(get_record_outcome_use_case),
):
    """
    Log a result for one slot of one workout.

    Returns 404 when the workout has no such slot.
    """
    result = use_case.execute(
        instance_id,
        user_id,
        request.workout_index,
        request.slot_id,
        result=request.result,
        amrap_reps=request.amrap_reps,
        rpe=request.rpe,
        note=request.note,
    )
    return _to_response(result)


@router.post("/{instance_id}/undo", response_model=ScheduleResponse)
def undo_last(
    instance_id: str,
    user_id: str = Depends(get_current_user),
    use_case: UndoOutcomeUseCase = Depends(get_undo_outcome_use_case),
):
    """Undo the most recent logged result. undone is null when there was nothing to undo."""
    return _to_response(use_case.execute(instance_id, user_id))


@router.delete("/{instance_id}/results/{workout_index}/{slot_id}", response_model=ScheduleResponse)
def undo_specific(
    instance_id: str,
    workout_index: int,
    slot_id: str,
    user_id: str = Depends(get_current_user),
    use_case: UndoOutcomeUseCase = Depends(get_undo_outcome_use_case),
):
    """Undo the latest result logged for one slot, leaving other history intact."""
    result = use_case.execute(instance_id, user_id, workout_index=workout_index, slot_id=slot_id)
    return _to_response(result)


@router.post("/{instance_id}/reset", response_model=ScheduleResponse)
def reset_program(
    instance_id: str,
    user_id: str = Depends(get_current_user),
    use_case: ResetProgramUseCase = Depends(get_reset_program_use_case),
):
    """Clear every result and the undo history; the config is kept."""
    return _to_response(use_case.execute(instance_id, user_id))


@router.delete("/{instance_id}", status_code=204)
def delete_program(
    instance_id: str,
    user_id: str = Depends(get_current_user),
    use_case: DeleteProgramUseCase = Depends(get_delete_program_use_case),
):
    """Delete a program with its results and undo history."""
    result = use_case.execute(instance_id, user_id)
    if not result.success:
        if result.error_code == ErrorCode.INSTANCE_NOT_FOUND:
            raise HTTPException(status_code=404, detail=result.error)
        logger.error(f"Deleting program {instance_id} failed: {result.error}")
        raise HTTPException(status_code=500, detail="Internal error")
    return Response(status_code=204)
