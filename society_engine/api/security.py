"""Security desk endpoints: visitor check-in and check-out."""

from fastapi import APIRouter, Depends

from society_engine.api.dependencies import get_actor_id, get_visitor_service
from society_engine.api.schemas import VisitorEntryRequest, VisitorExitRequest, VisitorResponse
from society_engine.services import VisitorService

router = APIRouter(prefix="/api/security", tags=["security"])


@router.post("/visitor-entry", response_model=VisitorResponse, status_code=201)
def visitor_entry(
    payload: VisitorEntryRequest,
    visitors: VisitorService = Depends(get_visitor_service),
    actor_id: int | None = Depends(get_actor_id),
) -> VisitorResponse:
    visitor = visitors.check_in(payload.name, payload.tower, payload.flat_id, actor_id)
    return VisitorResponse.model_validate(visitor)


@router.post("/visitor-exit", response_model=VisitorResponse)
def visitor_exit(
    payload: VisitorExitRequest,
    visitors: VisitorService = Depends(get_visitor_service),
    actor_id: int | None = Depends(get_actor_id),
) -> VisitorResponse:
    """Close a visitor session; 409 already_out on a repeated exit."""
    visitor = visitors.check_out(payload.id, actor_id)
    return VisitorResponse.model_validate(visitor)


@router.get("/visitors", response_model=list[VisitorResponse])
def list_visitors(
    tower: str | None = None,
    flat_id: str | None = None,
    inside_only: bool = False,
    visitors: VisitorService = Depends(get_visitor_service),
) -> list[VisitorResponse]:
    """Visitor history, or only visitors currently inside."""
    if inside_only:
        sessions = visitors.list_open_sessions(tower=tower, flat_id=flat_id)
    else:
        sessions = visitors.list_history(tower=tower, flat_id=flat_id)
    return [VisitorResponse.model_validate(v) for v in sessions]
