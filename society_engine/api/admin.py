"""Admin endpoints: billing, directory, broadcasts, complaints and audit log."""

from fastapi import APIRouter, Depends, Query

from society_engine.api.dependencies import (
    get_activity_service,
    get_actor_id,
    get_billing_service,
    get_broadcast_service,
    get_complaint_service,
    get_dashboard_service,
    get_directory_service,
)
from society_engine.api.schemas import (
    ActivityLogResponse,
    AdminStatsResponse,
    AlertRequest,
    AlertResponse,
    BillResponse,
    ComplaintResponse,
    ComplaintStatusRequest,
    EventRequest,
    EventResponse,
    FlatResponse,
    GenerateBillsRequest,
    GenerateBillsResponse,
    NoticeRequest,
    NoticeResponse,
)
from society_engine.models.activity_log import ActivityAction
from society_engine.models.bill import BillStatus
from society_engine.models.complaint import ComplaintStatus
from society_engine.services import (
    ActivityService,
    BillingPeriod,
    BillingService,
    BroadcastService,
    ComplaintService,
    DashboardService,
    DirectoryService,
)
from society_engine.services.errors import InvalidPeriodError


router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/generate-bills", response_model=GenerateBillsResponse)
def generate_bills(
    payload: GenerateBillsRequest,
    billing: BillingService = Depends(get_billing_service),
    actor_id: int | None = Depends(get_actor_id),
) -> GenerateBillsResponse:
    """Generate maintenance bills for every flat not yet billed for the period."""
    month = payload.month
    year = payload.year
    if year is None:
        # Whole label in `month` ("March 2026")
        period = BillingPeriod.parse(month)
        month, year = period.month, period.year

    result = billing.generate_bills(month, year, payload.amount, payload.due_date, actor_id)
    return GenerateBillsResponse(
        period=result.period.label,
        created_count=len(result.created),
        bills=[BillResponse.model_validate(bill) for bill in result.bills],
    )


@router.get("/bills", response_model=list[BillResponse])
def list_bills(
    flat_id: str | None = None,
    month: str | None = None,
    year: int | None = None,
    status: BillStatus | None = None,
    billing: BillingService = Depends(get_billing_service),
) -> list[BillResponse]:
    """List bills, optionally filtered by flat, period and status.

    The period is month + year, or a "March 2026" label passed as month alone.
    """
    if month is None and year is not None:
        raise InvalidPeriodError(f"Year {year} given without a month")
    period = BillingPeriod.parse(month, year) if month is not None else None
    return [
        BillResponse.model_validate(bill)
        for bill in billing.list_bills(flat_id=flat_id, period=period, status=status)
    ]


@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(
    dashboards: DashboardService = Depends(get_dashboard_service),
) -> AdminStatsResponse:
    """Society-wide billing, visitor and complaint figures."""
    return AdminStatsResponse(**dashboards.admin_stats()._asdict())


@router.get("/flats", response_model=list[FlatResponse])
def list_flats(
    tower: str | None = None,
    directory: DirectoryService = Depends(get_directory_service),
) -> list[FlatResponse]:
    """Flats with maintenance status derived from their latest bill."""
    return [
        FlatResponse(
            id=item.flat.id,
            tower=item.flat.tower,
            floor=item.flat.floor,
            flat_number=item.flat.flat_number,
            owner_name=item.flat.owner_name,
            maintenance_status=item.maintenance_status,
        )
        for item in directory.list_flats_with_status(tower)
    ]


@router.get("/logs", response_model=list[ActivityLogResponse])
def list_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    action: ActivityAction | None = None,
    activity: ActivityService = Depends(get_activity_service),
) -> list[ActivityLogResponse]:
    """Activity log, newest first."""
    return [
        ActivityLogResponse.model_validate(entry)
        for entry in activity.list_entries(limit=limit, action=action)
    ]


@router.get("/complaints", response_model=list[ComplaintResponse])
def list_complaints(
    status: ComplaintStatus | None = None,
    complaints: ComplaintService = Depends(get_complaint_service),
) -> list[ComplaintResponse]:
    return [ComplaintResponse.model_validate(c) for c in complaints.list_complaints(status=status)]


@router.post("/complaints/{complaint_id}/status", response_model=ComplaintResponse)
def advance_complaint(
    complaint_id: int,
    payload: ComplaintStatusRequest,
    complaints: ComplaintService = Depends(get_complaint_service),
    actor_id: int | None = Depends(get_actor_id),
) -> ComplaintResponse:
    """Move a complaint forward (Pending -> In Progress -> Resolved)."""
    complaint = complaints.advance_status(complaint_id, payload.status, actor_id)
    return ComplaintResponse.model_validate(complaint)


@router.post("/alerts", response_model=AlertResponse, status_code=201)
def create_alert(
    payload: AlertRequest,
    broadcasts: BroadcastService = Depends(get_broadcast_service),
    actor_id: int | None = Depends(get_actor_id),
) -> AlertResponse:
    alert = broadcasts.create_alert(
        payload.tower, payload.title, payload.message, payload.severity, actor_id
    )
    return AlertResponse.model_validate(alert)


@router.post("/events", response_model=EventResponse, status_code=201)
def create_event(
    payload: EventRequest,
    broadcasts: BroadcastService = Depends(get_broadcast_service),
    actor_id: int | None = Depends(get_actor_id),
) -> EventResponse:
    event = broadcasts.create_event(
        payload.title, payload.description, payload.event_date, actor_id
    )
    return EventResponse.model_validate(event)


@router.post("/notices", response_model=NoticeResponse, status_code=201)
def create_notice(
    payload: NoticeRequest,
    broadcasts: BroadcastService = Depends(get_broadcast_service),
    actor_id: int | None = Depends(get_actor_id),
) -> NoticeResponse:
    notice = broadcasts.create_notice(payload.title, payload.description, actor_id)
    return NoticeResponse.model_validate(notice)
