"""Resident endpoints: payments, amenity bookings, complaints and dashboard."""

from datetime import date

from fastapi import APIRouter, Depends

from society_engine.api.dependencies import (
    get_actor_id,
    get_billing_service,
    get_booking_service,
    get_broadcast_service,
    get_complaint_service,
    get_dashboard_service,
)
from society_engine.api.schemas import (
    AlertResponse,
    BillResponse,
    BookingRequest,
    BookingResponse,
    ComplaintRequest,
    ComplaintResponse,
    EventResponse,
    FlatResponse,
    NoticeResponse,
    PaidBillResponse,
    PaymentRequest,
    ResidentDashboardResponse,
    VisitorResponse,
)
from society_engine.services import (
    BillingService,
    BookingService,
    BroadcastService,
    ComplaintService,
    DashboardService,
)

router = APIRouter(prefix="/api", tags=["resident"])


@router.post("/bills/{bill_id}/pay", response_model=PaidBillResponse)
def pay_bill(
    bill_id: int,
    payload: PaymentRequest,
    billing: BillingService = Depends(get_billing_service),
    actor_id: int | None = Depends(get_actor_id),
) -> PaidBillResponse:
    """Record a payment confirmation for a bill."""
    bill = billing.record_payment(bill_id, payload.mode, payload.transaction_ref, actor_id)
    return PaidBillResponse.model_validate(bill)


@router.post("/resident/book", response_model=BookingResponse, status_code=201)
def book_amenity(
    payload: BookingRequest,
    bookings: BookingService = Depends(get_booking_service),
    actor_id: int | None = Depends(get_actor_id),
) -> BookingResponse:
    """Reserve an amenity slot; 409 slot_taken if someone holds it already."""
    booking = bookings.request_booking(
        payload.amenity, payload.booking_date, payload.time_slot, payload.flat_id, actor_id
    )
    return BookingResponse.model_validate(booking)


@router.get("/amenities/bookings", response_model=list[BookingResponse])
def list_bookings(
    amenity: str | None = None,
    booking_date: date | None = None,
    flat_id: str | None = None,
    bookings: BookingService = Depends(get_booking_service),
) -> list[BookingResponse]:
    return [
        BookingResponse.model_validate(b)
        for b in bookings.list_bookings(amenity=amenity, booking_date=booking_date, flat_id=flat_id)
    ]


@router.get("/amenities/{amenity}/availability", response_model=list[str])
def amenity_availability(
    amenity: str,
    booking_date: date,
    bookings: BookingService = Depends(get_booking_service),
) -> list[str]:
    """Free slots of an amenity on a date."""
    return bookings.available_slots(amenity, booking_date)


@router.post("/resident/complaints", response_model=ComplaintResponse, status_code=201)
def raise_complaint(
    payload: ComplaintRequest,
    complaints: ComplaintService = Depends(get_complaint_service),
    actor_id: int | None = Depends(get_actor_id),
) -> ComplaintResponse:
    complaint = complaints.raise_complaint(
        payload.flat_id, payload.title, payload.description, payload.category, actor_id
    )
    return ComplaintResponse.model_validate(complaint)


@router.get("/resident/dashboard/{flat_id}", response_model=ResidentDashboardResponse)
def resident_dashboard(
    flat_id: str,
    dashboards: DashboardService = Depends(get_dashboard_service),
) -> ResidentDashboardResponse:
    """A flat's bills, complaints, upcoming bookings and visitor history."""
    data = dashboards.resident_dashboard(flat_id)
    return ResidentDashboardResponse(
        flat=FlatResponse(
            id=data.flat.id,
            tower=data.flat.tower,
            floor=data.flat.floor,
            flat_number=data.flat.flat_number,
            owner_name=data.flat.owner_name,
            maintenance_status=data.maintenance_status,
        ),
        bills=[BillResponse.model_validate(b) for b in data.bills],
        complaints=[ComplaintResponse.model_validate(c) for c in data.complaints],
        upcoming_bookings=[BookingResponse.model_validate(b) for b in data.upcoming_bookings],
        visitors=[VisitorResponse.model_validate(v) for v in data.visitors],
    )


@router.get("/alerts", response_model=list[AlertResponse])
def list_alerts(
    tower: str | None = None,
    broadcasts: BroadcastService = Depends(get_broadcast_service),
) -> list[AlertResponse]:
    return [AlertResponse.model_validate(a) for a in broadcasts.list_alerts(tower)]


@router.get("/events", response_model=list[EventResponse])
def list_events(
    broadcasts: BroadcastService = Depends(get_broadcast_service),
) -> list[EventResponse]:
    return [EventResponse.model_validate(e) for e in broadcasts.list_events()]


@router.get("/notices", response_model=list[NoticeResponse])
def list_notices(
    broadcasts: BroadcastService = Depends(get_broadcast_service),
) -> list[NoticeResponse]:
    return [NoticeResponse.model_validate(n) for n in broadcasts.list_notices()]
