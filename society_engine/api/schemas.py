"""Request and response schemas for the HTTP boundary.

Request field aliases accept the camelCase names the dashboard front end sends
(dueDate, timeSlot, flatId) as well as the snake_case names.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from society_engine.models.activity_log import ActivityAction
from society_engine.models.bill import BillStatus
from society_engine.models.broadcast import AlertSeverity
from society_engine.models.complaint import ComplaintStatus
from society_engine.models.visitor import VisitorStatus


class RequestModel(BaseModel):
    """Base for request bodies."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ResponseModel(BaseModel):
    """Base for responses built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


# Billing


class GenerateBillsRequest(RequestModel):
    """Generate bills for a period given as month + year or as a "March 2026" label."""

    month: int | str
    year: int | None = None
    amount: int
    due_date: date = Field(alias="dueDate")


class PaymentRequest(RequestModel):
    mode: str
    transaction_ref: str = Field(alias="transactionRef")


class BillResponse(ResponseModel):
    id: int
    flat_id: str
    month: int
    year: int
    amount: int
    due_date: date
    status: BillStatus


class GenerateBillsResponse(BaseModel):
    period: str
    created_count: int
    bills: list[BillResponse]


class PaymentResponse(ResponseModel):
    id: int
    bill_id: int
    payment_mode: str
    transaction_ref: str
    paid_at: datetime


class PaidBillResponse(BillResponse):
    payment: PaymentResponse | None = None


# Bookings


class BookingRequest(RequestModel):
    amenity: str
    booking_date: date = Field(alias="date")
    time_slot: str = Field(alias="timeSlot")
    flat_id: str = Field(alias="flatId")


class BookingResponse(ResponseModel):
    id: int
    amenity: str
    booking_date: date
    time_slot: str
    flat_id: str
    created_at: datetime


# Visitors


class VisitorEntryRequest(RequestModel):
    name: str
    tower: str
    flat_id: str = Field(alias="flatId")


class VisitorExitRequest(RequestModel):
    id: int


class VisitorResponse(ResponseModel):
    id: int
    name: str
    tower: str
    flat_id: str
    entry_time: datetime
    exit_time: datetime | None
    status: VisitorStatus


# Complaints


class ComplaintRequest(RequestModel):
    flat_id: str = Field(alias="flatId")
    title: str
    description: str
    category: str


class ComplaintStatusRequest(RequestModel):
    status: str


class ComplaintResponse(ResponseModel):
    id: int
    flat_id: str
    title: str
    description: str
    category: str
    status: ComplaintStatus
    created_at: datetime


# Broadcasts


class AlertRequest(RequestModel):
    tower: str = "All"
    title: str
    message: str
    severity: str = AlertSeverity.LOW.value


class AlertResponse(ResponseModel):
    id: int
    tower: str
    title: str
    message: str
    severity: AlertSeverity
    created_at: datetime


class EventRequest(RequestModel):
    title: str
    description: str
    event_date: date = Field(alias="date")


class EventResponse(ResponseModel):
    id: int
    title: str
    description: str
    event_date: date


class NoticeRequest(RequestModel):
    title: str
    description: str


class NoticeResponse(ResponseModel):
    id: int
    title: str
    description: str
    created_at: datetime


# Directory, dashboards and audit


class FlatResponse(BaseModel):
    id: str
    tower: str
    floor: int
    flat_number: str
    owner_name: str | None
    maintenance_status: BillStatus | None


class ActivityLogResponse(ResponseModel):
    id: int
    user_id: int | None
    user_name: str
    action: ActivityAction
    details: str
    timestamp: datetime


class AdminStatsResponse(ResponseModel):
    total_flats: int
    paid_flats: int
    unpaid_flats: int
    total_collected: int
    total_pending: int
    visitors_inside: int
    open_complaints: int


class ResidentDashboardResponse(BaseModel):
    flat: FlatResponse
    bills: list[BillResponse]
    complaints: list[ComplaintResponse]
    upcoming_bookings: list[BookingResponse]
    visitors: list[VisitorResponse]
