"""Billing engine: maintenance bill generation and payment recording."""

import calendar
import logging
from datetime import date, datetime
from functools import partial
from typing import Callable, NamedTuple

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from society_engine.models import utc_now
from society_engine.models.activity_log import ActivityAction
from society_engine.models.bill import BillStatus, MaintenanceBill
from society_engine.models.flat import Flat
from society_engine.models.payment import Payment
from society_engine.services.activity_service import ActivityService
from society_engine.services.errors import (
    AlreadyPaidError,
    InvalidAmountError,
    InvalidPeriodError,
    NotFoundError,
    ValidationError,
)
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.parsers import parse_iso_date, parse_month, parse_period_label

logger = logging.getLogger(__name__)


class BillingPeriod(NamedTuple):
    """A (month, year) maintenance billing cycle."""

    month: int
    year: int

    @classmethod
    def parse(cls, month: int | str, year: int | str | None = None) -> "BillingPeriod":
        """Build a period from a month (number or name) and year, or from a "March 2026" label.

        Raises:
            InvalidPeriodError: If month or year cannot be interpreted
        """
        try:
            if year is None:
                parsed_month, parsed_year = parse_period_label(str(month))
            else:
                if isinstance(year, bool):
                    raise ValueError(f"Invalid year: {year}")
                parsed_month, parsed_year = parse_month(month), int(year)
        except (TypeError, ValueError) as e:
            raise InvalidPeriodError(str(e)) from e

        if not 1900 <= parsed_year <= 9999:
            raise InvalidPeriodError(f"Year out of range: {parsed_year}")
        return cls(parsed_month, parsed_year)

    @property
    def label(self) -> str:
        """Display label, e.g. "March 2026"."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self) -> str:
        return self.label


class GenerationResult(NamedTuple):
    """Outcome of a bill generation run."""

    period: BillingPeriod
    created: list[MaintenanceBill]
    """Bills created by this run (empty on a repeat run)"""
    bills: list[MaintenanceBill]
    """All bills of the period after the run"""


class BillingSummary(NamedTuple):
    """Aggregate bill figures for dashboards."""

    total_bills: int
    paid_bills: int
    unpaid_bills: int
    total_collected: int
    total_pending: int


def validate_amount(amount: int) -> int:
    """Bill amounts are positive integers in currency minor units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"Amount must be an integer, got {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount}")
    return amount


class BillingService:
    """Service owning MaintenanceBill and Payment records.

    Bills are created only by generate_bills() and flip to PAID only through
    record_payment(). There is no PAID -> UNPAID transition.
    """

    def __init__(self, store: LedgerStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def generate_bills(
        self,
        month: int | str,
        year: int | str,
        amount: int,
        due_date: date | str,
        actor_id: int | None = None,
    ) -> GenerationResult:
        """Create an UNPAID bill for every flat that has none for the period.

        Each flat is billed in its own transaction together with its activity log
        entry, so a failure part-way leaves earlier bills in place and a retry only
        creates the missing ones. Calling this twice for the same period creates no
        duplicates and returns the same bill set.

        Args:
            month: Month number or name ("March")
            year: Billing year
            amount: Bill amount in minor units (positive integer)
            due_date: Payment due date (date or "YYYY-MM-DD")
            actor_id: Admin user ID who triggered generation (optional)

        Returns:
            GenerationResult with the bills created now and all bills of the period

        Raises:
            ValidationError: If period, amount or due date are malformed
            TransientStoreError: If the store fails; safe to retry
        """
        period = BillingPeriod.parse(month, year)
        amount = validate_amount(amount)
        try:
            due = parse_iso_date(due_date)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        flat_ids = self.store.run(
            partial(self._unbilled_flat_ids, period=period),
            f"unbilled flat lookup for {period}",
        )

        created: list[MaintenanceBill] = []
        for flat_id in flat_ids:
            try:
                bill = self.store.run(
                    partial(
                        self._create_bill,
                        flat_id=flat_id,
                        period=period,
                        amount=amount,
                        due_date=due,
                        actor_id=actor_id,
                    ),
                    f"bill generation for {flat_id}",
                )
            except IntegrityError:
                # Another generator committed this flat's bill first
                logger.info("Bill for flat %s, %s already created concurrently", flat_id, period)
                continue
            if bill is not None:
                created.append(bill)

        bills = self.list_bills(period=period)
        logger.info(
            "Created %d bills for period %s (%d bills in period)",
            len(created),
            period,
            len(bills),
        )
        return GenerationResult(period=period, created=created, bills=bills)

    @staticmethod
    def _unbilled_flat_ids(db: Session, period: BillingPeriod) -> list[str]:
        billed = select(MaintenanceBill.flat_id).where(
            MaintenanceBill.month == period.month,
            MaintenanceBill.year == period.year,
        )
        stmt = select(Flat.id).where(Flat.id.not_in(billed)).order_by(Flat.id)
        return list(db.execute(stmt).scalars().all())

    def _create_bill(
        self,
        db: Session,
        flat_id: str,
        period: BillingPeriod,
        amount: int,
        due_date: date,
        actor_id: int | None,
    ) -> MaintenanceBill | None:
        existing = db.execute(
            select(MaintenanceBill.id).where(
                MaintenanceBill.flat_id == flat_id,
                MaintenanceBill.month == period.month,
                MaintenanceBill.year == period.year,
            )
        ).scalar_one_or_none()
        if existing is not None:
            return None

        bill = MaintenanceBill(
            flat_id=flat_id,
            month=period.month,
            year=period.year,
            amount=amount,
            due_date=due_date,
            status=BillStatus.UNPAID,
        )
        db.add(bill)
        db.flush()

        ActivityService.log(
            db,
            ActivityAction.GENERATE_BILLS,
            f"Generated {period} maintenance bill of {amount} for flat {flat_id}",
            self.clock(),
            actor_id,
        )
        db.flush()
        return bill

    def record_payment(
        self,
        bill_id: int,
        mode: str,
        transaction_ref: str,
        actor_id: int | None = None,
    ) -> MaintenanceBill:
        """Record a payment confirmation and mark the bill PAID.

        Args:
            bill_id: Bill being paid
            mode: Payment mode (e.g., "ONLINE")
            transaction_ref: External transaction reference
            actor_id: User who recorded the payment (optional)

        Returns:
            The updated bill, with its payment loaded

        Raises:
            ValidationError: If mode or transaction_ref are empty
            NotFoundError: If the bill does not exist
            AlreadyPaidError: If the bill is already PAID
        """
        if not mode or not mode.strip():
            raise ValidationError("Payment mode is required")
        if not transaction_ref or not transaction_ref.strip():
            raise ValidationError("Transaction reference is required")

        command = partial(
            self._apply_payment,
            bill_id=bill_id,
            mode=mode.strip().upper(),
            transaction_ref=transaction_ref.strip(),
            actor_id=actor_id,
        )
        try:
            bill = self.store.run(command, f"payment of bill {bill_id}")
        except IntegrityError as e:
            logger.warning("Concurrent payment rejected for bill %d", bill_id)
            raise AlreadyPaidError(f"Bill {bill_id} is already paid") from e
        except (AlreadyPaidError, NotFoundError) as e:
            logger.warning("Payment rejected for bill %d: %s", bill_id, e.message)
            raise

        logger.info(
            "Recorded %s payment %s for bill %d",
            bill.payment.payment_mode,
            transaction_ref,
            bill_id,
        )
        return bill

    def _apply_payment(
        self,
        db: Session,
        bill_id: int,
        mode: str,
        transaction_ref: str,
        actor_id: int | None,
    ) -> MaintenanceBill:
        # Row lock where the backend supports it; payments.bill_id is unique regardless
        bill = db.execute(
            select(MaintenanceBill).where(MaintenanceBill.id == bill_id).with_for_update()
        ).scalar_one_or_none()
        if bill is None:
            raise NotFoundError("Bill", bill_id)
        if bill.status == BillStatus.PAID:
            raise AlreadyPaidError(f"Bill {bill_id} is already paid")

        now = self.clock()
        bill.status = BillStatus.PAID
        bill.payment = Payment(
            bill_id=bill_id,
            payment_mode=mode,
            transaction_ref=transaction_ref,
            paid_at=now,
        )
        db.flush()

        ActivityService.log(
            db,
            ActivityAction.RECORD_PAYMENT,
            f"Payment {transaction_ref} ({mode}) of {bill.amount} for flat {bill.flat_id}, "
            f"{BillingPeriod(bill.month, bill.year)}",
            now,
            actor_id,
        )
        db.flush()
        return bill

    def get_bill(self, bill_id: int) -> MaintenanceBill:
        """Get bill by ID.

        Raises:
            NotFoundError: If the bill does not exist
        """
        with self.store.session() as db:
            bill = db.get(MaintenanceBill, bill_id)
            if bill is None:
                raise NotFoundError("Bill", bill_id)
            return bill

    def get_payment_for_bill(self, bill_id: int) -> Payment | None:
        """Get the payment that settled a bill, if any."""
        with self.store.session() as db:
            return db.execute(
                select(Payment).where(Payment.bill_id == bill_id)
            ).scalar_one_or_none()

    def list_bills(
        self,
        flat_id: str | None = None,
        period: BillingPeriod | None = None,
        status: BillStatus | None = None,
    ) -> list[MaintenanceBill]:
        """List bills newest period first, optionally filtered by flat, period and status."""
        stmt = select(MaintenanceBill)
        if flat_id is not None:
            stmt = stmt.where(MaintenanceBill.flat_id == flat_id)
        if period is not None:
            stmt = stmt.where(
                MaintenanceBill.month == period.month,
                MaintenanceBill.year == period.year,
            )
        if status is not None:
            stmt = stmt.where(MaintenanceBill.status == status)
        stmt = stmt.order_by(
            MaintenanceBill.year.desc(),
            MaintenanceBill.month.desc(),
            MaintenanceBill.flat_id,
        )

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def billing_summary(self, period: BillingPeriod | None = None) -> BillingSummary:
        """Aggregate counts and totals over all bills, or over one period."""
        is_paid = MaintenanceBill.status == BillStatus.PAID
        stmt = select(
            func.count(MaintenanceBill.id),
            func.coalesce(func.sum(case((is_paid, 1), else_=0)), 0),
            func.coalesce(func.sum(case((is_paid, MaintenanceBill.amount), else_=0)), 0),
            func.coalesce(func.sum(case((is_paid, 0), else_=MaintenanceBill.amount)), 0),
        )
        if period is not None:
            stmt = stmt.where(
                MaintenanceBill.month == period.month,
                MaintenanceBill.year == period.year,
            )

        with self.store.session() as db:
            total, paid, collected, pending = db.execute(stmt).one()

        return BillingSummary(
            total_bills=int(total),
            paid_bills=int(paid),
            unpaid_bills=int(total) - int(paid),
            total_collected=int(collected),
            total_pending=int(pending),
        )


__all__ = [
    "BillingService",
    "BillingPeriod",
    "BillingSummary",
    "GenerationResult",
    "validate_amount",
]
