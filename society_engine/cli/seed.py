"""CLI entry point for seeding a demo society.

Creates towers of flats with one resident each, an admin and a security user,
two months of maintenance bills with a fixed share of them paid, a sample
complaint and an opening notice. Running it again only adds what is missing.

Usage:
    python -m society_engine.cli.seed
    python -m society_engine.cli.seed --towers A B --floors 7 --flats-per-floor 4

Exit Codes:
    0 - Success
    1 - Failure; see logs
"""

import argparse
import logging
import sys
from typing import NamedTuple

from dotenv import load_dotenv

from society_engine.config import Settings, get_settings
from society_engine.models.bill import BillStatus
from society_engine.models.flat import flat_code
from society_engine.models.user import UserRole
from society_engine.services import (
    BillingService,
    BroadcastService,
    ComplaintService,
    DirectoryService,
    LedgerStore,
    get_store,
)
from society_engine.services.errors import EngineError
from society_engine.services.logging import setup_server_logging

logger = logging.getLogger(__name__)

RESIDENT_NAMES = [
    "Rajesh Kumar", "Anita Sharma", "Suresh Patel", "Priya Singh",
    "Amit Shah", "Sunita Gupta", "Vikram Mehta", "Deepa Iyer",
    "Rohan Deshmukh", "Kavita Joshi", "Sanjay Verma", "Meena Rao",
    "Arjun Nair", "Pooja Kulkarni", "Vijay Chauhan", "Sneha Reddy",
    "Manish Malhotra", "Ritu Saxena", "Abhishek Pandey", "Swati Mishra",
]  # fmt: skip

# (month, year, due date) of the demo billing periods
BILLING_PERIODS = [
    (1, 2024, "2024-01-10"),
    (2, 2024, "2024-02-10"),
]
BILL_AMOUNT = 2500

# Three of every five flats (in flat code order) have paid each period
PAID_OUT_OF = (3, 5)

SAMPLE_COMPLAINT = (
    "Leaking Pipe",
    "The kitchen pipe is leaking since morning.",
    "Water",
)


class SeedResult(NamedTuple):
    """Counts of records created by one seeding run."""

    flats: int
    users: int
    bills: int
    payments: int
    complaints: int
    notices: int

    def summary(self) -> str:
        return (
            f"Seed complete: {self.flats} flats, {self.users} users, "
            f"{self.bills} bills, {self.payments} payments, "
            f"{self.complaints} complaints, {self.notices} notices created"
        )


def seed_bills(billing: BillingService, actor_id: int | None = None) -> tuple[int, int]:
    """Bill every flat for the demo periods and pay the fixed share.

    Bills already paid are left alone, so a rerun records no new payments.

    Returns:
        (bills created, payments recorded)
    """
    paid, out_of = PAID_OUT_OF
    bills_created = 0
    payments_recorded = 0
    for month, year, due_date in BILLING_PERIODS:
        result = billing.generate_bills(month, year, BILL_AMOUNT, due_date, actor_id)
        bills_created += len(result.created)

        for index, bill in enumerate(sorted(result.bills, key=lambda b: b.flat_id)):
            if index % out_of >= paid or bill.status == BillStatus.PAID:
                continue
            reference = f"TXN{year}{month:02d}{bill.flat_id.replace('-', '')}"
            billing.record_payment(bill.id, "ONLINE", reference)
            payments_recorded += 1

    return bills_created, payments_recorded


def seed_complaint(complaints: ComplaintService, flat_id: str) -> int:
    """Raise the sample complaint for a flat unless it is already on record."""
    title, description, category = SAMPLE_COMPLAINT
    if any(c.title == title for c in complaints.list_complaints(flat_id=flat_id)):
        return 0
    complaints.raise_complaint(flat_id, title, description, category)
    return 1


def seed_society(
    store: LedgerStore,
    towers: list[str],
    floors: int = 7,
    flats_per_floor: int = 4,
    settings: Settings | None = None,
) -> SeedResult:
    """Create the demo society in the store.

    Flat numbers follow "<floor>0<n>" (101..104, 201..204, ...). Existing flats and
    users (matched by flat code and email) are left as they are. Bills, payments
    and the complaint go through the billing and complaint services, so each one
    has its activity log entry.
    """
    directory = DirectoryService(store)
    existing_flats = {flat.id for flat in directory.list_flats()}

    flats_created = 0
    users_created = 0
    resident_index = 0
    first_flat = None
    for tower in towers:
        for floor in range(1, floors + 1):
            for n in range(1, flats_per_floor + 1):
                number = f"{floor}0{n}"
                name = RESIDENT_NAMES[resident_index % len(RESIDENT_NAMES)]
                resident_index += 1

                code = flat_code(tower, number)
                first_flat = first_flat or code
                if code not in existing_flats:
                    directory.add_flat(tower, floor, number, owner_name=name)
                    flats_created += 1

                email = f"resident{resident_index}@example.com"
                if directory.find_user_by_email(email) is None:
                    directory.add_user(
                        name,
                        UserRole.RESIDENT,
                        flat_id=code,
                        email=email,
                        phone=f"98765432{(resident_index + 9) % 100:02d}",
                    )
                    users_created += 1

    staff = [
        ("Admin User", UserRole.ADMIN, "admin@society.com", "9999999999"),
        ("Security Guard", UserRole.SECURITY, "security@society.com", "8888888888"),
    ]
    for name, role, email, phone in staff:
        if directory.find_user_by_email(email) is None:
            directory.add_user(name, role, email=email, phone=phone)
            users_created += 1
    admin = directory.find_user_by_email("admin@society.com")

    bills_created, payments_recorded = seed_bills(BillingService(store), admin.id)

    complaints_created = 0
    if first_flat is not None:
        complaints_created = seed_complaint(ComplaintService(store, settings), first_flat)

    notices_created = 0
    broadcasts = BroadcastService(store, settings)
    if not broadcasts.list_notices(limit=1):
        broadcasts.create_notice(
            "Annual General Meeting",
            "The AGM will be held on Sunday at 10 AM in the clubhouse.",
            admin.id,
        )
        notices_created = 1

    return SeedResult(
        flats_created,
        users_created,
        bills_created,
        payments_recorded,
        complaints_created,
        notices_created,
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the seed CLI.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    load_dotenv()
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Seed a demo society")
    parser.add_argument("--towers", nargs="+", default=settings.towers)
    parser.add_argument("--floors", type=int, default=7)
    parser.add_argument("--flats-per-floor", type=int, default=4)
    parser.add_argument("--log-file", default="logs/seed.log")
    args = parser.parse_args(argv)

    setup_server_logging(args.log_file, settings.log_level)

    try:
        logger.info("Seeding society: towers=%s floors=%d", ",".join(args.towers), args.floors)
        store = get_store()
        store.create_all()
        result = seed_society(
            store, args.towers, args.floors, args.flats_per_floor, settings=settings
        )
        logger.info(result.summary())
        return 0
    except KeyboardInterrupt:
        logger.warning("Seed interrupted by user")
        return 1
    except EngineError as e:
        logger.error("Seed failed: %s", e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
