# services/donation_service.py
"""
Donation Service - business logic for the donation lifecycle.

Every operation that moves a donation into or out of PAID goes through
services.ledger_service in the same session, so the donation write and the
program ledger adjustment are committed (or rolled back) together.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from models import Donation, DonationStatus, PaymentSource, Program
from services.errors import NotFound, ValidationFailed
from services.ledger_service import as_donation_status, sync_program_amount

logger = logging.getLogger(__name__)

DONATION_CODE_PREFIX = "DPF"

# Fields a gateway notification may set alongside the status
GATEWAY_FIELDS = ("gateway_transaction_id", "gateway_va_numbers", "gateway_raw_response")


def utcnow() -> datetime:
     """Naive UTC timestamp, matching the DateTime columns."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


class DonationService:
     """Service class for donation-related business logic."""

     @staticmethod
     def generate_donation_code(db: Session, today: Optional[date] = None) -> str:
          """
          Generate the next donation code for today: DPF-YYYYMMDD-NNNN.

          The sequence continues from the greatest existing code with today's
          prefix and starts at 0001 on a new day. Past 9999 it grows to five
          digits, so codes are compared by length before value. Concurrent
          creators can compute the same code; the unique index on
          donation_code rejects the second insert.
          """
          today = today or date.today()
          prefix = f"{DONATION_CODE_PREFIX}-{today.strftime('%Y%m%d')}"

          last_code = (
               db.query(Donation.donation_code)
               .filter(Donation.donation_code.like(f"{prefix}-%"))
               .order_by(func.char_length(Donation.donation_code).desc(), Donation.donation_code.desc())
               .limit(1)
               .scalar()
          )

          sequence = 0
          if last_code:
               try:
                    sequence = int(last_code[len(prefix) + 1:])
               except ValueError:
                    sequence = 0
          return f"{prefix}-{sequence + 1:04d}"

     @staticmethod
     def _ensure_program(db: Session, program_id: Optional[int]) -> Optional[Program]:
          if program_id is None:
               return None
          program = db.get(Program, program_id)
          if program is None:
               raise ValidationFailed.for_field("program_id", "The selected program id is invalid.")
          return program

     @staticmethod
     def record_manual_donation(db: Session, data: Dict[str, Any]) -> Donation:
          """
          Record an offline donation entered by an admin.

          Manual donations skip PENDING: they are stored as PAID with paid_at
          set to now, and the program (if any) is credited in the same unit
          of work.

          Args:
               db: SQLAlchemy database session
               data: validated manual donation fields

          Returns:
               Created Donation object

          Raises:
               ValidationFailed: If program_id does not reference a program
          """
          DonationService._ensure_program(db, data.get("program_id"))

          donation = Donation(
               **data,
               payment_source=PaymentSource.MANUAL,
               status=DonationStatus.PAID,
               paid_at=utcnow(),
               donation_code=DonationService.generate_donation_code(db),
          )
          db.add(donation)
          db.flush()

          sync_program_amount(db, donation, None, DonationStatus.PAID)
          logger.info(
               "Manual donation %s recorded: amount=%s program=%s",
               donation.donation_code, donation.amount, donation.program_id,
          )
          return donation

     @staticmethod
     def record_gateway_donation(db: Session, data: Dict[str, Any], order_id: str) -> Donation:
          """
          Record a donor-submitted donation that waits for gateway confirmation.

          The donation starts PENDING and has no ledger effect until the
          gateway notification moves it to PAID.
          """
          DonationService._ensure_program(db, data.get("program_id"))

          donation = Donation(
               **data,
               payment_source=PaymentSource.GATEWAY,
               payment_method="snap",
               status=DonationStatus.PENDING,
               gateway_order_id=order_id,
               donation_code=DonationService.generate_donation_code(db),
          )
          db.add(donation)
          db.flush()

          logger.info("Gateway donation %s created with order %s", donation.donation_code, order_id)
          return donation

     @staticmethod
     def _get_for_update(db: Session, donation_id: int) -> Donation:
          donation = (
               db.query(Donation)
               .filter(Donation.id == donation_id)
               .with_for_update()
               .populate_existing()
               .first()
          )
          if donation is None:
               raise NotFound("Donation not found.")
          return donation

     @staticmethod
     def change_status(
          db: Session,
          donation_id: int,
          status,
          paid_at: Optional[datetime] = None,
          notes: Optional[str] = None,
          **gateway_fields: Any,
     ) -> Donation:
          """
          Move a donation to a new status and apply the ledger effect.

          Used by the admin status endpoint and the gateway webhook alike.
          The donation row is locked before its previous status is read, so
          two concurrent transitions cannot both credit (or debit) the program.

          Entering PAID without an explicit paid_at stamps paid_at with the
          current time; leaving PAID keeps the historical value.

          Args:
               db: SQLAlchemy database session
               donation_id: ID of the donation
               status: target status
               paid_at: optional paid-at override
               notes: optional admin notes
               **gateway_fields: gateway_transaction_id, gateway_va_numbers,
                    gateway_raw_response

          Returns:
               Updated Donation object

          Raises:
               NotFound: If the donation doesn't exist
          """
          donation = DonationService._get_for_update(db, donation_id)

          previous_status = donation.status
          new_status = as_donation_status(status)

          donation.status = new_status
          if paid_at is not None:
               if paid_at.tzinfo is not None:
                    paid_at = paid_at.astimezone(timezone.utc).replace(tzinfo=None)
               donation.paid_at = paid_at
          elif new_status == DonationStatus.PAID and previous_status != DonationStatus.PAID:
               donation.paid_at = utcnow()
          if notes is not None:
               donation.notes = notes
          for field in GATEWAY_FIELDS:
               value = gateway_fields.get(field)
               if value is not None:
                    setattr(donation, field, value)

          db.flush()

          delta = sync_program_amount(db, donation, previous_status, new_status)
          logger.info(
               "Donation %s status %s -> %s (ledger delta %s)",
               donation.donation_code, previous_status.value, new_status.value, delta,
          )
          return donation

     @staticmethod
     def delete_donation(db: Session, donation_id: int) -> None:
          """
          Delete a donation, reversing its ledger credit if it was PAID.

          The debit runs after the delete has been flushed; a failed delete
          leaves the program untouched.

          Raises:
               NotFound: If the donation doesn't exist
          """
          donation = DonationService._get_for_update(db, donation_id)

          previous_status = donation.status
          program_id = donation.program_id
          amount = donation.amount
          code = donation.donation_code

          db.delete(donation)
          db.flush()

          if program_id:
               sync_program_amount(db, donation, previous_status, None, amount=amount, program_id=program_id)
          logger.info("Donation %s deleted (was %s)", code, previous_status.value)

     @staticmethod
     def get_donation(db: Session, donation_id: int) -> Donation:
          donation = (
               db.query(Donation)
               .options(joinedload(Donation.program))
               .filter(Donation.id == donation_id)
               .first()
          )
          if donation is None:
               raise NotFound("Donation not found.")
          return donation

     @staticmethod
     def find_by_order_id(db: Session, order_id: str) -> Optional[Donation]:
          return db.query(Donation).filter(Donation.gateway_order_id == order_id).first()

     @staticmethod
     def list_donations(
          db: Session,
          status=None,
          program_id: Optional[int] = None,
          payment_source=None,
          date_from: Optional[date] = None,
          date_to: Optional[date] = None,
          q: Optional[str] = None,
          page: int = 1,
          page_size: int = 20,
     ) -> Tuple[List[Donation], int]:
          """
          List donations with optional filters, newest first.

          Returns:
               (donations on the requested page, total matching count)
          """
          query = db.query(Donation)

          if status:
               query = query.filter(Donation.status == as_donation_status(status))
          if program_id:
               query = query.filter(Donation.program_id == program_id)
          if payment_source:
               source = payment_source.value if hasattr(payment_source, "value") else payment_source
               query = query.filter(Donation.payment_source == PaymentSource(source))
          if date_from:
               query = query.filter(Donation.created_at >= datetime.combine(date_from, time.min))
          if date_to:
               query = query.filter(Donation.created_at < datetime.combine(date_to + timedelta(days=1), time.min))
          if q and q.strip():
               term = f"%{q.strip()}%"
               query = query.filter(
                    or_(Donation.donation_code.like(term), Donation.donor_name.like(term))
               )

          total = query.count()
          offset = (page - 1) * page_size
          donations = (
               query.options(joinedload(Donation.program))
               .order_by(Donation.created_at.desc(), Donation.id.desc())
               .offset(offset)
               .limit(page_size)
               .all()
          )
          return donations, total

     @staticmethod
     def general_summary(db: Session) -> dict:
          """Count and total of paid donations not earmarked for a program."""
          count, amount = (
               db.query(func.count(Donation.id), func.coalesce(func.sum(Donation.amount), 0))
               .filter(Donation.status == DonationStatus.PAID, Donation.program_id.is_(None))
               .one()
          )
          return {"count": count, "amount": Decimal(str(amount or 0))}
