"""
Program ledger service - keeps Program.collected_amount equal to the sum of
the program's paid donations.

The ledger is a denormalized counter, updated incrementally:
1. Every status change is classified by transition_effect(previous, new)
2. A credit or debit is pushed to the database as one atomic
   UPDATE programs SET collected_amount = collected_amount + :delta
3. The counter is never rewritten from application-side reads, except by the
   explicit reconciliation below

Verification: recompute the paid total from the donations table and compare
with the stored counter; optionally repair drift.
"""
import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Program, Donation, DonationStatus

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

StatusLike = Union[DonationStatus, str, None]


class LedgerEffect(str, enum.Enum):
     """Effect a status transition has on the program's collected amount."""
     CREDIT = "credit"
     DEBIT = "debit"
     NONE = "none"


def as_donation_status(status: StatusLike) -> Optional[DonationStatus]:
     """Normalize schema enums and raw strings to DonationStatus."""
     if status is None:
          return None
     if isinstance(status, enum.Enum):
          status = status.value
     return DonationStatus(status)


def _is_paid(status: StatusLike) -> bool:
     return as_donation_status(status) == DonationStatus.PAID


def transition_effect(previous: StatusLike, new: StatusLike) -> LedgerEffect:
     """
     Classify a status transition.

     previous is None for a donation that did not exist before (creation).
     Only entering or leaving PAID moves money; paid -> paid and
     non-paid -> non-paid are no-ops.
     """
     was_paid = _is_paid(previous)
     is_paid = _is_paid(new)
     if is_paid and not was_paid:
          return LedgerEffect.CREDIT
     if was_paid and not is_paid:
          return LedgerEffect.DEBIT
     return LedgerEffect.NONE


def ledger_delta(previous: StatusLike, new: StatusLike, amount: Decimal) -> Decimal:
     """Signed amount to add to collected_amount for this transition."""
     effect = transition_effect(previous, new)
     if effect == LedgerEffect.CREDIT:
          return Decimal(amount)
     if effect == LedgerEffect.DEBIT:
          return -Decimal(amount)
     return ZERO


def apply_program_delta(db: Session, program_id: Optional[int], delta: Decimal) -> bool:
     """
     Atomically add delta to a program's collected_amount.

     Returns True if a program row was updated. A missing program is skipped
     with a warning; it never fails the caller's operation.
     """
     if not program_id or delta == ZERO:
          return False

     updated = (
          db.query(Program)
          .filter(Program.id == program_id)
          .update(
               {Program.collected_amount: Program.collected_amount + delta},
               synchronize_session="fetch",
          )
     )
     if not updated:
          logger.warning("Ledger update skipped: program %s not found (delta=%s)", program_id, delta)
          return False

     logger.info("Program %s collected_amount adjusted by %s", program_id, delta)
     return True


def sync_program_amount(
     db: Session,
     donation: Donation,
     previous_status: StatusLike,
     new_status: StatusLike,
     amount: Optional[Decimal] = None,
     program_id: Optional[int] = None,
) -> Decimal:
     """
     Apply the ledger effect of a donation status transition.

     amount / program_id default to the donation's own values; pass them
     explicitly when the donation row is already gone (deletion).

     Returns the delta that was applied (0 when nothing changed).
     """
     program_id = program_id if program_id is not None else donation.program_id
     if not program_id:
          return ZERO

     delta = ledger_delta(previous_status, new_status, amount if amount is not None else donation.amount)
     if delta == ZERO:
          return ZERO

     if not apply_program_delta(db, program_id, delta):
          return ZERO
     return delta


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

@dataclass
class LedgerCheck:
     program_id: int
     stored_amount: Decimal
     paid_total: Decimal
     repaired: bool = False

     @property
     def consistent(self) -> bool:
          return self.stored_amount == self.paid_total


def compute_paid_total(db: Session, program_id: int) -> Decimal:
     """Sum of amounts over the program's paid donations."""
     total = (
          db.query(func.coalesce(func.sum(Donation.amount), 0))
          .filter(
               Donation.program_id == program_id,
               Donation.status == DonationStatus.PAID,
          )
          .scalar()
     )
     return Decimal(str(total or 0))


def verify_program_ledger(db: Session, program_id: int, repair: bool = False) -> Optional[LedgerCheck]:
     """
     Compare a program's stored collected_amount with its recomputed paid total.

     Returns None when the program does not exist. With repair=True a drifted
     counter is overwritten with the recomputed value.
     """
     query = db.query(Program).filter(Program.id == program_id).populate_existing()
     if repair:
          query = query.with_for_update()
     program = query.first()
     if program is None:
          return None

     stored = Decimal(str(program.collected_amount or 0))
     paid_total = compute_paid_total(db, program_id)
     check = LedgerCheck(program_id=program_id, stored_amount=stored, paid_total=paid_total)

     if not check.consistent:
          logger.warning(
               "Ledger drift on program %s: stored=%s, paid_total=%s",
               program_id, stored, paid_total,
          )
          if repair:
               program.collected_amount = paid_total
               db.flush()
               check.repaired = True
               logger.warning("Ledger for program %s repaired to %s", program_id, paid_total)

     return check


def verify_all_programs(db: Session, repair: bool = False) -> Tuple[bool, List[LedgerCheck]]:
     """
     Verify every program's ledger.

     Returns:
          (all_consistent: bool, checks: list of LedgerCheck)
          all_consistent reflects the state before any repair.
     """
     program_ids = [row[0] for row in db.query(Program.id).order_by(Program.id).all()]
     checks = []
     for program_id in program_ids:
          check = verify_program_ledger(db, program_id, repair=repair)
          if check is not None:
               checks.append(check)
     return all(c.consistent for c in checks), checks
