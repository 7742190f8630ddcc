# services/__init__.py
from .errors import ServiceError, ValidationFailed, NotFound, Conflict
from .donation_service import DonationService
from .program_service import ProgramService
from .ledger_service import (
     LedgerEffect,
     LedgerCheck,
     transition_effect,
     ledger_delta,
     apply_program_delta,
     sync_program_amount,
     compute_paid_total,
     verify_program_ledger,
     verify_all_programs,
)

__all__ = [
     "ServiceError",
     "ValidationFailed",
     "NotFound",
     "Conflict",
     "DonationService",
     "ProgramService",
     "LedgerEffect",
     "LedgerCheck",
     "transition_effect",
     "ledger_delta",
     "apply_program_delta",
     "sync_program_amount",
     "compute_paid_total",
     "verify_program_ledger",
     "verify_all_programs",
]
