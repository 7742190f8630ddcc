from .base import Base
from .program import Program, ProgramStatus
from .donation import Donation, DonationStatus, PaymentSource

__all__ = [
     "Base",
     "Program",
     "ProgramStatus",
     "Donation",
     "DonationStatus",
     "PaymentSource",
]
