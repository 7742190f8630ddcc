from .program import (
     ProgramCreate,
     ProgramUpdate,
     ProgramStatusUpdate,
     ProgramResponse,
     ProgramListResponse,
     PublicProgramDetail,
)
from .donation import (
     ManualDonationCreate,
     PublicDonationCreate,
     DonationStatusUpdate,
     DonationResponse,
     DonationListResponse,
     GatewayNotification,
)
from .ledger import ProgramLedgerCheck, LedgerVerifyResponse

__all__ = [
     "ProgramCreate",
     "ProgramUpdate",
     "ProgramStatusUpdate",
     "ProgramResponse",
     "ProgramListResponse",
     "PublicProgramDetail",
     "ManualDonationCreate",
     "PublicDonationCreate",
     "DonationStatusUpdate",
     "DonationResponse",
     "DonationListResponse",
     "GatewayNotification",
     "ProgramLedgerCheck",
     "LedgerVerifyResponse",
]
