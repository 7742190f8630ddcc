"""
Public API routes: program listing/detail and donor-submitted donations.

No authentication; these back the public website.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import to_http_exception
from services.donation_service import DonationService
from services.errors import ServiceError
from services.gateway import generate_order_id
from services.program_service import ProgramService
from schemas.donation import (
     PublicDonationCreate,
     PublicDonationResponse,
     DonationResponse,
     GeneralDonationSummary,
)
from schemas.program import (
     ProgramListResponse,
     ProgramResponse,
     ProgramStatusEnum,
     PublicDonor,
     PublicProgramDetail,
)

router = APIRouter(prefix="/api", tags=["public"])


@router.get(
     "/programs",
     response_model=ProgramListResponse,
     summary="List public programs"
)
def list_public_programs(
     status: Optional[ProgramStatusEnum] = Query(None, description="Filter by status"),
     category: Optional[str] = Query(None, description="Filter by category"),
     highlight: bool = Query(False, description="Only highlighted programs"),
     page: int = Query(1, ge=1),
     page_size: int = Query(12, ge=1, le=100),
     db: Session = Depends(get_session),
):
     """
     Programs visible on the public site (active, draft, completed unless a
     status is given), highlighted programs first.
     """
     programs, total = ProgramService.list_programs(
          db,
          status=status,
          category=category,
          highlight=highlight,
          public=True,
          page=page,
          page_size=page_size,
     )
     return ProgramListResponse(
          programs=[ProgramResponse.model_validate(p) for p in programs],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/programs/{slug}",
     response_model=PublicProgramDetail,
     summary="Get public program by slug"
)
def get_public_program(slug: str, db: Session = Depends(get_session)):
     try:
          program, recent = ProgramService.get_public_program(db, slug)
     except ServiceError as exc:
          raise to_http_exception(exc)

     return PublicProgramDetail(
          program=ProgramResponse.model_validate(program),
          progress_percent=program.progress_percent,
          recent_donations=[
               PublicDonor(id=d.id, donor_name=d.display_name, amount=d.amount, paid_at=d.paid_at)
               for d in recent
          ],
     )


@router.get(
     "/donations/summary",
     summary="General donation summary"
)
def donation_summary(db: Session = Depends(get_session)):
     """Count and total of paid donations not tied to a program."""
     summary = DonationService.general_summary(db)
     return {"general": GeneralDonationSummary(**summary)}


@router.post(
     "/donations",
     response_model=PublicDonationResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Submit a donation"
)
def store_public_donation(
     donation_data: PublicDonationCreate,
     db: Session = Depends(get_session),
):
     """
     Create a **pending** donation with a gateway order id. The donation is
     confirmed later by the payment gateway notification.
     """
     order_id = generate_order_id()
     try:
          donation = DonationService.record_gateway_donation(db, donation_data.model_dump(), order_id)
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     db.refresh(donation)
     return PublicDonationResponse(order_id=order_id, donation=DonationResponse.model_validate(donation))
