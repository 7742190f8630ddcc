"""
Donation API routes (admin).

Manual donation entry, status changes and deletion all keep the program
ledger in step through DonationService. Every route requires the admin or
superadmin role.
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_admin, to_http_exception
from models import Donation
from services.donation_service import DonationService
from services.errors import ServiceError
from schemas.donation import (
     ManualDonationCreate,
     DonationStatusUpdate,
     DonationResponse,
     DonationListResponse,
     DonationStatusEnum,
     PaymentSourceEnum,
)

router = APIRouter(prefix="/api/admin/donations", tags=["donations"])


@router.get(
     "",
     response_model=DonationListResponse,
     summary="List donations with filters"
)
def list_donations(
     status: Optional[DonationStatusEnum] = Query(None, description="Filter by status"),
     program_id: Optional[int] = Query(None, description="Filter by program ID"),
     payment_source: Optional[PaymentSourceEnum] = Query(None, description="Filter by payment source"),
     date_from: Optional[date] = Query(None, description="Created on or after"),
     date_to: Optional[date] = Query(None, description="Created on or before"),
     q: Optional[str] = Query(None, description="Search donation code or donor name"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Retrieve a paginated list of donations, newest first.

     Filters:
     - **status**: pending, paid, failed, expired, cancelled
     - **program_id**: donations earmarked for a program
     - **payment_source**: manual or gateway
     - **date_from / date_to**: creation date range (inclusive)
     - **q**: substring of donation code or donor name
     """
     donations, total = DonationService.list_donations(
          db,
          status=status,
          program_id=program_id,
          payment_source=payment_source,
          date_from=date_from,
          date_to=date_to,
          q=q,
          page=page,
          page_size=page_size,
     )
     return DonationListResponse(
          donations=[DonationResponse.model_validate(d) for d in donations],
          total=total,
          page=page,
          page_size=page_size
     )


@router.post(
     "/manual",
     response_model=DonationResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a manual (offline) donation"
)
def store_manual_donation(
     donation_data: ManualDonationCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Record a donation paid through an offline channel (bank transfer, cash).

     The donation is stored as **paid** immediately and, when it names a
     program, the program's collected amount is credited in the same
     transaction.
     """
     try:
          donation = DonationService.record_manual_donation(db, donation_data.model_dump())
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     return _build_donation_response(donation, db)


@router.get(
     "/{donation_id}",
     response_model=DonationResponse,
     summary="Get donation by ID"
)
def get_donation(
     donation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     try:
          donation = DonationService.get_donation(db, donation_id)
     except ServiceError as exc:
          raise to_http_exception(exc)
     return DonationResponse.model_validate(donation)


@router.patch(
     "/{donation_id}/status",
     response_model=DonationResponse,
     summary="Update donation status"
)
def update_donation_status(
     donation_id: int,
     status_data: DonationStatusUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Change a donation's status (manual verification, cancellation, ...).

     Moving into **paid** credits the program; moving out of **paid** debits it.
     paid -> paid (e.g. only updating notes) leaves the program untouched.
     """
     try:
          donation = DonationService.change_status(
               db,
               donation_id,
               status_data.status,
               paid_at=status_data.paid_at,
               notes=status_data.notes,
          )
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     return _build_donation_response(donation, db)


@router.delete(
     "/{donation_id}",
     summary="Delete donation"
)
def delete_donation(
     donation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Delete a donation by ID. A paid donation's amount is removed from its
     program's collected amount.
     """
     try:
          DonationService.delete_donation(db, donation_id)
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     return {"message": "Donation deleted."}


def _build_donation_response(donation: Donation, db: Session) -> DonationResponse:
     """
     Helper function to build DonationResponse with the program loaded fresh.
     """
     db.refresh(donation)
     if donation.program is not None:
          db.refresh(donation.program)
     return DonationResponse.model_validate(donation)
