"""
Program API routes (admin).

CRUD for programs plus ledger verification: the stored collected_amount of
each program can be checked against (and repaired from) its paid donations.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_admin, to_http_exception
from services.errors import ServiceError
from services.ledger_service import LedgerCheck, verify_all_programs, verify_program_ledger
from services.program_service import ProgramService
from schemas.program import (
     ProgramCreate,
     ProgramUpdate,
     ProgramStatusUpdate,
     ProgramResponse,
     ProgramListResponse,
     ProgramStatusEnum,
)
from schemas.ledger import ProgramLedgerCheck, LedgerVerifyResponse

router = APIRouter(prefix="/api/admin/programs", tags=["programs"])


@router.get(
     "",
     response_model=ProgramListResponse,
     summary="List programs with filters"
)
def list_programs(
     q: Optional[str] = Query(None, description="Search title or category"),
     status: Optional[ProgramStatusEnum] = Query(None, description="Filter by status"),
     category: Optional[str] = Query(None, description="Filter by category"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(15, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     programs, total = ProgramService.list_programs(
          db, q=q, status=status, category=category, page=page, page_size=page_size
     )
     return ProgramListResponse(
          programs=[ProgramResponse.model_validate(p) for p in programs],
          total=total,
          page=page,
          page_size=page_size
     )


@router.post(
     "",
     response_model=ProgramResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new program"
)
def create_program(
     program_data: ProgramCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Create a program. The slug is derived from the title when omitted;
     collected amount starts at zero.
     """
     try:
          program = ProgramService.create_program(db, program_data.model_dump())
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     db.refresh(program)
     return ProgramResponse.model_validate(program)


# ---------------------------------------------------------------------------
# Ledger verification
# ---------------------------------------------------------------------------

def _ledger_response(all_consistent: bool, checks: list, repaired: bool = False) -> LedgerVerifyResponse:
     if all_consistent:
          message = "All program ledgers match their paid donations"
     elif repaired:
          message = "Ledger drift found and repaired"
     else:
          message = "Ledger drift found"
     return LedgerVerifyResponse(
          verified=all_consistent,
          message=message,
          programs_checked=len(checks),
          checks=[_check_to_schema(c) for c in checks],
     )


def _check_to_schema(check: LedgerCheck) -> ProgramLedgerCheck:
     return ProgramLedgerCheck(
          program_id=check.program_id,
          stored_amount=check.stored_amount,
          paid_total=check.paid_total,
          consistent=check.consistent,
          repaired=check.repaired,
     )


@router.get(
     "/ledger/verify",
     response_model=LedgerVerifyResponse,
     summary="Verify every program ledger"
)
def verify_ledgers(
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin),
):
     """
     Recompute each program's paid total and compare it with the stored
     collected amount. Nothing is written.
     """
     all_consistent, checks = verify_all_programs(db)
     return _ledger_response(all_consistent, checks)


@router.post(
     "/ledger/reconcile",
     response_model=LedgerVerifyResponse,
     summary="Verify and repair every program ledger"
)
def reconcile_ledgers(
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin),
):
     """
     Same check as /ledger/verify, but drifted collected amounts are
     overwritten with the recomputed paid total.
     """
     all_consistent, checks = verify_all_programs(db, repair=True)
     db.commit()
     return _ledger_response(all_consistent, checks, repaired=True)


@router.get(
     "/{program_id}/ledger/verify",
     response_model=ProgramLedgerCheck,
     summary="Verify one program ledger"
)
def verify_program(
     program_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin),
):
     check = verify_program_ledger(db, program_id)
     if check is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail="Program not found."
          )
     return _check_to_schema(check)


# ---------------------------------------------------------------------------
# Single program
# ---------------------------------------------------------------------------

@router.get(
     "/{program_id}",
     response_model=ProgramResponse,
     summary="Get program by ID"
)
def get_program(
     program_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     try:
          program = ProgramService.get_program(db, program_id)
     except ServiceError as exc:
          raise to_http_exception(exc)
     return ProgramResponse.model_validate(program)


@router.put(
     "/{program_id}",
     response_model=ProgramResponse,
     summary="Update program"
)
def update_program(
     program_id: int,
     program_data: ProgramUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Update an existing program. Only provided fields are changed;
     collected amount is not writable here.
     """
     try:
          program = ProgramService.update_program(
               db, program_id, program_data.model_dump(exclude_unset=True)
          )
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     db.refresh(program)
     return ProgramResponse.model_validate(program)


@router.delete(
     "/{program_id}",
     summary="Delete program"
)
def delete_program(
     program_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """
     Delete a program. Refused with 422 while any donation references it.
     """
     try:
          ProgramService.delete_program(db, program_id)
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     return {"message": "Program deleted."}


@router.patch(
     "/{program_id}/status",
     response_model=ProgramResponse,
     summary="Update program status"
)
def update_program_status(
     program_id: int,
     status_data: ProgramStatusUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     try:
          program = ProgramService.set_status(db, program_id, status_data.status)
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     db.refresh(program)
     return ProgramResponse.model_validate(program)


@router.patch(
     "/{program_id}/highlight",
     response_model=ProgramResponse,
     summary="Toggle program highlight"
)
def toggle_program_highlight(
     program_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     try:
          program = ProgramService.toggle_highlight(db, program_id)
     except ServiceError as exc:
          raise to_http_exception(exc)

     db.commit()
     db.refresh(program)
     return ProgramResponse.model_validate(program)
