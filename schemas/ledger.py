"""
Pydantic schemas for program ledger verification.
"""
from decimal import Decimal
from typing import List
from pydantic import BaseModel, Field


class ProgramLedgerCheck(BaseModel):
     program_id: int
     stored_amount: Decimal = Field(..., description="collected_amount as stored on the program")
     paid_total: Decimal = Field(..., description="Sum of the program's paid donations")
     consistent: bool
     repaired: bool = False


class LedgerVerifyResponse(BaseModel):
     verified: bool
     message: str
     programs_checked: int
     checks: List[ProgramLedgerCheck]
