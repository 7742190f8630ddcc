"""
Pydantic schemas for Donation API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, List
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from enum import Enum

from .program import ProgramSummary


class DonationStatusEnum(str, Enum):
     """Donation payment status options."""
     PENDING = "pending"
     PAID = "paid"
     FAILED = "failed"
     EXPIRED = "expired"
     CANCELLED = "cancelled"


class PaymentSourceEnum(str, Enum):
     MANUAL = "manual"
     GATEWAY = "gateway"


class ManualDonationCreate(BaseModel):
     """Schema for recording an offline donation (bank transfer, cash)."""
     program_id: Optional[int] = Field(None, gt=0, description="Program ID (must exist); omit for a general donation")
     donor_name: str = Field(..., min_length=1, max_length=255)
     donor_email: Optional[EmailStr] = None
     donor_phone: Optional[str] = Field(None, max_length=50)
     amount: Decimal = Field(..., ge=1, max_digits=15, decimal_places=2, description="Donation amount")
     is_anonymous: bool
     payment_method: str = Field(..., min_length=1, max_length=100)
     payment_channel: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None
     manual_proof_path: Optional[str] = Field(None, max_length=255)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "program_id": 1,
                    "donor_name": "Budi",
                    "amount": 50000,
                    "is_anonymous": False,
                    "payment_method": "bank_transfer",
                    "payment_channel": "bca"
               }
          }
     )


class PublicDonationCreate(BaseModel):
     """Schema for a donor-submitted donation awaiting gateway confirmation."""
     program_id: Optional[int] = Field(None, gt=0)
     donor_name: str = Field(..., min_length=1, max_length=255)
     donor_email: Optional[EmailStr] = None
     donor_phone: Optional[str] = Field(None, max_length=30)
     amount: Decimal = Field(..., ge=1000, max_digits=15, decimal_places=2)
     is_anonymous: bool
     notes: Optional[str] = None


class DonationStatusUpdate(BaseModel):
     """Schema for changing a donation's status."""
     status: DonationStatusEnum
     paid_at: Optional[datetime] = None
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "status": "cancelled",
                    "notes": "Transfer bounced"
               }
          }
     )


class DonationResponse(BaseModel):
     """Schema for donation response, with the program loaded."""
     id: int
     program_id: Optional[int] = None
     donation_code: str
     donor_name: Optional[str] = None
     donor_email: Optional[str] = None
     donor_phone: Optional[str] = None
     amount: Decimal
     is_anonymous: bool
     payment_source: PaymentSourceEnum
     payment_method: Optional[str] = None
     payment_channel: Optional[str] = None
     status: DonationStatusEnum
     gateway_order_id: Optional[str] = None
     gateway_transaction_id: Optional[str] = None
     gateway_va_numbers: Optional[Any] = None
     manual_proof_path: Optional[str] = None
     paid_at: Optional[datetime] = None
     notes: Optional[str] = None
     created_at: datetime
     updated_at: datetime
     program: Optional[ProgramSummary] = None

     model_config = ConfigDict(from_attributes=True)


class DonationListResponse(BaseModel):
     """Schema for paginated donation list response."""
     donations: List[DonationResponse]
     total: int
     page: int = 1
     page_size: int = 20


class GeneralDonationSummary(BaseModel):
     count: int
     amount: Decimal


class GatewayNotification(BaseModel):
     """Payment gateway (Midtrans) HTTP notification body."""
     order_id: str = Field(..., min_length=1)
     transaction_status: str
     transaction_id: Optional[str] = None
     status_code: Optional[str] = None
     gross_amount: Optional[str] = None
     signature_key: Optional[str] = None
     payment_type: Optional[str] = None
     va_numbers: Optional[List[Any]] = None

     model_config = ConfigDict(extra="allow")


class PublicDonationResponse(BaseModel):
     """Response for a donor-submitted donation; the client continues with the gateway."""
     order_id: str
     donation: DonationResponse
