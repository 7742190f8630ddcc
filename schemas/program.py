"""
Pydantic schemas for Program API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator
from enum import Enum


class ProgramStatusEnum(str, Enum):
     """Program publication status options."""
     DRAFT = "draft"
     ACTIVE = "active"
     COMPLETED = "completed"
     ARCHIVED = "archived"


class ProgramCreate(BaseModel):
     """Schema for creating a new program. collected_amount always starts at 0."""
     title: str = Field(..., min_length=1, max_length=255)
     slug: Optional[str] = Field(None, max_length=255, description="Derived from title when omitted")
     category: str = Field(..., min_length=1, max_length=100)
     short_description: str = Field(..., min_length=1)
     description: str = Field(..., min_length=1)
     benefits: Optional[str] = None
     target_amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
     thumbnail_path: Optional[str] = Field(None, max_length=255)
     banner_path: Optional[str] = Field(None, max_length=255)
     is_highlight: bool = False
     status: ProgramStatusEnum = Field(..., description="Publication status")
     deadline_days: Optional[int] = Field(None, ge=0)
     published_at: Optional[date] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "title": "Sedekah Air Bersih",
                    "category": "Kemanusiaan",
                    "short_description": "Sumur bor untuk desa kekeringan",
                    "description": "Pembangunan sumur bor di tiga desa.",
                    "target_amount": 50000000,
                    "status": "active"
               }
          }
     )


class ProgramUpdate(BaseModel):
     """Schema for updating a program. Only provided fields are changed."""
     title: Optional[str] = Field(None, min_length=1, max_length=255)
     slug: Optional[str] = Field(None, max_length=255)
     category: Optional[str] = Field(None, min_length=1, max_length=100)
     short_description: Optional[str] = None
     description: Optional[str] = None
     benefits: Optional[str] = None
     target_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
     thumbnail_path: Optional[str] = Field(None, max_length=255)
     banner_path: Optional[str] = Field(None, max_length=255)
     is_highlight: Optional[bool] = None
     status: Optional[ProgramStatusEnum] = None
     deadline_days: Optional[int] = Field(None, ge=0)
     published_at: Optional[date] = None

     @field_validator("title", "status", "is_highlight")
     @classmethod
     def not_null(cls, value):
          # May be omitted, but not cleared
          if value is None:
               raise ValueError("This field may not be null.")
          return value


class ProgramStatusUpdate(BaseModel):
     status: ProgramStatusEnum


class ProgramSummary(BaseModel):
     """Compact program representation embedded in donation responses."""
     id: int
     title: str
     slug: str
     category: Optional[str] = None
     target_amount: Optional[Decimal] = None
     collected_amount: Decimal
     status: ProgramStatusEnum

     model_config = ConfigDict(from_attributes=True)


class ProgramResponse(BaseModel):
     """Schema for program response."""
     id: int
     title: str
     slug: str
     category: Optional[str] = None
     short_description: Optional[str] = None
     description: Optional[str] = None
     benefits: Optional[str] = None
     target_amount: Optional[Decimal] = None
     collected_amount: Decimal
     progress_percent: float
     thumbnail_path: Optional[str] = None
     banner_path: Optional[str] = None
     is_highlight: bool
     status: ProgramStatusEnum
     deadline_days: Optional[int] = None
     published_at: Optional[date] = None
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)


class ProgramListResponse(BaseModel):
     """Schema for paginated program list response."""
     programs: List[ProgramResponse]
     total: int
     page: int = 1
     page_size: int = 15


class PublicDonor(BaseModel):
     """Recent paid donation as shown on a public program page."""
     id: int
     donor_name: str
     amount: Decimal
     paid_at: Optional[datetime] = None


class PublicProgramDetail(BaseModel):
     program: ProgramResponse
     progress_percent: float
     recent_donations: List[PublicDonor]
