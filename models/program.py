import enum
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, Date, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class ProgramStatus(str, enum.Enum):
     """Enumeration for program publication status."""
     DRAFT = "draft"
     ACTIVE = "active"
     COMPLETED = "completed"
     ARCHIVED = "archived"


# Statuses visible on the public site
PUBLIC_STATUSES = (ProgramStatus.ACTIVE, ProgramStatus.DRAFT, ProgramStatus.COMPLETED)


class Program(TimestampMixin, Base):
     """
     Program model - a fundraising campaign donations can be earmarked for.

     collected_amount is a denormalized running total of the program's paid
     donations. It is only changed through services.ledger_service.
     """
     __tablename__ = "programs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     title = Column(String(255), nullable=False)
     slug = Column(String(255), unique=True, nullable=False, index=True)
     category = Column(String(100), nullable=True)

     # Content
     short_description = Column(Text, nullable=True)
     description = Column(Text, nullable=True)
     benefits = Column(Text, nullable=True)

     # Funding
     target_amount = Column(Numeric(15, 2), nullable=True)
     collected_amount = Column(Numeric(15, 2), default=Decimal("0"), server_default="0", nullable=False)

     # Media
     thumbnail_path = Column(String(255), nullable=True)
     banner_path = Column(String(255), nullable=True)

     is_highlight = Column(Boolean, default=False, nullable=False)
     status = Column(
          Enum(
               ProgramStatus,
               name="program_status",
               create_constraint=True,
               values_callable=lambda statuses: [s.value for s in statuses],
          ),
          default=ProgramStatus.DRAFT,
          nullable=False,
          index=True
     )
     deadline_days = Column(Integer, nullable=True)
     published_at = Column(Date, nullable=True)

     # Relationships
     donations = relationship("Donation", back_populates="program", passive_deletes=True)

     def __repr__(self):
          return f"<Program(id={self.id}, slug='{self.slug}', collected={self.collected_amount})>"

     @property
     def progress_percent(self) -> float:
          """Share of the target already collected, 0 when there is no target."""
          if not self.target_amount or self.target_amount <= 0:
               return 0
          return round(float(self.collected_amount or 0) / float(self.target_amount) * 100, 2)
