import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class DonationStatus(str, enum.Enum):
     """Enumeration for donation payment status."""
     PENDING = "pending"
     PAID = "paid"
     FAILED = "failed"
     EXPIRED = "expired"
     CANCELLED = "cancelled"


class PaymentSource(str, enum.Enum):
     """Where the donation came from."""
     MANUAL = "manual"
     GATEWAY = "gateway"


def _enum_values(members):
     return [m.value for m in members]


class Donation(TimestampMixin, Base):
     """
     Donation model - a single contribution, either recorded manually by an
     admin (offline transfer, cash) or created by a donor and confirmed by the
     payment gateway.

     program_id is nullable: a donation without a program is a general donation.
     """
     __tablename__ = "donations"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     program_id = Column(
          Integer,
          ForeignKey("programs.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )

     donation_code = Column(String(50), unique=True, nullable=False, index=True)  # DPF-YYYYMMDD-NNNN

     # Donor (anonymous allowed)
     donor_name = Column(String(255), nullable=True)
     donor_email = Column(String(255), nullable=True)
     donor_phone = Column(String(50), nullable=True)
     is_anonymous = Column(Boolean, default=False, nullable=False)

     amount = Column(Numeric(15, 2), nullable=False)

     # Payment details
     payment_source = Column(
          Enum(PaymentSource, name="payment_source", create_constraint=True, values_callable=_enum_values),
          nullable=False
     )
     payment_method = Column(String(100), nullable=True)  # bank_transfer, qris, cash, snap
     payment_channel = Column(String(255), nullable=True)  # bca, bri, ...
     status = Column(
          Enum(DonationStatus, name="donation_status", create_constraint=True, values_callable=_enum_values),
          default=DonationStatus.PENDING,
          nullable=False,
          index=True
     )

     # Gateway correlation (null for manual donations)
     gateway_order_id = Column(String(100), nullable=True, index=True)
     gateway_transaction_id = Column(String(100), nullable=True)
     gateway_va_numbers = Column(JSON, nullable=True)
     gateway_raw_response = Column(JSON, nullable=True)

     manual_proof_path = Column(String(255), nullable=True)
     paid_at = Column(DateTime, nullable=True)
     notes = Column(Text, nullable=True)  # internal admin notes

     # Relationships
     program = relationship("Program", back_populates="donations")

     def __repr__(self):
          return f"<Donation(id={self.id}, code='{self.donation_code}', amount={self.amount}, status='{self.status.value}')>"

     @property
     def is_paid(self) -> bool:
          return self.status == DonationStatus.PAID

     @property
     def display_name(self) -> str:
          """Donor name as shown on the public site."""
          if self.is_anonymous or not self.donor_name:
               return "Hamba Allah"
          return self.donor_name
