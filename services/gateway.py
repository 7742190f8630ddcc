# services/gateway.py
"""
Payment gateway (Midtrans) notification handling.

The gateway reports a transaction_status for an order; it is mapped onto a
DonationStatus and applied through DonationService.change_status, the same
path the admin status endpoint uses. Token creation (Snap) is not handled here.
"""
import hashlib
import hmac
import logging
import secrets
import string
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models import Donation, DonationStatus
from services.donation_service import DonationService
from services.errors import NotFound

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "DPF"

_STATUS_MAP = {
     "capture": DonationStatus.PAID,
     "settlement": DonationStatus.PAID,
     "pending": DonationStatus.PENDING,
     "deny": DonationStatus.FAILED,
     "cancel": DonationStatus.FAILED,
     "failure": DonationStatus.FAILED,
     "expire": DonationStatus.EXPIRED,
}


def map_gateway_status(transaction_status: Optional[str]) -> Optional[DonationStatus]:
     """Map a gateway transaction_status to a DonationStatus, or None if unknown."""
     return _STATUS_MAP.get((transaction_status or "").strip().lower())


def compute_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
     """SHA-512 hex of order_id + status_code + gross_amount + server_key."""
     payload = f"{order_id}{status_code}{gross_amount}{server_key}"
     return hashlib.sha512(payload.encode("utf-8")).hexdigest()


def verify_signature(payload: Dict[str, Any], server_key: str) -> bool:
     expected = compute_signature(
          str(payload.get("order_id") or ""),
          str(payload.get("status_code") or ""),
          str(payload.get("gross_amount") or ""),
          server_key or "",
     )
     return hmac.compare_digest(expected, str(payload.get("signature_key") or ""))


def generate_order_id(now: Optional[datetime] = None) -> str:
     """Gateway order id: DPF-YYYYMMDDHHMMSS-XXXXX."""
     now = now or datetime.now()
     alphabet = string.ascii_letters + string.digits
     suffix = "".join(secrets.choice(alphabet) for _ in range(5))
     return f"{ORDER_ID_PREFIX}-{now.strftime('%Y%m%d%H%M%S')}-{suffix}"


def apply_gateway_notification(db: Session, payload: Dict[str, Any]) -> Optional[Donation]:
     """
     Apply a gateway notification to its donation.

     Returns the updated donation, or None when the transaction_status is
     not one we act on.

     Raises:
          NotFound: If no donation carries the notification's order_id
     """
     donation = DonationService.find_by_order_id(db, payload.get("order_id"))
     if donation is None:
          raise NotFound("Donation not found.")

     new_status = map_gateway_status(payload.get("transaction_status"))
     if new_status is None:
          logger.info(
               "Ignoring gateway status %r for order %s",
               payload.get("transaction_status"), payload.get("order_id"),
          )
          return None

     return DonationService.change_status(
          db,
          donation.id,
          new_status,
          gateway_transaction_id=payload.get("transaction_id"),
          gateway_va_numbers=payload.get("va_numbers"),
          gateway_raw_response=payload,
     )
