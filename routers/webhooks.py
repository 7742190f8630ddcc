"""
Payment gateway webhook.

POST /api/midtrans/webhook: the gateway reports the outcome of an order. The
matching donation's status is changed through DonationService.change_status,
so the program ledger is credited or debited exactly as for an admin change.
"""
import logging
import os

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import to_http_exception
from services.errors import ServiceError
from services.gateway import apply_gateway_notification, verify_signature
from schemas.donation import GatewayNotification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/midtrans", tags=["webhooks"])

MIDTRANS_SERVER_KEY = os.getenv("MIDTRANS_SERVER_KEY", "")
MIDTRANS_SKIP_SIGNATURE = os.getenv("MIDTRANS_SKIP_SIGNATURE", "false").lower() == "true"


@router.post("/webhook")
def midtrans_webhook(
     notification: GatewayNotification,
     db: Session = Depends(get_session),
):
     """
     Receives Midtrans payment notifications.
     """
     payload = notification.model_dump()

     if not MIDTRANS_SKIP_SIGNATURE and not verify_signature(payload, MIDTRANS_SERVER_KEY):
          logger.warning("Rejected gateway notification for order %s: bad signature", notification.order_id)
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid Midtrans signature.")

     try:
          donation = apply_gateway_notification(db, payload)
     except ServiceError as exc:
          raise to_http_exception(exc)

     if donation is None:
          return {"message": "Ignored"}

     db.commit()
     return {"message": "ok"}
