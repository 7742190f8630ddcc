import re
from decimal import Decimal

import pytest

import routers.webhooks
from models import DonationStatus, PaymentSource, ProgramStatus
from services.gateway import compute_signature


def _notification(order_id, transaction_status, gross_amount="50000.00", status_code="200", **extra):
    payload = {
        "order_id": order_id,
        "transaction_status": transaction_status,
        "transaction_id": "trx-123",
        "status_code": status_code,
        "gross_amount": gross_amount,
        "payment_type": "bank_transfer",
        "va_numbers": [{"bank": "bca", "va_number": "1234567890"}],
    }
    payload["signature_key"] = compute_signature(
        order_id, status_code, gross_amount, routers.webhooks.MIDTRANS_SERVER_KEY
    )
    payload.update(extra)
    return payload


@pytest.fixture
def pending_donation(make_program, make_donation):
    program = make_program(collected="100000")
    donation = make_donation(
        "50000",
        program,
        status=DonationStatus.PENDING,
        payment_source=PaymentSource.GATEWAY,
        gateway_order_id="DPF-20261016093000-aB3dE",
    )
    return program, donation


def test_public_donation_is_pending_until_gateway_confirms(anon_client, make_program, reload):
    program = make_program(collected="100000")

    response = anon_client.post("/api/donations", json={
        "program_id": program.id,
        "donor_name": "Rina",
        "donor_email": "rina@dpf.or.id",
        "amount": 75000,
        "is_anonymous": False,
    })

    assert response.status_code == 201
    body = response.json()
    assert re.fullmatch(r"DPF-\d{14}-[A-Za-z0-9]{5}", body["order_id"])
    assert body["donation"]["status"] == "pending"
    assert body["donation"]["payment_source"] == "gateway"
    assert body["donation"]["gateway_order_id"] == body["order_id"]
    assert reload(program).collected_amount == Decimal("100000")


def test_public_donation_minimum_amount(anon_client):
    response = anon_client.post("/api/donations", json={
        "donor_name": "Rina",
        "amount": 500,
        "is_anonymous": True,
    })

    assert response.status_code == 422
    assert "amount" in response.json()["errors"]


def test_settlement_credits_program_once(anon_client, pending_donation, reload):
    program, donation = pending_donation
    payload = _notification(donation.gateway_order_id, "settlement")

    for _ in range(2):
        response = anon_client.post("/api/midtrans/webhook", json=payload)
        assert response.status_code == 200
        assert response.json() == {"message": "ok"}

    donation = reload(donation)
    assert donation.status == DonationStatus.PAID
    assert donation.paid_at is not None
    assert donation.gateway_transaction_id == "trx-123"
    assert donation.gateway_raw_response["transaction_status"] == "settlement"
    assert reload(program).collected_amount == Decimal("150000")


def test_expire_after_settlement_debits_program(anon_client, pending_donation, reload):
    program, donation = pending_donation

    anon_client.post("/api/midtrans/webhook", json=_notification(donation.gateway_order_id, "capture"))
    response = anon_client.post(
        "/api/midtrans/webhook",
        json=_notification(donation.gateway_order_id, "expire", status_code="407"),
    )

    assert response.status_code == 200
    assert reload(donation).status == DonationStatus.EXPIRED
    assert reload(program).collected_amount == Decimal("100000")


def test_failure_statuses(anon_client, pending_donation, reload):
    program, donation = pending_donation

    anon_client.post("/api/midtrans/webhook", json=_notification(donation.gateway_order_id, "deny"))

    assert reload(donation).status == DonationStatus.FAILED
    assert reload(program).collected_amount == Decimal("100000")


def test_bad_signature_is_rejected(anon_client, pending_donation, reload):
    program, donation = pending_donation
    payload = _notification(donation.gateway_order_id, "settlement", signature_key="forged")

    response = anon_client.post("/api/midtrans/webhook", json=payload)

    assert response.status_code == 403
    assert reload(donation).status == DonationStatus.PENDING
    assert reload(program).collected_amount == Decimal("100000")


def test_unknown_order(anon_client):
    response = anon_client.post("/api/midtrans/webhook", json=_notification("DPF-NOPE", "settlement"))

    assert response.status_code == 404


def test_unknown_transaction_status_is_ignored(anon_client, pending_donation, reload):
    program, donation = pending_donation

    response = anon_client.post(
        "/api/midtrans/webhook",
        json=_notification(donation.gateway_order_id, "refund"),
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Ignored"}
    assert reload(donation).status == DonationStatus.PENDING
    assert reload(program).collected_amount == Decimal("100000")


def test_general_summary(anon_client, make_program, make_donation):
    program = make_program()
    make_donation("10000")
    make_donation("15000")
    make_donation("7000", status=DonationStatus.PENDING)
    make_donation("50000", program)

    response = anon_client.get("/api/donations/summary")

    assert response.status_code == 200
    general = response.json()["general"]
    assert general["count"] == 2
    assert Decimal(general["amount"]) == Decimal("25000")


def test_public_program_listing_hides_archived(anon_client, make_program):
    make_program(title="Visible")
    make_program(title="Highlighted", is_highlight=True)
    make_program(title="Old", status=ProgramStatus.ARCHIVED)

    body = anon_client.get("/api/programs").json()

    assert body["total"] == 2
    assert body["programs"][0]["title"] == "Highlighted"
    assert anon_client.get("/api/programs", params={"highlight": True}).json()["total"] == 1


def test_public_program_detail(anon_client, make_program, make_donation):
    program = make_program(collected="300000", slug="wakaf-sumur")
    make_donation("100000", program, donor_name="Budi", is_anonymous=True)
    make_donation("200000", program, donor_name="Siti")
    make_donation("5000", program, donor_name="Pending", status=DonationStatus.PENDING)

    response = anon_client.get("/api/programs/wakaf-sumur")

    assert response.status_code == 200
    body = response.json()
    assert body["program"]["slug"] == "wakaf-sumur"
    assert body["progress_percent"] == pytest.approx(30.0)
    names = sorted(d["donor_name"] for d in body["recent_donations"])
    assert names == ["Hamba Allah", "Siti"]


def test_public_program_detail_unknown_or_archived(anon_client, make_program):
    make_program(slug="arsip", status=ProgramStatus.ARCHIVED)

    assert anon_client.get("/api/programs/arsip").status_code == 404
    assert anon_client.get("/api/programs/tidak-ada").status_code == 404


def test_public_donation_rejects_invalid_email(anon_client):
    response = anon_client.post("/api/donations", json={
        "donor_name": "Rina",
        "donor_email": "rina@",
        "amount": 10000,
        "is_anonymous": False,
    })

    assert response.status_code == 422
    assert "donor_email" in response.json()["errors"]
