from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from backend.app import models
from backend.app.main import LOCAL_DEVELOPMENT_ORIGIN


def _method_id(client, name: str = "Efectivo") -> str:
    methods = client.get("/payments/methods").json()
    return next(method["id"] for method in methods if method["name"] == name)


def test_payment_catalogs_are_seeded(client):
    methods = client.get("/payments/methods")
    banks = client.get("/payments/banks")

    assert methods.status_code == 200
    assert [item["name"] for item in methods.json()] == ["Depósito", "Efectivo", "Transferencia"]
    assert banks.status_code == 200
    assert "BBVA México" in {item["name"] for item in banks.json()}


def test_create_payment_method_and_bank(client):
    response = client.post("/payments/methods", json={"name": "Tarjeta"})
    assert response.status_code == 201, response.text
    assert response.json()["is_active"] is True

    response = client.post("/payments/banks", json={"name": "HSBC", "short_name": "HSBC"})
    assert response.status_code == 201, response.text

    assert "Tarjeta" in {item["name"] for item in client.get("/payments/methods").json()}
    assert "HSBC" in {item["name"] for item in client.get("/payments/banks").json()}


def test_create_payment_settles_charges_and_balance(client, db_session, finalized_client):
    payload = {
        "client_id": finalized_client.id,
        "amount": "380.00",
        "payment_date": "2024-02-12",
        "payment_type": _method_id(client),
        "receipt_number": "R-0001",
        "period_month": 2,
        "period_year": 2024,
        "recorded_by": "caja1",
    }

    response = client.post("/payments", json=payload)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["client_id"] == finalized_client.id
    assert data["payment_type_name"] == "Efectivo"
    assert data["client"]["full_name"] == "Juan Pérez"
    assert Decimal(str(data["amount"])) == Decimal("380.00")

    db_session.expire_all()
    refreshed = db_session.get(models.Client, finalized_client.id)
    assert Decimal(refreshed.billing.balance) == Decimal("0.00")
    assert all(charge.status == models.ChargeStatus.PAID for charge in refreshed.charges)
    assert all(charge.paid_at is not None for charge in refreshed.charges)


def test_partial_payment_reduces_balance_without_settling(client, db_session, finalized_client):
    response = client.post(
        "/payments",
        json={
            "client_id": finalized_client.id,
            "amount": "50",
            "payment_date": "2024-02-12",
            "payment_type": _method_id(client, "Transferencia"),
        },
    )

    assert response.status_code == 201, response.text
    db_session.expire_all()
    refreshed = db_session.get(models.Client, finalized_client.id)
    assert Decimal(refreshed.billing.balance) == Decimal("330.00")
    assert all(charge.status == models.ChargeStatus.PENDING for charge in refreshed.charges)


def test_create_payment_rejects_unknown_client(client):
    response = client.post(
        "/payments",
        json={
            "client_id": "00000000-0000-0000-0000-000000000000",
            "amount": "100",
            "payment_type": _method_id(client),
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "El cliente no existe."


def test_create_payment_rejects_unknown_method(client, finalized_client):
    response = client.post(
        "/payments",
        json={
            "client_id": finalized_client.id,
            "amount": "100",
            "payment_type": "00000000-0000-0000-0000-000000000000",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "El tipo de pago no es válido."


def test_create_payment_requires_complete_period(client, finalized_client):
    response = client.post(
        "/payments",
        json={
            "client_id": finalized_client.id,
            "amount": "100",
            "payment_type": _method_id(client),
            "period_month": 3,
        },
    )

    assert response.status_code == 422


def test_create_payment_rejects_non_positive_amount(client, finalized_client):
    response = client.post(
        "/payments",
        json={
            "client_id": finalized_client.id,
            "amount": "0",
            "payment_type": _method_id(client),
        },
    )

    assert response.status_code == 422


def test_payment_listing_filters_by_period_and_search(client, finalized_client):
    method_id = _method_id(client)
    for payment_date, receipt in (("2024-03-05", "R-100"), ("2024-04-01", "R-200")):
        response = client.post(
            "/payments",
            json={
                "client_id": finalized_client.id,
                "amount": "100",
                "payment_date": payment_date,
                "payment_type": method_id,
                "receipt_number": receipt,
            },
        )
        assert response.status_code == 201, response.text

    response = client.get("/payments", params={"period": "2024-03"})
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["receipt_number"] == "R-100"

    response = client.get("/payments", params={"search": "r-200"})
    assert [item["receipt_number"] for item in response.json()["items"]] == ["R-200"]

    response = client.get("/payments", params={"search": "juan"})
    assert response.json()["total"] == 2

    summary = client.get("/payments/summary", params={"period": "2024-04"})
    assert summary.status_code == 200, summary.text
    summary_data = summary.json()
    assert summary_data["period"] == "2024-04"
    assert summary_data["count"] == 1
    assert Decimal(str(summary_data["total"])) == Decimal("100.00")
    assert Decimal(str(summary_data["average"])) == Decimal("100.00")


def test_payment_listing_rejects_malformed_period(client):
    response = client.get("/payments", params={"period": "2025/12"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid period key format, expected YYYY-MM"


def test_payment_listing_rejects_out_of_range_month(client):
    response = client.get("/payments", params={"period": "2025-13"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid period key format, expected YYYY-MM"


def test_empty_summary_has_zero_average(client):
    response = client.get("/payments/summary", params={"period": "2030-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 0
    assert Decimal(str(data["average"])) == Decimal("0.00")


def test_payment_listing_returns_cors_headers_on_failure(client, monkeypatch):
    def fail_listing(*_args, **_kwargs):
        raise SQLAlchemyError("boom")

    monkeypatch.setattr(
        "backend.app.services.payments.PaymentService.list_payments",
        fail_listing,
    )

    response = client.get("/payments", headers={"Origin": LOCAL_DEVELOPMENT_ORIGIN})

    assert response.status_code == 500
    assert response.headers.get("access-control-allow-origin") == LOCAL_DEVELOPMENT_ORIGIN
    assert (
        response.json()["detail"]
        == "No se pudieron cargar los pagos. Inténtalo de nuevo más tarde."
    )


def test_get_unknown_payment_returns_404(client):
    response = client.get("/payments/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404


def test_payment_without_date_uses_billing_timezone_day(client, finalized_client, monkeypatch):
    monkeypatch.setattr(
        "backend.app.services.payments.billing_today", lambda: date(2024, 2, 29)
    )

    response = client.post(
        "/payments",
        json={
            "client_id": finalized_client.id,
            "amount": "100.00",
            "payment_type": _method_id(client),
        },
    )

    assert response.status_code == 201, response.text
    assert response.json()["payment_date"] == "2024-02-29"
