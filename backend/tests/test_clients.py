from __future__ import annotations

from decimal import Decimal

from backend.app import models


def test_list_clients_with_search_and_status(client, finalized_client):
    response = client.get("/clients", params={"search": "juan"})

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == finalized_client.id
    assert data["items"][0]["full_name"] == "Juan Pérez"

    response = client.get("/clients", params={"status": "cancelled"})
    assert response.json()["total"] == 0


def test_get_client_includes_billing_and_charges(client, finalized_client):
    response = client.get(f"/clients/{finalized_client.id}")

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "active"
    assert Decimal(str(data["billing"]["balance"])) == Decimal("380.00")
    assert data["billing"]["first_billing_date"] == "2024-02-10"
    assert len(data["charges"]) == 2
    assert data["equipment"] == []


def test_get_unknown_client_returns_404(client):
    response = client.get("/clients/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["detail"] == "Cliente no encontrado"


def test_update_client_normalizes_phone(client, finalized_client):
    response = client.put(
        f"/clients/{finalized_client.id}",
        json={"phone1": "2229998877", "interior_number": "  "},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["phone1"] == "222-999-8877"
    assert data["interior_number"] is None


def test_update_client_rejects_clearing_required_field(client, finalized_client):
    response = client.put(f"/clients/{finalized_client.id}", json={"street": None})

    assert response.status_code == 409


def test_update_equipment_creates_then_updates_record(client, db_session, finalized_client):
    response = client.put(
        f"/clients/{finalized_client.id}/equipment",
        json={"antenna_ip": "10.0.0.5", "antenna_mac": "a1b2c3d4e5f6"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["antenna_mac"] == "A1:B2:C3:D4:E5:F6"

    response = client.put(
        f"/clients/{finalized_client.id}/equipment",
        json={"router_mac": "01-23-45-67-89-ab"},
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["antenna_ip"] == "10.0.0.5"
    assert data["router_mac"] == "01:23:45:67:89:AB"

    db_session.expire_all()
    equipment = (
        db_session.query(models.Equipment)
        .filter(models.Equipment.client_id == finalized_client.id)
        .all()
    )
    assert len(equipment) == 1


def test_update_equipment_rejects_short_mac(client, finalized_client):
    response = client.put(
        f"/clients/{finalized_client.id}/equipment", json={"antenna_mac": "AA:BB"}
    )

    assert response.status_code == 422


def test_cancel_client_blocks_further_edits(client, finalized_client):
    response = client.post(
        f"/clients/{finalized_client.id}/cancel", json={"reason": "Se mudó de ciudad"}
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["cancellation_reason"] == "Se mudó de ciudad"

    assert client.post(
        f"/clients/{finalized_client.id}/cancel", json={"reason": "otra vez"}
    ).status_code == 409
    assert client.put(
        f"/clients/{finalized_client.id}", json={"notes": "nota"}
    ).status_code == 409


def test_billing_statement_reports_pending_total(client, finalized_client):
    response = client.get(f"/clients/{finalized_client.id}/billing")

    assert response.status_code == 200, response.text
    data = response.json()
    assert Decimal(str(data["pending_total"])) == Decimal("380.00")
    assert {charge["description"] for charge in data["charges"]} == {
        "Prorrateo 8 día(s) hasta 2024-02-10",
        "Mensualidad Febrero 2024",
    }
