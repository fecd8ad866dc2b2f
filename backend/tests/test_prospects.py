from __future__ import annotations

from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from backend.app import models
from backend.app.services.prospects import ProspectService


def test_create_prospect_normalizes_phone(client, prospect_payload):
    response = client.post("/prospects", json=prospect_payload)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["phone1"] == "551-234-5678"
    assert data["status"] == models.ProspectStatus.PENDING.value
    assert data["full_name"] == "María López Ruiz"


def test_create_prospect_rejects_incomplete_phone(client, prospect_payload):
    response = client.post("/prospects", json={**prospect_payload, "phone1": "55123"})

    assert response.status_code == 422


def test_create_prospect_rejects_invalid_antenna_ip(client, prospect_payload):
    response = client.post("/prospects", json={**prospect_payload, "antenna_ip": "300.1.1.1"})

    assert response.status_code == 422


def test_list_prospects_filters_by_status_and_search(client, pending_prospect, db_session):
    cancelled = models.Prospect(
        first_name="Pedro",
        last_name_paterno="Sánchez",
        phone1="222-333-4444",
        street="Calle 1",
        exterior_number="2",
        neighborhood="Norte",
        city="Apizaco",
        status=models.ProspectStatus.CANCELLED,
    )
    db_session.add(cancelled)
    db_session.commit()

    response = client.get("/prospects", params={"status": "pending"})
    assert response.status_code == 200
    names = [item["first_name"] for item in response.json()["items"]]
    assert "María" in names
    assert "Pedro" not in names

    response = client.get("/prospects", params={"search": "ruiz"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == pending_prospect.id

    response = client.get("/prospects", params={"city": "apizaco"})
    assert [item["id"] for item in response.json()["items"]] == [cancelled.id]


def test_get_unknown_prospect_returns_404(client):
    response = client.get("/prospects/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["detail"] == "Prospecto no encontrado"


def test_update_prospect_rejects_null_required_field(client, pending_prospect):
    response = client.put(f"/prospects/{pending_prospect.id}", json={"first_name": None})

    assert response.status_code == 400


def test_cancel_and_reactivate_prospect(client, pending_prospect):
    response = client.post(
        f"/prospects/{pending_prospect.id}/cancel", json={"reason": "  No hay cobertura  "}
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["cancellation_reason"] == "No hay cobertura"
    assert data["cancelled_at"] is not None

    response = client.post(f"/prospects/{pending_prospect.id}/cancel", json={"reason": "otra vez"})
    assert response.status_code == 409

    response = client.post(f"/prospects/{pending_prospect.id}/reactivate")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pending"
    assert data["cancellation_reason"] is None


def test_cancel_prospect_requires_reason(client, pending_prospect):
    response = client.post(f"/prospects/{pending_prospect.id}/cancel", json={"reason": "   "})

    assert response.status_code == 422


def test_reactivate_pending_prospect_conflicts(client, pending_prospect):
    response = client.post(f"/prospects/{pending_prospect.id}/reactivate")

    assert response.status_code == 409


def test_finalize_prospect_creates_client_billing_and_charges(
    client, db_session, pending_prospect, finalize_payload
):
    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload()
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["message"] == "Prospecto finalizado y cliente creado correctamente"
    assert data["warnings"] == []
    assert data["changes_recorded"] == 0
    assert data["prospect"]["status"] == "finalized"
    assert data["prospect"]["finalized_at"] is not None
    assert data["client"]["status"] == "active"
    assert data["client"]["full_name"] == "María López Ruiz"

    assert data["proration"]["days_charged"] == 24
    assert data["proration"]["first_billing_date"] == "2024-03-10"
    assert Decimal(str(data["proration"]["prorated_amount"])) == Decimal("240.00")
    assert Decimal(str(data["initial_balance"])) == Decimal("1040.00")

    billing = data["billing"]
    assert billing["billing_day"] == 10
    assert billing["days_charged"] == 24
    assert Decimal(str(billing["monthly_fee"])) == Decimal("300.00")
    assert Decimal(str(billing["installation_cost"])) == Decimal("500.00")
    assert Decimal(str(billing["balance"])) == Decimal("1040.00")

    client_id = data["client"]["id"]
    db_session.expire_all()
    created = db_session.get(models.Client, client_id)
    assert created.prospect_id == pending_prospect.id
    assert created.created_by == "tecnico1"

    equipment = created.equipment
    assert len(equipment) == 1
    assert equipment[0].antenna_ssid == "LOPEZ_WIFI"
    assert equipment[0].antenna_ip == "192.168.10.20"
    assert equipment[0].antenna_mac == "AA:BB:CC:DD:EE:FF"
    assert equipment[0].router_mac == "11:22:33:44:55:66"

    charges = {charge.description: Decimal(charge.amount) for charge in created.charges}
    assert charges == {
        "Prorrateo 24 día(s) hasta 2024-03-10": Decimal("240.00"),
        "Costo de instalación": Decimal("500.00"),
        "Mensualidad Marzo 2024": Decimal("300.00"),
    }
    assert sum(charges.values()) == Decimal("1040.00")
    assert all(charge.status == models.ChargeStatus.PENDING for charge in created.charges)


def test_finalize_records_changed_fields_in_history(client, pending_prospect, finalize_payload):
    payload = finalize_payload(first_name="María José", phone2="2221234567")

    response = client.post(f"/prospects/{pending_prospect.id}/finalize", json=payload)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["changes_recorded"] == 2
    assert data["message"] == "Prospecto finalizado con 2 cambio(s) registrado(s) en historial"
    assert data["client"]["full_name"] == "María José López Ruiz"

    history = client.get(f"/prospects/{pending_prospect.id}/history").json()
    entries = {entry["field_name"]: entry for entry in history}
    assert set(entries) == {"Nombre", "Teléfono 2"}
    assert entries["Nombre"]["old_value"] == "María"
    assert entries["Nombre"]["new_value"] == "María José"
    assert entries["Teléfono 2"]["old_value"] is None
    assert entries["Teléfono 2"]["new_value"] == "222-123-4567"
    assert all(entry["client_id"] == data["client"]["id"] for entry in history)
    assert all(entry["changed_by"] == "tecnico1" for entry in history)


def test_finalize_uses_plan_price_when_fee_is_omitted(
    client, pending_prospect, finalize_payload, service_plan
):
    payload = finalize_payload(service_plan_id=service_plan.id, installation_cost="0")
    payload.pop("monthly_fee")

    response = client.post(f"/prospects/{pending_prospect.id}/finalize", json=payload)

    assert response.status_code == 200, response.text
    billing = response.json()["billing"]
    assert billing["service_plan_id"] == service_plan.id
    assert Decimal(str(billing["monthly_fee"])) == Decimal("300.00")
    assert Decimal(str(billing["balance"])) == Decimal("540.00")


def test_finalize_includes_additional_charges(client, pending_prospect, finalize_payload):
    payload = finalize_payload(
        installation_date="2024-02-10",
        installation_cost="0",
        additional_charges=[{"description": "Cable extra", "amount": "150"}],
    )

    response = client.post(f"/prospects/{pending_prospect.id}/finalize", json=payload)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["proration"]["days_charged"] == 0
    assert Decimal(str(data["billing"]["additional_charges"])) == Decimal("150.00")
    assert Decimal(str(data["initial_balance"])) == Decimal("450.00")

    statement = client.get(f"/clients/{data['client']['id']}/billing").json()
    descriptions = sorted(charge["description"] for charge in statement["charges"])
    assert descriptions == ["Cable extra", "Mensualidad Febrero 2024"]
    assert Decimal(str(statement["pending_total"])) == Decimal("450.00")


def test_finalize_rejects_wrong_confirmation_code(client, pending_prospect, finalize_payload):
    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize",
        json=finalize_payload(confirmation_code="confirmo"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Escribe CONFIRMAR para finalizar el prospecto."


def test_finalize_accepts_lowercase_confirmation_code(client, pending_prospect, finalize_payload):
    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize",
        json=finalize_payload(confirmation_code=" confirmar "),
    )

    assert response.status_code == 200, response.text


def test_finalize_rejects_unknown_plan(client, pending_prospect, finalize_payload):
    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize",
        json=finalize_payload(service_plan_id=9999),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "El plan de servicio seleccionado no existe."


def test_finalize_requires_fee_or_plan(client, pending_prospect, finalize_payload):
    payload = finalize_payload()
    payload.pop("monthly_fee")

    response = client.post(f"/prospects/{pending_prospect.id}/finalize", json=payload)

    assert response.status_code == 400


def test_finalize_twice_conflicts(client, pending_prospect, finalize_payload):
    first = client.post(f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload())
    assert first.status_code == 200, first.text

    second = client.post(f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload())

    assert second.status_code == 409
    assert second.json()["detail"] == "Solo se pueden finalizar prospectos pendientes."


def test_finalized_prospect_cannot_be_edited_or_deleted(client, pending_prospect, finalize_payload):
    client.post(f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload())

    assert client.put(
        f"/prospects/{pending_prospect.id}", json={"notes": "nuevo"}
    ).status_code == 409
    assert client.delete(f"/prospects/{pending_prospect.id}").status_code == 409


def test_finalize_keeps_client_when_equipment_fails(
    client, db_session, pending_prospect, finalize_payload, monkeypatch
):
    def fail_equipment(*_args, **_kwargs):
        raise SQLAlchemyError("equipment table unavailable")

    monkeypatch.setattr(ProspectService, "_create_equipment", staticmethod(fail_equipment))

    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload()
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["warnings"] == ["No se pudo registrar el equipo del cliente."]
    assert data["billing"] is not None

    db_session.expire_all()
    created = db_session.get(models.Client, data["client"]["id"])
    assert created is not None
    assert created.equipment == []
    assert len(created.charges) == 3


def test_finalize_keeps_client_when_billing_fails(
    client, db_session, pending_prospect, finalize_payload, monkeypatch
):
    def fail_billing(*_args, **_kwargs):
        raise SQLAlchemyError("billing table unavailable")

    monkeypatch.setattr(ProspectService, "_create_billing", staticmethod(fail_billing))

    response = client.post(
        f"/prospects/{pending_prospect.id}/finalize", json=finalize_payload()
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["warnings"] == ["No se pudo registrar la facturación ni los cargos iniciales."]
    assert data["billing"] is None
    assert data["prospect"]["status"] == "finalized"

    db_session.expire_all()
    created = db_session.get(models.Client, data["client"]["id"])
    assert created.billing is None
    assert len(created.equipment) == 1


def test_delete_pending_prospect(client, db_session, pending_prospect):
    prospect_id = pending_prospect.id

    response = client.delete(f"/prospects/{prospect_id}")

    assert response.status_code == 204
    db_session.expire_all()
    assert db_session.get(models.Prospect, prospect_id) is None
