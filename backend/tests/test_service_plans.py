from decimal import Decimal

from backend.app import models


def test_list_service_plans_creates_defaults(client):
    response = client.get("/service-plans")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [item["name"] for item in data["items"]] == [
        "Internet 5 Mbps",
        "Internet 10 Mbps",
        "Internet 20 Mbps",
    ]
    basic = data["items"][0]
    assert Decimal(str(basic["monthly_price"])) == Decimal("300")
    assert Decimal(str(basic["download_speed_mbps"])) == Decimal("5")
    assert basic["status"] == models.ServicePlanStatus.ACTIVE.value


def test_create_and_update_service_plan(client, db_session):
    payload = {
        "name": "Internet Plus",
        "monthly_price": 250,
        "description": "Plan económico",
        "download_speed_mbps": 8,
        "upload_speed_mbps": 2,
        "status": models.ServicePlanStatus.ACTIVE.value,
    }
    response = client.post("/service-plans", json=payload)
    assert response.status_code == 201, response.json()
    created = response.json()
    assert created["name"] == "Internet Plus"
    assert Decimal(str(created["monthly_price"])) == Decimal("250")

    plan_id = created["id"]
    update_response = client.put(
        f"/service-plans/{plan_id}",
        json={
            "monthly_price": 275,
            "status": models.ServicePlanStatus.INACTIVE.value,
        },
    )
    assert update_response.status_code == 200
    updated = update_response.json()
    assert Decimal(str(updated["monthly_price"])) == Decimal("275")
    assert updated["status"] == models.ServicePlanStatus.INACTIVE.value

    active = client.get("/service-plans", params={"include_inactive": False}).json()
    assert "Internet Plus" not in {item["name"] for item in active["items"]}

    delete_response = client.delete(f"/service-plans/{plan_id}")
    assert delete_response.status_code == 204
    assert client.get(f"/service-plans/{plan_id}").status_code == 404


def test_create_service_plan_rejects_negative_price(client):
    response = client.post("/service-plans", json={"name": "Gratis", "monthly_price": -1})

    assert response.status_code == 422


def test_delete_plan_assigned_to_client_conflicts(
    client, db_session, service_plan, finalized_client
):
    finalized_client.billing.service_plan_id = service_plan.id
    db_session.commit()

    response = client.delete(f"/service-plans/{service_plan.id}")

    assert response.status_code == 409
