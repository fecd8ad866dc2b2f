from __future__ import annotations

from datetime import date
from decimal import Decimal
import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ENABLE_MONTHLY_CHARGES", "0")

from backend.app.database import Base, get_db
from backend.app.main import app
from backend.app import models


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture
def client(db_session: Session, monkeypatch) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    monkeypatch.setattr("backend.app.main.ensure_database_is_ready", lambda: None)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def service_plan(db_session: Session) -> models.ServicePlan:
    plan = models.ServicePlan(
        name="Internet 10 Mbps",
        description="Plan residencial estándar",
        download_speed_mbps=Decimal("10"),
        upload_speed_mbps=Decimal("2"),
        monthly_price=Decimal("300"),
        status=models.ServicePlanStatus.ACTIVE,
    )
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture
def prospect_payload() -> dict:
    return {
        "first_name": "María",
        "last_name_paterno": "López",
        "last_name_materno": "Ruiz",
        "phone1": "5512345678",
        "phone1_country": "MX",
        "street": "Av. Juárez",
        "exterior_number": "120",
        "neighborhood": "Centro",
        "city": "Tlaxcala",
        "postal_code": "90000",
        "ssid": "LOPEZ_WIFI",
        "antenna_ip": "192.168.10.20",
    }


@pytest.fixture
def pending_prospect(db_session: Session, prospect_payload: dict) -> models.Prospect:
    data = dict(prospect_payload)
    data["phone1"] = "551-234-5678"
    prospect = models.Prospect(**data, status=models.ProspectStatus.PENDING)
    db_session.add(prospect)
    db_session.commit()
    db_session.refresh(prospect)
    return prospect


@pytest.fixture
def finalize_payload(prospect_payload: dict):
    """Return a factory producing finalize requests for the sample prospect."""

    def _build(**overrides) -> dict:
        payload = {
            **prospect_payload,
            "installation_date": "2024-02-15",
            "billing_day": 10,
            "monthly_fee": "300",
            "installation_cost": "500",
            "antenna_mac": "aa:bb:cc:dd:ee:ff",
            "router_mac": "112233445566",
            "changed_by": "tecnico1",
            "confirmation_code": "CONFIRMAR",
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def finalized_client(db_session: Session) -> models.Client:
    """Active client with billing as left by a finalization in February 2024."""

    client = models.Client(
        first_name="Juan",
        last_name_paterno="Pérez",
        phone1="222-111-3344",
        street="Calle 5",
        exterior_number="10",
        neighborhood="San José",
        city="Apizaco",
        status=models.ClientStatus.ACTIVE,
    )
    db_session.add(client)
    db_session.flush()

    db_session.add(
        models.ClientBilling(
            client_id=client.id,
            monthly_fee=Decimal("300"),
            installation_cost=Decimal("0"),
            installation_date=date(2024, 2, 2),
            first_billing_date=date(2024, 2, 10),
            billing_day=10,
            prorated_amount=Decimal("80.00"),
            days_charged=8,
            additional_charges=Decimal("0"),
            balance=Decimal("380.00"),
        )
    )
    db_session.add_all(
        [
            models.ClientCharge(
                client_id=client.id,
                description="Prorrateo 8 día(s) hasta 2024-02-10",
                amount=Decimal("80.00"),
                status=models.ChargeStatus.PENDING,
                due_date=date(2024, 2, 10),
            ),
            models.ClientCharge(
                client_id=client.id,
                description="Mensualidad Febrero 2024",
                amount=Decimal("300.00"),
                status=models.ChargeStatus.PENDING,
                due_date=date(2024, 2, 10),
            ),
        ]
    )
    db_session.commit()
    db_session.refresh(client)
    return client
