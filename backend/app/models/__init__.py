"""Expose SQLAlchemy models for convenient imports."""

from .city import City
from .client import Client, ClientStatus
from .client_billing import ClientBilling
from .client_charge import ChargeStatus, ClientCharge
from .equipment import Equipment
from .payment import Bank, Payment, PaymentMethod
from .prospect import Prospect, ProspectChangeHistory, ProspectStatus
from .scheduled_service import ScheduledService, VisitStatus, VisitType
from .service_plan import ServicePlan, ServicePlanStatus

__all__ = [
    "Bank",
    "ChargeStatus",
    "City",
    "Client",
    "ClientBilling",
    "ClientCharge",
    "ClientStatus",
    "Equipment",
    "Payment",
    "PaymentMethod",
    "Prospect",
    "ProspectChangeHistory",
    "ProspectStatus",
    "ScheduledService",
    "ServicePlan",
    "ServicePlanStatus",
    "VisitStatus",
    "VisitType",
]
