"""Routers package."""

from .billing import router as billing_router
from .cities import router as cities_router
from .clients import router as clients_router
from .metrics import router as metrics_router
from .payments import router as payments_router
from .prospects import router as prospects_router
from .scheduled_services import router as scheduled_services_router
from .service_plans import router as service_plans_router

__all__ = [
    "billing_router",
    "cities_router",
    "clients_router",
    "metrics_router",
    "payments_router",
    "prospects_router",
    "scheduled_services_router",
    "service_plans_router",
]
