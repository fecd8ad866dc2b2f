"""Service layer encapsulating business logic for API routers."""

from .billing import (
    ProrationResult,
    calculate_initial_balance,
    calculate_proration,
    format_currency,
    monthly_charge_description,
)
from .billing_periods import BillingPeriod, BillingPeriodService
from .cities import CityService, CityServiceError
from .clients import ClientService, ClientServiceError
from .monthly_charges import (
    MonthlyChargeError,
    MonthlyChargeService,
    start_monthly_charge_scheduler,
    stop_monthly_charge_scheduler,
)
from .payments import PaymentService, PaymentServiceError
from .prospects import FinalizeResult, ProspectService, ProspectServiceError, ProspectStateError
from .scheduled_services import ScheduledServiceError, ScheduledServiceService
from .service_plans import ServicePlanError, ServicePlanService

__all__ = [
    "BillingPeriod",
    "BillingPeriodService",
    "CityService",
    "CityServiceError",
    "ClientService",
    "ClientServiceError",
    "FinalizeResult",
    "MonthlyChargeError",
    "MonthlyChargeService",
    "PaymentService",
    "PaymentServiceError",
    "ProrationResult",
    "ProspectService",
    "ProspectServiceError",
    "ProspectStateError",
    "ScheduledServiceError",
    "ScheduledServiceService",
    "ServicePlanError",
    "ServicePlanService",
    "calculate_initial_balance",
    "calculate_proration",
    "format_currency",
    "monthly_charge_description",
    "start_monthly_charge_scheduler",
    "stop_monthly_charge_scheduler",
]
