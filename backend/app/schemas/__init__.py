"""Expose Pydantic schemas for convenient imports."""

from .billing import (
    AdditionalChargeIn,
    ClientBillingRead,
    ClientBillingStatement,
    ClientChargeRead,
    MonthlyChargeRunRequest,
    MonthlyChargeSummary,
    ProrationPreview,
    ProrationRead,
    ProrationRequest,
)
from .city import CityCreate, CityRead, CityUpdate
from .client import (
    ClientDetail,
    ClientListResponse,
    ClientRead,
    ClientUpdate,
    EquipmentRead,
    EquipmentUpdate,
)
from .common import EquipmentFields, PaginatedResponse
from .payment import (
    BankCreate,
    BankRead,
    PaymentClientSummary,
    PaymentCreate,
    PaymentListResponse,
    PaymentMethodCreate,
    PaymentMethodRead,
    PaymentMonthlySummary,
    PaymentRead,
)
from .prospect import (
    FINALIZE_CONFIRMATION_CODE,
    CancellationRequest,
    FinalizedClientSummary,
    ProspectChangeRead,
    ProspectCreate,
    ProspectFinalizeRequest,
    ProspectFinalizeResponse,
    ProspectListResponse,
    ProspectRead,
    ProspectUpdate,
)
from .scheduled_service import (
    CalendarMonthResponse,
    ScheduleGridDay,
    ScheduleGridResponse,
    ScheduledServiceCreate,
    ScheduledServiceListResponse,
    ScheduledServiceRead,
    ScheduledServiceUpdate,
    StatusCounts,
    VisitCompleteRequest,
    VisitStartRequest,
    VisitsReportResponse,
    VisitsReportStats,
)
from .service_plan import (
    ServicePlanBase,
    ServicePlanCreate,
    ServicePlanListResponse,
    ServicePlanRead,
    ServicePlanUpdate,
)

__all__ = [
    "AdditionalChargeIn",
    "BankCreate",
    "BankRead",
    "CalendarMonthResponse",
    "CancellationRequest",
    "CityCreate",
    "CityRead",
    "CityUpdate",
    "ClientBillingRead",
    "ClientBillingStatement",
    "ClientChargeRead",
    "ClientDetail",
    "ClientListResponse",
    "ClientRead",
    "ClientUpdate",
    "EquipmentFields",
    "EquipmentRead",
    "EquipmentUpdate",
    "FINALIZE_CONFIRMATION_CODE",
    "FinalizedClientSummary",
    "MonthlyChargeRunRequest",
    "MonthlyChargeSummary",
    "PaginatedResponse",
    "PaymentClientSummary",
    "PaymentCreate",
    "PaymentListResponse",
    "PaymentMethodCreate",
    "PaymentMethodRead",
    "PaymentMonthlySummary",
    "PaymentRead",
    "ProrationPreview",
    "ProrationRead",
    "ProrationRequest",
    "ProspectChangeRead",
    "ProspectCreate",
    "ProspectFinalizeRequest",
    "ProspectFinalizeResponse",
    "ProspectListResponse",
    "ProspectRead",
    "ProspectUpdate",
    "ScheduleGridDay",
    "ScheduleGridResponse",
    "ScheduledServiceCreate",
    "ScheduledServiceListResponse",
    "ScheduledServiceRead",
    "ScheduledServiceUpdate",
    "ServicePlanBase",
    "ServicePlanCreate",
    "ServicePlanListResponse",
    "ServicePlanRead",
    "ServicePlanUpdate",
    "StatusCounts",
    "VisitCompleteRequest",
    "VisitStartRequest",
    "VisitsReportResponse",
    "VisitsReportStats",
]
