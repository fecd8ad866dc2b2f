from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.service_plan import ServicePlanStatus
from .common import PaginatedResponse


class ServicePlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    monthly_price: Decimal = Field(default=Decimal("0"), ge=0)
    description: Optional[str] = None
    download_speed_mbps: Optional[Decimal] = Field(default=None, gt=0)
    upload_speed_mbps: Optional[Decimal] = Field(default=None, gt=0)
    status: ServicePlanStatus = ServicePlanStatus.ACTIVE


class ServicePlanCreate(ServicePlanBase):
    pass


class ServicePlanUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    monthly_price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    download_speed_mbps: Optional[Decimal] = Field(default=None, gt=0)
    upload_speed_mbps: Optional[Decimal] = Field(default=None, gt=0)
    status: Optional[ServicePlanStatus] = None


class ServicePlanRead(ServicePlanBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServicePlanListResponse(PaginatedResponse[ServicePlanRead]):
    pass
