from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DatabaseEdition(str, Enum):
    none = "None"
    premium = "Premium"
    basic = "Basic"
    standard = "Standard"
    data_warehouse = "DataWarehouse"
    stretch = "Stretch"
    free = "Free"
    premium_rs = "PremiumRS"
    general_purpose = "GeneralPurpose"
    business_critical = "BusinessCritical"


DTU_EDITIONS = frozenset(
    (DatabaseEdition.basic.value, DatabaseEdition.standard.value, DatabaseEdition.premium.value)
)


class ARMBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SkuModel(ARMBaseModel):
    name: str
    tier: Optional[str] = None
    capacity: Optional[int] = None
    family: Optional[str] = None
    size: Optional[str] = None


class PerDatabaseSettingsModel(ARMBaseModel):
    min_capacity: Optional[float] = Field(alias="minCapacity", default=None)
    max_capacity: Optional[float] = Field(alias="maxCapacity", default=None)


# error responses of the management API


class ARMErrorDetailModel(BaseModel):
    code: Optional[str] = None
    message: str
    model_config = ConfigDict(extra="allow")


class ARMErrorModel(BaseModel):
    error: ARMErrorDetailModel


class AsyncOperationModel(BaseModel):
    status: str
    error: Optional[ARMErrorDetailModel] = None
    model_config = ConfigDict(extra="allow")
