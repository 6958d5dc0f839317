from abc import ABC
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from ..util import MEGABYTES
from .common import (
    DTU_EDITIONS,
    ARMBaseModel,
    DatabaseEdition,
    PerDatabaseSettingsModel,
    SkuModel,
)

ELASTIC_POOL_SKU_NAME_POSTFIX = "Pool"

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeInt = Annotated[int, Field(ge=0)]

# sizing parameter sets


class SizingBase(BaseModel, ABC):
    edition: Optional[DatabaseEdition] = None
    model_config = ConfigDict(extra="forbid", frozen=True)


class DtuSizing(SizingBase):
    """Size a pool by its total shared DTU."""

    kind: Literal["dtu"] = "dtu"
    dtu: Optional[NonNegativeInt] = None
    database_dtu_min: Optional[NonNegativeInt] = None
    database_dtu_max: Optional[NonNegativeInt] = None


class VcoreSizing(SizingBase):
    """Size a pool by vCores of a compute generation, e.g. 'GP_Gen5'."""

    kind: Literal["vcore"] = "vcore"
    vcore: Annotated[int, Field(gt=0)]
    requested_sku_name: NonEmptyStr


ElasticPoolSizing = Annotated[Union[DtuSizing, VcoreSizing], Field(discriminator="kind")]


# user input


class ElasticPoolCreateModel(BaseModel):
    resource_group_name: NonEmptyStr
    server_name: NonEmptyStr
    elastic_pool_name: NonEmptyStr
    sizing: ElasticPoolSizing = Field(default_factory=DtuSizing)
    storage_mb: Optional[NonNegativeInt] = None
    # unvalidated (name, value) pairs, see sqlpool.tags
    tags: Optional[List[Tuple[str, str]]] = None
    zone_redundant: Optional[bool] = None
    model_config = ConfigDict(extra="forbid", frozen=True)


# ARM resource representation


class ElasticPoolPropertiesModel(ARMBaseModel):
    state: Optional[str] = None
    creation_date: Optional[datetime] = Field(alias="creationDate", default=None)
    max_size_bytes: Optional[int] = Field(alias="maxSizeBytes", default=None)
    per_database_settings: Optional[PerDatabaseSettingsModel] = Field(
        alias="perDatabaseSettings", default=None
    )
    zone_redundant: Optional[bool] = Field(alias="zoneRedundant", default=None)
    license_type: Optional[str] = Field(alias="licenseType", default=None)
    model_config = ConfigDict(extra="allow")


class ElasticPoolResourceModel(ARMBaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    location: str
    kind: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    sku: Optional[SkuModel] = None
    properties: ElasticPoolPropertiesModel = Field(default_factory=ElasticPoolPropertiesModel)


# request


class ElasticPoolSpec(BaseModel):
    """The elastic pool as it will be submitted to the management API.

    Fields which are None weren't specified by the user and are left out of
    the request body, so the service applies its own defaults.
    """

    resource_group_name: str
    server_name: str
    elastic_pool_name: str
    location: str
    tags: Optional[Dict[str, str]] = None
    zone_redundant: Optional[bool] = None
    max_size_bytes: Optional[int] = None
    sku: Optional[SkuModel] = None
    per_database_settings: Optional[PerDatabaseSettingsModel] = None
    model_config = ConfigDict(frozen=True)

    def request_body(self) -> Dict[str, Any]:
        resource = ElasticPoolResourceModel(
            location=self.location,
            tags=self.tags,
            sku=self.sku,
            properties=ElasticPoolPropertiesModel(
                max_size_bytes=self.max_size_bytes,
                zone_redundant=self.zone_redundant,
                per_database_settings=self.per_database_settings,
            ),
        )
        return resource.model_dump(mode="json", by_alias=True, exclude_none=True)


# result


class ElasticPoolModel(BaseModel):
    resource_group_name: str
    server_name: str
    elastic_pool_name: str
    location: str
    elastic_pool_id: Optional[str] = None
    kind: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    sku: Optional[SkuModel] = None
    edition: Optional[str] = None
    sku_name: Optional[str] = None
    family: Optional[str] = None
    capacity: Optional[int] = None
    dtu: Optional[int] = None
    state: Optional[str] = None
    creation_date: Optional[datetime] = None
    max_size_bytes: Optional[int] = None
    storage_mb: Optional[int] = None
    zone_redundant: Optional[bool] = None
    database_capacity_min: Optional[float] = None
    database_capacity_max: Optional[float] = None
    license_type: Optional[str] = None

    @classmethod
    def from_resource(
        cls,
        resource: ElasticPoolResourceModel,
        *,
        resource_group_name: str,
        server_name: str,
        elastic_pool_name: str,
    ) -> "ElasticPoolModel":
        props = resource.properties
        sku = resource.sku
        per_db = props.per_database_settings or PerDatabaseSettingsModel()

        edition = sku.tier if sku else None
        capacity = sku.capacity if sku else None

        return cls(
            resource_group_name=resource_group_name,
            server_name=server_name,
            elastic_pool_name=resource.name or elastic_pool_name,
            location=resource.location,
            elastic_pool_id=resource.id,
            kind=resource.kind,
            tags=resource.tags,
            sku=sku,
            edition=edition,
            sku_name=sku.name if sku else None,
            family=sku.family if sku else None,
            capacity=capacity,
            dtu=capacity if edition in DTU_EDITIONS else None,
            state=props.state,
            creation_date=props.creation_date,
            max_size_bytes=props.max_size_bytes,
            storage_mb=(
                props.max_size_bytes // MEGABYTES if props.max_size_bytes is not None else None
            ),
            zone_redundant=props.zone_redundant,
            database_capacity_min=per_db.min_capacity,
            database_capacity_max=per_db.max_capacity,
            license_type=props.license_type,
        )


# results reported on the command line


class ElasticPoolResult(BaseModel):
    elastic_pool: ElasticPoolModel


class ElasticPoolSpecResult(BaseModel):
    elastic_pool_spec: ElasticPoolSpec
