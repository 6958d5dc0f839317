from enum import Enum
from typing import Literal, Optional, Union

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field
from typing_extensions import Annotated

# enums


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


# Pydantic models


class ConfigBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LoggingModel(ConfigBaseModel):
    # Passed on to logging.config.dictConfig(), i.e. can contain arbitrarily named fields.
    version: Literal[1]
    model_config = ConfigDict(extra="allow")


class ClientAuthModel(ConfigBaseModel):
    token: Optional[str] = None


class ClientModel(ConfigBaseModel):
    url: Optional[AnyHttpUrl] = None
    subscription_id: Optional[str] = Field(alias="subscription-id", default=None)
    api_version: Optional[str] = Field(alias="api-version", default=None)
    timeout: Optional[Union[Annotated[int, Field(gt=0)], Annotated[float, Field(gt=0)]]] = None
    poll_interval: Optional[
        Union[Annotated[int, Field(ge=0)], Annotated[float, Field(ge=0)]]
    ] = Field(alias="poll-interval", default=None)
    auth: Optional[ClientAuthModel] = None


class DefaultsModel(ConfigBaseModel):
    resource_group: Optional[str] = Field(alias="resource-group", default=None)
    server: Optional[str] = None


class ConfigModel(ConfigBaseModel):
    client: Optional[ClientModel] = None
    defaults: Optional[DefaultsModel] = None
    loglevel: Optional[LogLevel] = None
    logging: Optional[LoggingModel] = None
