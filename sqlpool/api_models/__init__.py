from .common import (  # noqa: F401
    DTU_EDITIONS,
    ARMErrorDetailModel,
    ARMErrorModel,
    AsyncOperationModel,
    DatabaseEdition,
    PerDatabaseSettingsModel,
    SkuModel,
)
from .elastic_pool import (  # noqa: F401
    ELASTIC_POOL_SKU_NAME_POSTFIX,
    DtuSizing,
    ElasticPoolCreateModel,
    ElasticPoolModel,
    ElasticPoolResourceModel,
    ElasticPoolResult,
    ElasticPoolSizing,
    ElasticPoolSpec,
    ElasticPoolSpecResult,
    VcoreSizing,
)
from .server import ServerModel  # noqa: F401
