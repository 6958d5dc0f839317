"""Create Azure SQL elastic pools.

Creating a pool runs these stages in order:

1. validate: convert and check tags, before anything is sent to the service
2. check: make sure no pool with the same name exists on the server
3. construct: look up the server location and build the pool spec
4. persist: submit the spec and return the resulting pool

`prepare_elastic_pool()` runs the first three stages, which lets callers
inspect what would be created without creating it.
"""

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from .api_models import (
    ELASTIC_POOL_SKU_NAME_POSTFIX,
    DatabaseEdition,
    DtuSizing,
    ElasticPoolCreateModel,
    ElasticPoolModel,
    ElasticPoolSizing,
    ElasticPoolSpec,
    PerDatabaseSettingsModel,
    SkuModel,
    VcoreSizing,
)
from .client import SqlManagementClient
from .exceptions import ElasticPoolExistsError, SqlPoolValidationError
from .tags import create_tag_dictionary
from .util import megabytes_to_bytes

log = logging.getLogger(__name__)


# Parameter sets


def select_sizing(
    *,
    edition: Optional[DatabaseEdition] = None,
    dtu: Optional[int] = None,
    database_dtu_min: Optional[int] = None,
    database_dtu_max: Optional[int] = None,
    vcore: Optional[int] = None,
    requested_sku_name: Optional[str] = None,
) -> ElasticPoolSizing:
    """Select the sizing parameter set from the parameters which are set.

    Setting any of the vCore parameters selects vCore-based sizing, which
    needs all of them and excludes the DTU parameters. Otherwise, the pool
    is sized by DTU.
    """
    dtu_params = {
        "dtu": dtu,
        "database_dtu_min": database_dtu_min,
        "database_dtu_max": database_dtu_max,
    }
    vcore_params = {"vcore": vcore, "requested_sku_name": requested_sku_name}

    bound_dtu_params = [name for name, value in dtu_params.items() if value is not None]
    bound_vcore_params = [name for name, value in vcore_params.items() if value is not None]

    try:
        if not bound_vcore_params:
            return DtuSizing(edition=edition, **dtu_params)

        if bound_dtu_params:
            raise SqlPoolValidationError(
                f"DTU-based parameters ({', '.join(bound_dtu_params)}) can't be combined with"
                f" vCore-based parameters ({', '.join(bound_vcore_params)})."
            )

        missing_vcore_params = [name for name, value in vcore_params.items() if value is None]
        if missing_vcore_params:
            raise SqlPoolValidationError(
                f"vCore-based pools need all of: {', '.join(vcore_params)}"
                f" (missing: {', '.join(missing_vcore_params)})."
            )

        return VcoreSizing(edition=edition, vcore=vcore, requested_sku_name=requested_sku_name)
    except ValidationError as exc:
        raise SqlPoolValidationError(str(exc)) from exc


def build_sku(sizing: ElasticPoolSizing) -> Optional[SkuModel]:
    if isinstance(sizing, VcoreSizing):
        return SkuModel(
            name=sizing.requested_sku_name,
            tier=sizing.edition.value if sizing.edition else None,
            capacity=sizing.vcore,
        )
    elif isinstance(sizing, DtuSizing):
        if sizing.edition is None:
            return None
        return SkuModel(
            name=f"{sizing.edition.value}{ELASTIC_POOL_SKU_NAME_POSTFIX}",
            tier=sizing.edition.value,
            capacity=sizing.dtu,
        )
    else:
        raise TypeError(f"Unknown sizing: {sizing!r}")


def build_per_database_settings(sizing: ElasticPoolSizing) -> PerDatabaseSettingsModel:
    if isinstance(sizing, VcoreSizing):
        return PerDatabaseSettingsModel()
    elif isinstance(sizing, DtuSizing):
        return PerDatabaseSettingsModel(
            min_capacity=sizing.database_dtu_min, max_capacity=sizing.database_dtu_max
        )
    else:
        raise TypeError(f"Unknown sizing: {sizing!r}")


# Stages


def validate_tags(params: ElasticPoolCreateModel) -> Optional[Dict[str, str]]:
    return create_tag_dictionary(params.tags, validate=True)


def check_elastic_pool_absent(
    client: SqlManagementClient,
    resource_group_name: str,
    server_name: str,
    elastic_pool_name: str,
):
    """Ensure that the elastic pool doesn't exist yet.

    :raises ElasticPoolExistsError: if the pool exists
    :raises SqlPoolAPIError: if looking up the pool fails for other reasons
    """
    if client.elastic_pool_exists(resource_group_name, server_name, elastic_pool_name):
        raise ElasticPoolExistsError(elastic_pool_name, server_name)

    log.debug(
        "Elastic pool %s not found on server %s, can be created", elastic_pool_name, server_name
    )


def build_elastic_pool_spec(
    client: SqlManagementClient,
    params: ElasticPoolCreateModel,
    tags: Optional[Dict[str, str]],
) -> ElasticPoolSpec:
    location = client.get_server_location(params.resource_group_name, params.server_name)

    return ElasticPoolSpec(
        resource_group_name=params.resource_group_name,
        server_name=params.server_name,
        elastic_pool_name=params.elastic_pool_name,
        location=location,
        tags=tags,
        zone_redundant=params.zone_redundant,
        max_size_bytes=(
            megabytes_to_bytes(params.storage_mb) if params.storage_mb is not None else None
        ),
        sku=build_sku(params.sizing),
        per_database_settings=build_per_database_settings(params.sizing),
    )


def persist_elastic_pool(client: SqlManagementClient, spec: ElasticPoolSpec) -> ElasticPoolModel:
    log.info(
        "Creating elastic pool %s on server %s in %s",
        spec.elastic_pool_name,
        spec.server_name,
        spec.location,
    )
    return client.upsert_elastic_pool(spec)


# Entry points


def prepare_elastic_pool(
    client: SqlManagementClient, params: ElasticPoolCreateModel
) -> ElasticPoolSpec:
    """Validate, check and construct the spec of a new elastic pool."""
    tags = validate_tags(params)
    check_elastic_pool_absent(
        client, params.resource_group_name, params.server_name, params.elastic_pool_name
    )
    spec = build_elastic_pool_spec(client, params, tags)
    log.debug("Elastic pool spec: %r", spec)
    return spec


def create_elastic_pool(
    client: SqlManagementClient, params: ElasticPoolCreateModel
) -> ElasticPoolModel:
    """Create a new elastic pool, refusing to overwrite an existing one."""
    spec = prepare_elastic_pool(client, params)
    return persist_elastic_pool(client, spec)
