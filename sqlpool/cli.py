import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
import httpx
import xdg.BaseDirectory
import yaml
from azure.core.exceptions import ClientAuthenticationError
from pydantic import ValidationError

from . import __version__
from .api_models import (
    DatabaseEdition,
    ElasticPoolCreateModel,
    ElasticPoolResult,
    ElasticPoolSpecResult,
)
from .client import SqlManagementClient, SqlPoolFormatter
from .configuration import config, config_default, read_configuration
from .configuration.validation import LogLevel
from .exceptions import SqlPoolConfigurationError, SqlPoolException, SqlPoolValidationError
from .operations import create_elastic_pool, prepare_elastic_pool, select_sizing

DEFAULT_CONFIG_LOCATIONS = ("/etc/sqlpool", f"{xdg.BaseDirectory.xdg_config_home}/sqlpool")
DEFAULT_CONFIG_PATHS = tuple(Path(loc) for loc in DEFAULT_CONFIG_LOCATIONS)

log = logging.getLogger(__name__)


# Custom Click parameter types


class TagType(click.ParamType):
    name = "tag"

    def convert(self, value, param, ctx):
        if value is None or isinstance(value, tuple):
            return value

        name, sep, tag_value = value.partition("=")
        if not name:
            self.fail(f"{value!r} lacks a tag name, use KEY=VALUE", param, ctx)

        return (name, tag_value)


TAG = TagType()


def setup_logging(loglevel: Optional[str]):
    if loglevel is None:
        loglevel = config.get("loglevel")

    logging_config = config.get("logging")
    if logging_config:
        logging.config.dictConfig(logging_config)
        if loglevel:
            logging.getLogger("sqlpool").setLevel(loglevel.upper())
    else:
        logging.basicConfig(level=loglevel.upper() if isinstance(loglevel, str) else loglevel)


# CLI groups and commands


@click.group(name="sqlpool")
@click.option(
    "-l",
    "--loglevel",
    "loglevel",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    help="Set the log level.",
    default=None,
)
@click.option(
    "config_paths",
    "-c",
    "--config",
    type=click.Path(exists=True),
    multiple=True,
    help=(
        "Read configuration from the specified YAML files or directories instead of the default"
        f" paths ({', '.join(DEFAULT_CONFIG_LOCATIONS)})"
    ),
    metavar="FILE_OR_DIR",
)
@click.version_option(version=__version__, prog_name="sqlpool")
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[str], config_paths: Tuple[Path]):
    ctx.ensure_object(dict)
    ctx.obj["loglevel"] = loglevel

    if not config_paths:
        # Ignore non-existent default paths
        config_paths = tuple(path for path in DEFAULT_CONFIG_PATHS if path.exists())

    try:
        read_configuration(*config_paths, clear=True, validate=True)
    except SqlPoolConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(loglevel)

    log.debug(f"Read configuration from: {', '.join(str(p) for p in config_paths)}")


# Check & dump configuration


@cli.group(name="config")
def config_subcmd():
    """Check and dump configuration."""


@config_subcmd.command(name="check")
def config_check():
    """Validate configuration structure.

    This checks if configuration subkeys conform to the expected format.
    However, it doesn't check if the sub-keys necessary to run a certain
    subcommand exist.
    """
    if not config:
        click.echo("Configuration is empty.")
    else:
        click.echo(f"OK.\nValidated configuration subkeys: {', '.join(config)}")


@config_subcmd.command("dump")
def config_dump():
    """Dump merged configuration."""
    yaml.safe_dump(config, sys.stdout)


# Client for the management API


@cli.group()
@click.option("--url", help="The base URL of the Azure Resource Manager API.")
@click.option("--subscription-id", help="The Azure subscription containing the SQL server.")
@click.option(
    "--access-token",
    help="A bearer token for the management API (obtained through azure-identity if unset).",
)
@click.option("--api-version", help="The version of the Microsoft.Sql management API.")
@click.option(
    "--format",
    type=click.Choice(list(SqlPoolFormatter._subclasses_for_format), case_sensitive=False),
    default="json",
    help="Format with which to print results.",
)
@click.pass_context
def client(
    ctx: click.Context,
    url: Optional[str],
    subscription_id: Optional[str],
    access_token: Optional[str],
    api_version: Optional[str],
    format: str,
):
    """Command line client for Azure SQL elastic pools."""
    ctx.ensure_object(dict)
    ctx.obj["client"] = SqlManagementClient(
        url=url, subscription_id=subscription_id, access_token=access_token, api_version=api_version
    )
    ctx.obj["formatter"] = SqlPoolFormatter.new_for_format(format)


@client.command("create-elastic-pool")
@click.option(
    "-g",
    "--resource-group",
    "resource_group_name",
    help="The resource group of the server (default: defaults.resource-group).",
)
@click.option(
    "-s",
    "--server",
    "server_name",
    help="The server to create the pool in (default: defaults.server).",
)
@click.option(
    "--edition",
    type=click.Choice([edition.value for edition in DatabaseEdition], case_sensitive=False),
    default=None,
    help="The edition to assign to the elastic pool.",
)
@click.option(
    "--dtu", type=click.IntRange(min=0), default=None, help="The total shared DTU of the pool."
)
@click.option(
    "--storage-mb",
    type=click.IntRange(min=0),
    default=None,
    help="The storage limit of the pool in MB.",
)
@click.option(
    "--database-dtu-min",
    type=click.IntRange(min=0),
    default=None,
    help="The minimum DTU all databases are guaranteed.",
)
@click.option(
    "--database-dtu-max",
    type=click.IntRange(min=0),
    default=None,
    help="The maximum DTU any one database can consume.",
)
@click.option(
    "--vcore",
    type=click.IntRange(min=1),
    default=None,
    help="The total shared number of vCores of the pool.",
)
@click.option(
    "--requested-sku-name",
    default=None,
    help="The SKU (compute generation) of a vCore-based pool, e.g. 'GP_Gen5', 'BC_Gen5'.",
)
@click.option(
    "--tag",
    "tags",
    type=TAG,
    multiple=True,
    metavar="KEY=VALUE",
    help="A tag to associate with the pool, can be specified multiple times.",
)
@click.option(
    "--zone-redundant/--no-zone-redundant",
    default=None,
    help="Whether the pool is spread across availability zones (default: service default).",
)
@click.option(
    "--as-job",
    is_flag=True,
    default=False,
    help="Accepted for compatibility, the pool is created in the foreground.",
)
@click.option(
    "--what-if",
    is_flag=True,
    default=False,
    help="Only show the pool which would be created.",
)
@click.argument("elastic_pool_name")
@click.pass_obj
def client_create_elastic_pool(
    obj: dict,
    elastic_pool_name: str,
    resource_group_name: Optional[str],
    server_name: Optional[str],
    edition: Optional[str],
    dtu: Optional[int],
    storage_mb: Optional[int],
    database_dtu_min: Optional[int],
    database_dtu_max: Optional[int],
    vcore: Optional[int],
    requested_sku_name: Optional[str],
    tags: Tuple[Tuple[str, str]],
    zone_redundant: Optional[bool],
    as_job: bool,
    what_if: bool,
):
    """Create a new Azure SQL elastic pool.

    Pools are sized either by DTU (--dtu, --database-dtu-min,
    --database-dtu-max) or by vCores (--vcore and --requested-sku-name),
    both optionally with --edition.
    """
    resource_group_name = config_default("resource-group", resource_group_name)
    if not resource_group_name:
        raise click.UsageError("Either --resource-group or defaults.resource-group must be set.")

    server_name = config_default("server", server_name)
    if not server_name:
        raise click.UsageError("Either --server or defaults.server must be set.")

    try:
        sizing = select_sizing(
            edition=DatabaseEdition(edition) if edition else None,
            dtu=dtu,
            database_dtu_min=database_dtu_min,
            database_dtu_max=database_dtu_max,
            vcore=vcore,
            requested_sku_name=requested_sku_name,
        )
        params = ElasticPoolCreateModel(
            resource_group_name=resource_group_name,
            server_name=server_name,
            elastic_pool_name=elastic_pool_name,
            sizing=sizing,
            storage_mb=storage_mb,
            tags=list(tags) if tags else None,
            zone_redundant=zone_redundant,
        )
    except (SqlPoolValidationError, ValidationError) as exc:
        raise click.UsageError(str(exc)) from exc

    if as_job:
        log.debug(
            "Background jobs aren't supported, creating %s in the foreground", elastic_pool_name
        )

    try:
        if what_if:
            result = ElasticPoolSpecResult(
                elastic_pool_spec=prepare_elastic_pool(obj["client"], params)
            )
        else:
            result = ElasticPoolResult(elastic_pool=create_elastic_pool(obj["client"], params))
    except (SqlPoolException, httpx.HTTPError, ClientAuthenticationError) as exc:
        click.echo(f"ERROR: {elastic_pool_name}\nERROR DETAIL: {exc}", err=True)
        sys.exit(1)

    click.echo(obj["formatter"].format(result.model_dump(mode="json")))
