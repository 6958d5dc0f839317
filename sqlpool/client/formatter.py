import json
import shlex
from typing import Any, Dict, Generator, List, Optional, Union

import yaml

JSONValue = Union[None, bool, str, float, int, List["JSONValue"], Dict[str, "JSONValue"]]


class SqlPoolFormatter:
    _subclasses_for_format = {}

    def __init_subclass__(cls, format, **kwargs):
        cls._subclasses_for_format[format] = cls

    @classmethod
    def new_for_format(cls, format, *args, **kwargs):
        return cls._subclasses_for_format[format](*args, **kwargs)

    def format(self, result: JSONValue) -> str:
        raise NotImplementedError()


class SqlPoolJSONFormatter(SqlPoolFormatter, format="json"):
    def format(self, result: JSONValue) -> str:
        return json.dumps(result)


class SqlPoolYAMLFormatter(SqlPoolFormatter, format="yaml"):
    def format(self, result: JSONValue) -> str:
        return yaml.dump(result)


class SqlPoolFlatFormatter(SqlPoolFormatter, format="flat"):
    field_name_to_flattener = {
        "elastic_pool": "flatten_elastic_pool_result",
        "elastic_pool_spec": "flatten_elastic_pool_spec_result",
    }

    @staticmethod
    def format_key_value(key, value):
        if value is None:
            value = ""
        elif isinstance(value, bool):
            value = "TRUE" if value else "FALSE"
        elif isinstance(value, (int, float)):
            pass
        else:
            value = shlex.quote(str(value))
            if value[:1] != "'":
                value = f"'{value}'"

        return f"{key}={value}"

    @staticmethod
    def _flatten_tags(tags: Optional[Dict[str, str]]) -> Optional[str]:
        if not tags:
            return None
        return ",".join(f"{name}={value}" for name, value in sorted(tags.items()))

    def _format_fields(self, fields: Dict[str, Any]) -> str:
        return " ".join(self.format_key_value(key, value) for key, value in fields.items())

    def flatten_elastic_pool(self, elastic_pool: JSONValue) -> Generator[str, None, None]:
        fields = {
            "elastic_pool_name": elastic_pool["elastic_pool_name"],
            "resource_group_name": elastic_pool["resource_group_name"],
            "server_name": elastic_pool["server_name"],
            "location": elastic_pool["location"],
            "state": elastic_pool.get("state"),
            "edition": elastic_pool.get("edition"),
            "sku_name": elastic_pool.get("sku_name"),
            "capacity": elastic_pool.get("capacity"),
            "max_size_bytes": elastic_pool.get("max_size_bytes"),
            "zone_redundant": elastic_pool.get("zone_redundant"),
            "database_capacity_min": elastic_pool.get("database_capacity_min"),
            "database_capacity_max": elastic_pool.get("database_capacity_max"),
            "tags": self._flatten_tags(elastic_pool.get("tags")),
        }
        yield self._format_fields(fields)

    def flatten_elastic_pool_result(self, result: JSONValue) -> Generator[str, None, None]:
        yield from self.flatten_elastic_pool(result["elastic_pool"])

    def flatten_elastic_pool_spec(self, spec: JSONValue) -> Generator[str, None, None]:
        sku = spec.get("sku") or {}
        per_database_settings = spec.get("per_database_settings") or {}
        fields = {
            "elastic_pool_name": spec["elastic_pool_name"],
            "resource_group_name": spec["resource_group_name"],
            "server_name": spec["server_name"],
            "location": spec["location"],
            "sku_name": sku.get("name"),
            "sku_tier": sku.get("tier"),
            "sku_capacity": sku.get("capacity"),
            "max_size_bytes": spec.get("max_size_bytes"),
            "zone_redundant": spec.get("zone_redundant"),
            "database_capacity_min": per_database_settings.get("min_capacity"),
            "database_capacity_max": per_database_settings.get("max_capacity"),
            "tags": self._flatten_tags(spec.get("tags")),
        }
        yield self._format_fields(fields)

    def flatten_elastic_pool_spec_result(self, result: JSONValue) -> Generator[str, None, None]:
        yield from self.flatten_elastic_pool_spec(result["elastic_pool_spec"])

    def format(self, result: JSONValue) -> str:
        for field_name, flattener in self.field_name_to_flattener.items():
            if field_name in result:
                return "\n".join(getattr(self, flattener)(result))

        raise TypeError(f"Can't flatten {result!r}")
