"""Identifier and parameter helpers shared by the Render tools.

Identifiers are checked before any request path is built, so a malformed
ID never reaches the network.
"""

from typing import Any, Dict, List, Optional

from .client import InvalidIdentifierError


def _require_prefix(value: str, prefix: str, label: str) -> None:
    if not (value or "").startswith(prefix):
        raise InvalidIdentifierError(
            f"Invalid {label} ID format. Expected format: {prefix}xxxxx, got: {value}",
            prefix=prefix,
            value=value,
        )


def validate_service_id(service_id: str) -> None:
    _require_prefix(service_id, "srv-", "service")


def validate_deploy_id(deploy_id: str) -> None:
    _require_prefix(deploy_id, "dep-", "deploy")


def validate_project_id(project_id: str) -> None:
    _require_prefix(project_id, "prj-", "project")


def validate_environment_id(environment_id: str) -> None:
    _require_prefix(environment_id, "env-", "environment")


def validate_postgres_id(postgres_id: str) -> None:
    _require_prefix(postgres_id, "dpg-", "PostgreSQL")


def validate_key_value_id(key_value_id: str) -> None:
    _require_prefix(key_value_id, "red-", "Key Value")


def validate_disk_id(disk_id: str) -> None:
    _require_prefix(disk_id, "dsk-", "disk")


def validate_env_group_id(env_group_id: str) -> None:
    _require_prefix(env_group_id, "evg-", "environment group")


DATE_FILTERS = {
    "created_before": "createdBefore",
    "created_after": "createdAfter",
    "updated_before": "updatedBefore",
    "updated_after": "updatedAfter",
}


def apply_date_filters(query: Dict[str, Any], filters: Any) -> None:
    """Copy the date filters that are set from a filters model into a query."""
    for attr, param in DATE_FILTERS.items():
        value = getattr(filters, attr, None)
        if value:
            query[param] = value


def copy_set_fields(target: Dict[str, Any], source: Any, mapping: Dict[str, str]) -> Dict[str, Any]:
    """Copy truthy attributes of ``source`` into ``target`` under API names.

    Args:
        target: Query or body dict to fill
        source: Pydantic model holding optional fields
        mapping: Attribute name -> API field name

    Returns:
        The target dict
    """
    for attr, api_name in mapping.items():
        value = getattr(source, attr, None)
        if value:
            target[api_name] = value
    return target


def split_ids(value: Optional[str]) -> List[str]:
    """Split a comma-separated ID list, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
