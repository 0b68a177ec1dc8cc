from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.db import transaction
from rest_framework.exceptions import PermissionDenied

from apps.audit.utils import create_change_diff, log_audit_event
from ..models import ModuleConfiguration
from .library import validate_field_definitions

logger = logging.getLogger(__name__)

Status = ModuleConfiguration.Status


class ModuleConfigError(ValueError):
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


def get_active_module_config(tenant, module_name: str) -> Optional[ModuleConfiguration]:
    return (
        ModuleConfiguration.objects.filter(tenant=tenant, module_name=module_name, status=Status.ACTIVE)
        .order_by("-version")
        .first()
    )


def get_all_modules(tenant):
    return ModuleConfiguration.objects.filter(tenant=tenant, status=Status.ACTIVE).order_by("position", "module_name")


def get_module_fields(tenant, module_name: str) -> List[Dict[str, Any]]:
    config = get_active_module_config(tenant, module_name)
    return list(config.fields) if config else []


def get_field(tenant, module_name: str, field_name: str) -> Optional[Dict[str, Any]]:
    config = get_active_module_config(tenant, module_name)
    return config.get_field(field_name) if config else None


def get_module_settings(tenant, module_name: str) -> Dict[str, Any]:
    config = get_active_module_config(tenant, module_name)
    return dict(config.module_settings or {}) if config else {}


@transaction.atomic
def save_module_config(tenant, data: Dict[str, Any], *, user=None) -> ModuleConfiguration:
    """
    Validate the field definitions and store them as the next draft version.

    Settings and presentation attributes not supplied are carried over from
    the currently active version.
    """
    module_name = (data.get("moduleName") or data.get("module_name") or "").strip()
    if not module_name:
        raise ModuleConfigError("moduleName is required")
    fields = data.get("fields") or []
    if not isinstance(fields, list) or not fields:
        raise ModuleConfigError("fields must be a non-empty list")

    errors = validate_field_definitions(fields)
    if errors:
        raise ModuleConfigError("Invalid field definitions", errors)

    current = get_active_module_config(tenant, module_name)

    def carried(key, attr, default):
        if key in data:
            return data[key]
        return getattr(current, attr) if current else default

    config = ModuleConfiguration.objects.create(
        tenant=tenant,
        module_name=module_name,
        display_name=carried("displayName", "display_name", module_name),
        icon=carried("icon", "icon", ""),
        description=carried("description", "description", ""),
        workflow_category=carried("workflowCategory", "workflow_category", ""),
        position=carried("position", "position", 0),
        show_in_nav=carried("showInNav", "show_in_nav", True),
        is_custom_module=carried("isCustomModule", "is_custom_module", current is None),
        fields=fields,
        layouts=carried("layouts", "layouts", {}),
        validations=carried("validations", "validations", []),
        module_settings=carried("moduleSettings", "module_settings", {}),
        status=Status.DRAFT,
        version=ModuleConfiguration.next_version(tenant=tenant, module_name=module_name),
        created_by=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="save_module_config",
        entity="ModuleConfiguration",
        entity_id=config.pk,
        metadata={"moduleName": module_name, "version": config.version},
    )
    return config


def submit_for_review(config: ModuleConfiguration, *, user=None) -> ModuleConfiguration:
    if config.status != Status.DRAFT:
        raise ModuleConfigError(f"Only draft configurations can be submitted (current status: {config.status})")
    config.status = Status.REVIEW
    config.save(update_fields=["status", "updated_at"])
    return config


@transaction.atomic
def activate_module_config(config: ModuleConfiguration, *, user=None) -> ModuleConfiguration:
    if config.status == Status.ARCHIVED:
        raise ModuleConfigError("Archived configurations cannot be activated")
    config.activate(user=user)
    log_audit_event(
        tenant=config.tenant,
        user=user,
        action="activate_module_config",
        entity="ModuleConfiguration",
        entity_id=config.pk,
        metadata={"moduleName": config.module_name, "version": config.version},
    )
    logger.info(f"Activated {config.module_name} v{config.version} for tenant {config.tenant_id}")
    return config


@transaction.atomic
def update_module_settings(tenant, module_name: str, settings: Dict[str, Any], *, user) -> Dict[str, Any]:
    """Shallow-merge ``settings`` into the active version. Admins and owners only."""
    if not (user.is_superuser or getattr(user, "role", None) in ("admin", "owner")):
        raise PermissionDenied("Only tenant admins can change module settings.")
    if not isinstance(settings, dict):
        raise ModuleConfigError("settings must be an object")
    config = (
        ModuleConfiguration.objects.select_for_update()
        .filter(tenant=tenant, module_name=module_name, status=Status.ACTIVE)
        .order_by("-version")
        .first()
    )
    if config is None:
        raise ModuleConfigError(f"Module {module_name} has no active configuration")
    before = dict(config.module_settings or {})
    config.module_settings = {**before, **settings}
    config.save(update_fields=["module_settings", "updated_at"])
    log_audit_event(
        tenant=tenant,
        user=user,
        action="update_module_settings",
        entity="ModuleConfiguration",
        entity_id=config.pk,
        changes=create_change_diff(before, config.module_settings),
        metadata={"moduleName": module_name},
    )
    return config.module_settings
