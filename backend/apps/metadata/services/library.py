"""System catalogue of field types, UI components, validations and layouts."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from django.db import transaction

from ..models import MetadataLibraryItem

logger = logging.getLogger(__name__)

Category = MetadataLibraryItem.Category

SYSTEM_LIBRARY: Dict[str, List[Tuple[str, str, dict]]] = {
    Category.FIELD_TYPES: [
        ("string", "Text", {"maxLength": 255}),
        ("text", "Long Text", {}),
        ("number", "Number", {"decimals": 0}),
        ("decimal", "Decimal", {"decimals": 2}),
        ("boolean", "Yes / No", {}),
        ("date", "Date", {}),
        ("datetime", "Date & Time", {}),
        ("reference", "Reference", {}),
        ("table", "Table", {}),
        ("json", "JSON", {}),
    ],
    Category.UI_COMPONENTS: [
        ("text", "Text Input", {}),
        ("textarea", "Text Area", {}),
        ("email", "Email Input", {}),
        ("phone", "Phone Input", {}),
        ("url", "URL Input", {}),
        ("number", "Number Input", {}),
        ("currency", "Currency Input", {"currency": "INR", "decimals": 2}),
        ("dropdown", "Dropdown", {}),
        ("multiselect", "Multi Select", {}),
        ("checkbox", "Checkbox", {}),
        ("date", "Date Picker", {}),
        ("datetime", "Date Time Picker", {}),
        ("lookup", "Record Lookup", {}),
        ("table", "Line Item Table", {}),
        ("file", "File Upload", {"maxSize": 10485760}),
    ],
    Category.VALIDATION_TYPES: [
        ("required", "Required", {}),
        ("email", "Email Format", {}),
        ("phone", "Phone Format", {}),
        ("url", "URL Format", {}),
        ("min", "Minimum Value", {}),
        ("max", "Maximum Value", {}),
        ("minLength", "Minimum Length", {}),
        ("maxLength", "Maximum Length", {}),
        ("pattern", "Pattern", {}),
        ("unique", "Unique", {}),
        ("gstin", "GSTIN Format", {}),
    ],
    Category.DATA_SOURCES: [
        ("static", "Static Options", {}),
        ("module", "Module Records", {}),
        ("users", "Tenant Users", {}),
    ],
    Category.LAYOUT_TEMPLATES: [
        ("single_column", "Single Column", {"columns": 1}),
        ("two_column", "Two Column", {"columns": 2}),
        ("tabbed", "Tabbed", {}),
        ("wizard", "Wizard", {}),
    ],
}


@transaction.atomic
def seed_metadata_library() -> int:
    """Create or refresh the system library entries. Returns the number of items touched."""
    count = 0
    for category, items in SYSTEM_LIBRARY.items():
        for name, label, config in items:
            MetadataLibraryItem.objects.update_or_create(
                category=category,
                name=name,
                defaults={"label": label, "config": config, "is_system": True, "status": "active"},
            )
            count += 1
    logger.info(f"Metadata library seeded with {count} system items")
    return count


def get_library(category: str):
    return MetadataLibraryItem.objects.filter(category=category, status="active").order_by("label")


def _active_names(category: str) -> set:
    return set(get_library(category).values_list("name", flat=True))


def validate_field_definition(field: dict, *, library=None) -> List[str]:
    """Check a field definition against the active library and return the errors found."""
    if library is None:
        library = {
            Category.FIELD_TYPES: _active_names(Category.FIELD_TYPES),
            Category.UI_COMPONENTS: _active_names(Category.UI_COMPONENTS),
            Category.VALIDATION_TYPES: _active_names(Category.VALIDATION_TYPES),
        }
    errors = []
    name = field.get("name")
    if not name:
        errors.append("Field name is required")
    label = name or "<unnamed>"
    if field.get("dataType") not in library[Category.FIELD_TYPES]:
        errors.append(f"{label}: Invalid data type: {field.get('dataType')}")
    if field.get("uiType") not in library[Category.UI_COMPONENTS]:
        errors.append(f"{label}: Invalid UI type: {field.get('uiType')}")
    for rule in field.get("validation") or []:
        if rule.get("type") not in library[Category.VALIDATION_TYPES]:
            errors.append(f"{label}: Invalid validation type: {rule.get('type')}")
    return errors


def validate_field_definitions(fields: Iterable[dict]) -> List[str]:
    library = {
        Category.FIELD_TYPES: _active_names(Category.FIELD_TYPES),
        Category.UI_COMPONENTS: _active_names(Category.UI_COMPONENTS),
        Category.VALIDATION_TYPES: _active_names(Category.VALIDATION_TYPES),
    }
    errors = []
    seen = set()
    for field in fields:
        errors.extend(validate_field_definition(field, library=library))
        name = field.get("name")
        if name in seen:
            errors.append(f"{name}: Duplicate field name")
        seen.add(name)
    return errors


def request_custom_item(*, category: str, name: str, label: str, description: str = "", config=None) -> MetadataLibraryItem:
    """Tenant-proposed library entry. Stays in review until a platform admin activates it."""
    if category not in Category.values:
        raise ValueError(f"Unknown library category: {category}")
    if MetadataLibraryItem.objects.filter(category=category, name=name).exists():
        raise ValueError(f"Library item {category}:{name} already exists")
    return MetadataLibraryItem.objects.create(
        category=category,
        name=name,
        label=label,
        description=description,
        config=config or {},
        is_system=False,
        status="review",
    )
