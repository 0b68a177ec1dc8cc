"""Metadata services: module configuration, library, numbering and default modules."""

from .library import seed_metadata_library, validate_field_definition, validate_field_definitions  # noqa: F401
from .module_config import (  # noqa: F401
    ModuleConfigError,
    activate_module_config,
    get_active_module_config,
    get_all_modules,
    get_field,
    get_module_fields,
    get_module_settings,
    save_module_config,
    submit_for_review,
    update_module_settings,
)
