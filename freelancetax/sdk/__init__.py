"""Freelance Tax SDK - Core functionality for monthly tax estimates."""

from .config import (
    # Machine settings
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_display_currency,
    # Profile (user settings)
    get_profile_path,
    load_profile,
    save_profile,
    validate_profile,
    validate_profile_key,
    load_user_settings,
    save_user_settings,
    update_user_settings,
    reset_user_settings,
    ProfileNotFoundError,
    # XDG paths
    get_data_path,
)

from .schemas import (
    IncomeRecord,
    UserSettings,
    TaxSummary,
    DEFAULT_SETTINGS,
)

from .currency import (
    EXCHANGE_RATE,
    SUPPORTED_CURRENCIES,
    to_bgn,
    to_eur,
    convert_for_display,
    convert_for_storage,
    format_currency,
    display,
)

from .taxes import (
    TaxRules,
    load_tax_rules,
    aggregate_period,
    resolve_social_security_base,
    compute_tax_summary,
)

from .records import (
    RecordStore,
    ValidationError,
    clear_data,
)

from . import records

__all__ = [
    # Machine settings
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_display_currency",
    # Profile
    "get_profile_path",
    "load_profile",
    "save_profile",
    "validate_profile",
    "validate_profile_key",
    "load_user_settings",
    "save_user_settings",
    "update_user_settings",
    "reset_user_settings",
    "ProfileNotFoundError",
    # XDG paths
    "get_data_path",
    # Schemas
    "IncomeRecord",
    "UserSettings",
    "TaxSummary",
    "DEFAULT_SETTINGS",
    # Currency
    "EXCHANGE_RATE",
    "SUPPORTED_CURRENCIES",
    "to_bgn",
    "to_eur",
    "convert_for_display",
    "convert_for_storage",
    "format_currency",
    "display",
    # Taxes
    "TaxRules",
    "load_tax_rules",
    "aggregate_period",
    "resolve_social_security_base",
    "compute_tax_summary",
    # Records
    "RecordStore",
    "ValidationError",
    "clear_data",
    "records",
]
