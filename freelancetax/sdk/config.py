"""Configuration management for Freelance Tax.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - profile: path to profile.yaml (optional, if not colocated)
   - data_dir: where the ledger lives
   - display_currency: EUR or BGN for CLI output

2. profile.yaml - User's personal configuration
   - name, eic: shown on exported reports
   - insurance_income, insurance_base_mode: contribution preferences
   - is_self_insured, use_personal_bank_details: stored, not calculated on

Config directory resolution:
1. FREELANCE_TAX_CONFIG_PATH environment variable (if set)
2. ~/.config/freelance-tax/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory

Data path resolution:
1. settings.json "data_dir" key (if set via CLI)
2. XDG_DATA_HOME/freelance-tax/ or ~/.local/share/freelance-tax/
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .schemas import UserSettings

logger = logging.getLogger(__name__)

APP_NAME = "freelance-tax"
CONFIG_ENV_VAR = "FREELANCE_TAX_CONFIG_PATH"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

DEFAULT_DISPLAY_CURRENCY = "EUR"


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. FREELANCE_TAX_CONFIG_PATH environment variable
    2. ~/.config/freelance-tax/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_display_currency() -> str:
    """Preferred display currency (EUR unless set via 'settings currency')."""
    return str(get_setting("display_currency", DEFAULT_DISPLAY_CURRENCY)).upper()


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Path to profile.yaml

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Remove the 'profile' key from {get_settings_path()} or create the file."
            )
        return profile_path

    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create one with: freelance-tax profile set name \"Your Name\""
        )

    return profile_path


def load_profile(require_exists: bool = False) -> dict:
    """Load the raw profile dictionary from profile.yaml.

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the raw profile dictionary to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


# =============================================================================
# Typed user settings
# =============================================================================

def validate_profile(profile: dict) -> UserSettings:
    """Validate a raw profile dictionary against the UserSettings schema.

    Raises:
        ValueError: If the profile has unknown keys or invalid values
    """
    try:
        return UserSettings.model_validate(profile)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'profile'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValueError("Invalid profile:\n  ! " + "\n  ! ".join(errors)) from e


def validate_profile_key(key: str) -> tuple[bool, str]:
    """Check that a key is a known profile field.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if key in UserSettings.model_fields:
        return True, ""
    valid_keys = ", ".join(UserSettings.model_fields)
    return False, f"Unknown profile key '{key}'. Valid keys: {valid_keys}"


def load_user_settings() -> UserSettings:
    """Load user settings, falling back to defaults for a missing profile.

    Raises:
        ValueError: If profile.yaml exists but is invalid
    """
    return validate_profile(load_profile(require_exists=False))


def save_user_settings(settings: UserSettings) -> Path:
    """Replace the profile with `settings` (wholesale update)."""
    path = save_profile(settings.model_dump(mode="json"))
    logger.info("Saved profile to %s", path)
    return path


def update_user_settings(**changes: Any) -> UserSettings:
    """Merge `changes` into the stored profile and save it.

    Values are validated (and coerced, e.g. "true" -> True) by the schema.

    Raises:
        ValueError: If a key is unknown or a value is invalid
    """
    for key in changes:
        is_valid, error = validate_profile_key(key)
        if not is_valid:
            raise ValueError(error)

    merged = {**load_user_settings().model_dump(), **changes}
    settings = validate_profile(merged)
    save_user_settings(settings)
    return settings


def reset_user_settings() -> UserSettings:
    """Reset the profile to defaults."""
    settings = UserSettings()
    save_user_settings(settings)
    return settings


# =============================================================================
# XDG path helpers
# =============================================================================

def get_data_path() -> Path:
    """Get the data directory path.

    Uses settings.json "data_dir" if set, else XDG_DATA_HOME/freelance-tax/.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom_data_dir = get_setting("data_dir")
    if custom_data_dir:
        data_path = Path(custom_data_dir).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path
