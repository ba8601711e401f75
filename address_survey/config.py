"""
Configuration settings for Address Survey

Endpoints, thresholds and timing for a survey session. A config value is
built once by the entry point and passed into component constructors.
"""

from dataclasses import dataclass, field
from typing import Optional
import os

from loguru import logger

try:
    from dotenv import load_dotenv
    DOTENV_AVAILABLE = True
except ImportError:
    DOTENV_AVAILABLE = False


FORMAT_MODES = ("composed", "key_value")
LOCALES = ("ru", "en")


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    
    # OSM notes API
    notes_url: str = "https://api.openstreetmap.org/api/0.6/notes"
    
    # Request settings
    request_timeout: int = 30
    max_retries: int = 1
    retry_delay: float = 1.0
    
    # User agent for API requests
    user_agent: str = "AddressSurvey/1.0"


@dataclass
class SurveyConfig:
    """Survey session configuration"""
    # Location polling (seconds)
    location_check_interval_s: float = 60.0
    location_timeout_s: float = 45.0
    
    # Fixes less accurate than this (meters) are rejected
    max_acceptable_accuracy_m: float = 500.0
    
    # Zoom used when centering the map on a fix
    max_zoom: int = 16
    
    # Query radius and re-fetch distance (meters)
    fetch_radius_m: float = 1000.0
    
    # Note text formatting
    format_mode: str = "composed"
    locale: str = "ru"
    
    # API config
    api: APIConfig = field(default_factory=APIConfig)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}: not a number")
        return default


def load_config(env_file: Optional[str] = None) -> SurveyConfig:
    """
    Build a SurveyConfig from defaults and SURVEY_* environment variables.
    
    Args:
        env_file: Optional .env file loaded before reading the environment
        
    Returns:
        Validated SurveyConfig
    """
    if DOTENV_AVAILABLE:
        if env_file:
            if load_dotenv(env_file, override=False):
                logger.debug(f"Loaded environment from {env_file}")
            else:
                logger.warning(f"Env file not found or empty: {env_file}")
        else:
            load_dotenv(override=False)
    elif env_file:
        logger.warning("python-dotenv not installed - .env file support unavailable")
    
    defaults = SurveyConfig()
    api = APIConfig(
        overpass_url=os.environ.get("SURVEY_OVERPASS_URL", defaults.api.overpass_url),
        notes_url=os.environ.get("SURVEY_NOTES_URL", defaults.api.notes_url),
        request_timeout=int(_env_float("SURVEY_REQUEST_TIMEOUT", defaults.api.request_timeout)),
        max_retries=int(_env_float("SURVEY_MAX_RETRIES", defaults.api.max_retries)),
        user_agent=os.environ.get("SURVEY_USER_AGENT", defaults.api.user_agent),
    )
    config = SurveyConfig(
        location_check_interval_s=_env_float("SURVEY_LOCATION_CHECK_INTERVAL", defaults.location_check_interval_s),
        location_timeout_s=_env_float("SURVEY_LOCATION_TIMEOUT", defaults.location_timeout_s),
        max_acceptable_accuracy_m=_env_float("SURVEY_MAX_ACCURACY", defaults.max_acceptable_accuracy_m),
        max_zoom=int(_env_float("SURVEY_MAX_ZOOM", defaults.max_zoom)),
        fetch_radius_m=_env_float("SURVEY_FETCH_RADIUS", defaults.fetch_radius_m),
        format_mode=os.environ.get("SURVEY_FORMAT_MODE", defaults.format_mode),
        locale=os.environ.get("SURVEY_LOCALE", defaults.locale),
        api=api,
    )
    validate_config(config)
    return config


def validate_config(config: SurveyConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []
    
    if config.fetch_radius_m is None or config.fetch_radius_m <= 0:
        errors.append(f"fetch_radius_m must be positive, got {config.fetch_radius_m}")
    if config.max_acceptable_accuracy_m is None or config.max_acceptable_accuracy_m <= 0:
        errors.append(f"max_acceptable_accuracy_m must be positive, got {config.max_acceptable_accuracy_m}")
    if config.location_check_interval_s is None or config.location_check_interval_s < 0:
        errors.append(f"location_check_interval_s must not be negative, got {config.location_check_interval_s}")
    if config.location_timeout_s is None or config.location_timeout_s <= 0:
        errors.append(f"location_timeout_s must be positive, got {config.location_timeout_s}")
    if config.max_zoom < 1 or config.max_zoom > 22:
        errors.append(f"max_zoom must be between 1 and 22, got {config.max_zoom}")
    if config.format_mode not in FORMAT_MODES:
        errors.append(f"format_mode must be one of {', '.join(FORMAT_MODES)}, got {config.format_mode!r}")
    if config.locale not in LOCALES:
        errors.append(f"locale must be one of {', '.join(LOCALES)}, got {config.locale!r}")
    
    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if not config.api.notes_url:
            errors.append("api.notes_url is required but not set")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
    
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
