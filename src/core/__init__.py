"""
Project Cmxdump - Core Module

Data models, the CMX timestamp codec and shared utilities.
"""

from .models import (
    FetchStatus,
    MerakiConfig,
    ESSID,
    AccessPoint,
    GeoLocation,
    ClientObservation,
    AnalyticsPayload,
    AnalyticsEnvelope,
    FetchResult,
)

from .timestamp import (
    DEFAULT_TIMEZONE,
    EPOCH,
    TimestampCodec,
    default_codec,
)
from .utils import (
    ConfigurationError,
    setup_logging,
    load_config,
    load_meraki_config,
    has_model_prefix,
)

__all__ = [
    # Enums
    "FetchStatus",
    # Data classes
    "MerakiConfig",
    "ESSID",
    "AccessPoint",
    "GeoLocation",
    "ClientObservation",
    "AnalyticsPayload",
    "AnalyticsEnvelope",
    "FetchResult",
    # Timestamps
    "DEFAULT_TIMEZONE",
    "EPOCH",
    "TimestampCodec",
    "default_codec",
    # Utilities
    "ConfigurationError",
    "setup_logging",
    "load_config",
    "load_meraki_config",
    "has_model_prefix",
]
