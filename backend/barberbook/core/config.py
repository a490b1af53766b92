"""
Centralized configuration module for application-wide settings.

Values are read from environment variables once at import time. Services do
not read these globals directly: they receive a ``BookingSettings`` instance
so tests can pass explicit options per call site.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")

# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'America/Los_Angeles', 'UTC')
            Default: 'UTC'

    Shops carry their own IANA zone; this value is only the fallback used
    when a shop has none configured.
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


APP_TZ = get_app_timezone()


# ===========================
# External Availability Configuration
# ===========================


def get_external_fail_open() -> bool:
    """
    Get whether external availability failures should let bookings through.

    Environment Variables:
        EXTERNAL_AVAILABILITY_FAIL_OPEN: Default 'true'. Set to 'false' to
            reject bookings whenever the provider cannot be reached.

    Truthy values: "true", "1", "yes" (case-insensitive)
    """
    raw = os.getenv("EXTERNAL_AVAILABILITY_FAIL_OPEN", "true")
    fail_open = raw.lower() in _TRUTHY

    if not fail_open:
        logger.warning(
            "External availability is FAIL-CLOSED - provider outages will block bookings",
            extra={"context": {"EXTERNAL_AVAILABILITY_FAIL_OPEN": raw}},
        )

    return fail_open


EXTERNAL_AVAILABILITY_FAIL_OPEN = get_external_fail_open()


def _get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning(f"Invalid integer for {name}, using default {default}")
        return default


# ===========================
# Square Configuration
# ===========================

SQUARE_ENVIRONMENT = os.getenv("SQUARE_ENVIRONMENT", "sandbox")
SQUARE_ACCESS_TOKEN = os.getenv("SQUARE_ACCESS_TOKEN", "")
SQUARE_API_VERSION = os.getenv("SQUARE_API_VERSION", "2024-12-18")
SQUARE_MAX_PAGES = _get_int("SQUARE_MAX_PAGES", 10)
SQUARE_TIMEOUT_SECONDS = _get_int("SQUARE_TIMEOUT_SECONDS", 30)


def get_square_base_url(environment: str = SQUARE_ENVIRONMENT) -> str:
    if environment == "production":
        return "https://connect.squareup.com/v2"
    return "https://connect.squareupsandbox.com/v2"


# ===========================
# Database Configuration
# ===========================

DEFAULT_DATABASE_URL = "sqlite:///./barberbook.db"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


@dataclass(frozen=True)
class BookingSettings:
    """Options consumed by the validation pipeline."""

    external_fail_open: bool = True
    default_time_zone: Optional[str] = None
    enforce_working_hours: bool = True

    @classmethod
    def from_env(cls) -> "BookingSettings":
        return cls(
            external_fail_open=EXTERNAL_AVAILABILITY_FAIL_OPEN,
            default_time_zone=str(APP_TZ),
            enforce_working_hours=os.getenv(
                "ENFORCE_WORKING_HOURS", "true"
            ).lower()
            in _TRUTHY,
        )


def log_booking_config():
    """
    Log the active booking configuration.

    Should be called during application startup to provide visibility
    into the policies in effect.
    """
    logger.info(
        "Booking configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "external_fail_open": EXTERNAL_AVAILABILITY_FAIL_OPEN,
                "square_environment": SQUARE_ENVIRONMENT,
                "square_max_pages": SQUARE_MAX_PAGES,
            }
        },
    )
