"""
Environment variable validation and security checks.

This module validates that all required environment variables are properly
configured before the application starts.
"""

import sys
from typing import List, Optional, Tuple

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class EnvironmentValidationError(Exception):
    """Raised when environment validation fails."""
    pass


def validate_secret_key(key_name: str, key_value: Optional[str], min_length: int = 32) -> List[str]:
    """
    Validate that a secret key meets security requirements.

    Args:
        key_name: Name of the key (for error messages)
        key_value: The key value to validate
        min_length: Minimum required length

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not key_value:
        errors.append(f"{key_name} is not set")
        return errors

    if len(key_value) < min_length:
        errors.append(
            f"{key_name} is too short (must be at least {min_length} characters)"
        )

    if "change" in key_value.lower() or "your-" in key_value.lower() or "example" in key_value.lower():
        errors.append(
            f"{key_name} appears to be a placeholder value - update with the provider's real secret"
        )

    return errors


def validate_database_url() -> List[str]:
    """
    Validate database URL configuration.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
        return errors

    if settings.uses_sqlite:
        if settings.is_production:
            errors.append("DATABASE_URL must point at PostgreSQL in production")
        elif not settings.DATABASE_URL.startswith("sqlite+aiosqlite://"):
            errors.append("SQLite DATABASE_URL must use the aiosqlite driver (sqlite+aiosqlite://...)")
        return errors

    if not settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
        errors.append(
            "DATABASE_URL must use asyncpg driver (format: postgresql+asyncpg://...)"
        )

    return errors


def validate_auth_provider() -> List[str]:
    """
    Validate auth provider settings.

    Token verification only needs the JWT secret; sign-up, login and
    refresh also need the provider URL and anon key.
    """
    errors = []

    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        if settings.is_production:
            errors.append("SUPABASE_URL and SUPABASE_ANON_KEY must be set in production")
        else:
            logger.warning(
                "environment_validation_warning",
                message="Auth provider URL/key not set - /auth endpoints will return 500",
            )

    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.warning(
            "environment_validation_warning",
            message="SUPABASE_SERVICE_ROLE_KEY not set - account lookups are skipped",
        )

    return errors


def validate_storage() -> List[str]:
    """
    Validate object storage configuration.

    Without a bucket the in-memory store is used, which is only acceptable
    outside production.
    """
    errors = []

    if not settings.storage_configured:
        if settings.is_production:
            errors.append("STORAGE_BUCKET must be set in production")
        else:
            logger.warning(
                "environment_validation_warning",
                message="STORAGE_BUCKET not set - uploads are kept in memory",
            )
        return errors

    if not settings.STORAGE_ACCESS_KEY_ID or not settings.STORAGE_SECRET_ACCESS_KEY:
        errors.append("STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY are required with STORAGE_BUCKET")

    if not settings.STORAGE_PUBLIC_URL.startswith(("http://", "https://")):
        errors.append("STORAGE_PUBLIC_URL must be an http(s) URL")

    return errors


def validate_production_settings() -> List[str]:
    """
    Validate production-specific settings.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not settings.is_production:
        return errors

    if settings.DEBUG:
        errors.append("DEBUG must be false in production")

    if "localhost" in ",".join(settings.ALLOWED_ORIGINS):
        logger.warning(
            "localhost_in_allowed_origins",
            message="ALLOWED_ORIGINS includes localhost in production - may be insecure"
        )

    if settings.LOG_FORMAT != "json":
        logger.warning(
            "log_format_not_json",
            message="LOG_FORMAT should be 'json' in production for better log aggregation"
        )

    return errors


def validate_environment() -> Tuple[bool, List[str]]:
    """
    Validate all environment variables.

    Returns:
        (is_valid, list_of_errors)
    """
    all_errors = []

    logger.info(
        "validating_environment",
        app_env=settings.APP_ENV,
        app_name=settings.APP_NAME
    )

    all_errors.extend(validate_secret_key("SUPABASE_JWT_SECRET", settings.SUPABASE_JWT_SECRET))
    all_errors.extend(validate_database_url())
    all_errors.extend(validate_auth_provider())
    all_errors.extend(validate_storage())
    all_errors.extend(validate_production_settings())

    if all_errors:
        logger.error(
            "environment_validation_failed",
            errors=all_errors,
            error_count=len(all_errors)
        )
        return False, all_errors

    logger.info(
        "environment_validation_successful",
        app_env=settings.APP_ENV,
        features_enabled={
            "auth_provider": bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY),
            "object_storage": settings.storage_configured,
        }
    )
    return True, []


def validate_or_exit():
    """
    Validate environment and exit if validation fails in production.

    Outside production the errors are logged and startup continues.
    """
    is_valid, errors = validate_environment()

    if is_valid:
        logger.info("environment_validation_passed")
        return

    if not settings.is_production:
        return

    logger.critical(
        "startup_aborted_invalid_environment",
        errors=errors
    )
    print("\nENVIRONMENT VALIDATION FAILED\n")
    print("The following configuration errors were found:\n")
    for i, error in enumerate(errors, 1):
        print(f"  {i}. {error}")
    print("\nPlease fix these errors and restart the application.\n")
    sys.exit(1)
