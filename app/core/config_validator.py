import re
import sys
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from app.config import Settings

INSECURE_SECRET_KEYS = {"CHANGE_THIS_TO_A_SECURE_RANDOM_KEY_IN_PRODUCTION", "changeme", "secret"}
SUPPORTED_DATABASE_SCHEMES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")
REDIS_SCHEMES = ("redis://", "rediss://", "unix://")
RATE_LIMIT_PATTERN = re.compile(r"^\d+\s*/\s*(second|minute|hour|day)$")

# (minimum, maximum) for each sizing knob.
NUMERIC_BOUNDS: dict[str, tuple[int, int]] = {
    "ACCESS_TOKEN_EXPIRE_MINUTES": (5, 1440),
    "RATE_LIMIT_PER_MINUTE": (1, 10000),
    "FEED_CACHE_TTL_SECONDS": (1, 3600),
    "FEED_MAX_POSTS": (1, 500),
    "EMERGENCY_FEED_LIMIT": (1, 100),
    "EXCHANGE_LIST_MAX": (1, 500),
    "RECENT_ACTIVITY_LIMIT": (1, 50),
    "RECENT_ACTIVITY_MAX_ITEMS": (1, 100),
}


class ValidationResult(TypedDict):
    environment: str
    errors: list[str]
    warnings: list[str]
    valid: bool


class EnvironmentValidator:
    """Startup checks over the loaded settings.

    Errors stop the process; warnings are printed and startup continues.
    Production turns some warnings into errors.
    """

    @staticmethod
    def _check_core(settings: "Settings", errors: list[str]) -> None:
        if len(settings.SECRET_KEY) < 32 or settings.SECRET_KEY in INSECURE_SECRET_KEYS:
            errors.append("❌ SECRET_KEY must be at least 32 characters and not a placeholder")

        if not settings.DATABASE_URL.startswith(SUPPORTED_DATABASE_SCHEMES):
            errors.append(
                "❌ DATABASE_URL must start with postgresql+asyncpg:// or sqlite+aiosqlite://"
            )

        if not RATE_LIMIT_PATTERN.match(settings.AUTH_RATE_LIMIT.strip()):
            errors.append(
                f"❌ AUTH_RATE_LIMIT '{settings.AUTH_RATE_LIMIT}' must look like '10/minute'"
            )

    @staticmethod
    def _check_feed(settings: "Settings", errors: list[str], warnings: list[str]) -> None:
        if settings.CACHE_ENABLED and not settings.REDIS_URL.startswith(REDIS_SCHEMES):
            errors.append("❌ CACHE_ENABLED needs REDIS_URL to be a redis://, rediss:// or unix:// URL")

        for name, (low, high) in NUMERIC_BOUNDS.items():
            value = getattr(settings, name)
            if not low <= value <= high:
                errors.append(f"❌ {name}={value} must be between {low} and {high}")

        if settings.EMERGENCY_FEED_LIMIT > settings.FEED_MAX_POSTS:
            warnings.append("⚠️ EMERGENCY_FEED_LIMIT is larger than FEED_MAX_POSTS")
        if settings.RECENT_ACTIVITY_LIMIT > settings.RECENT_ACTIVITY_MAX_ITEMS:
            warnings.append(
                "⚠️ RECENT_ACTIVITY_LIMIT exceeds RECENT_ACTIVITY_MAX_ITEMS and will be truncated"
            )

    @staticmethod
    def _check_production(settings: "Settings", errors: list[str], warnings: list[str]) -> None:
        if settings.DEBUG:
            errors.append("❌ DEBUG must be false in production")
        if settings.DOCS_ENABLED:
            errors.append("❌ DOCS_ENABLED must not be true in production")
        if not settings.RATE_LIMIT_ENABLED:
            warnings.append("⚠️ RATE_LIMIT_ENABLED is off; auth endpoints are unthrottled")
        if not settings.SENTRY_DSN:
            warnings.append("⚠️ SENTRY_DSN should be configured for production monitoring")
        if any("localhost" in origin or "127.0.0.1" in origin for origin in settings.cors_origins_list):
            warnings.append("⚠️ CORS_ORIGINS contains local origins; they are dropped in production")

    @classmethod
    def validate_settings(cls, settings: "Settings") -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        cls._check_core(settings, errors)
        cls._check_feed(settings, errors, warnings)
        if settings.is_production:
            cls._check_production(settings, errors, warnings)

        return ValidationResult(
            environment=settings.ENVIRONMENT.lower(),
            errors=errors,
            warnings=warnings,
            valid=len(errors) == 0,
        )

    @classmethod
    def validate_or_exit(cls, settings: "Settings") -> None:
        if any("alembic" in arg for arg in sys.argv):
            return

        result = cls.validate_settings(settings)

        print(f"🔧 Configuration check ({result['environment'].upper()})")

        for warning in result["warnings"]:
            print(f"  {warning}")

        if result["errors"]:
            for error in result["errors"]:
                print(f"  {error}")
            print("Application cannot start with configuration errors.")
            sys.exit(1)

        if not result["warnings"]:
            print("  ✅ All configuration checks passed")
