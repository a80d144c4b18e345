import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unrecognised means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def working_days_from_env(default: str = "0,1,2,3,4") -> tuple:
    """WORKING_DAYS as comma-separated weekday numbers (Monday=0)."""
    raw = os.getenv("WORKING_DAYS", default)
    days = tuple(sorted({int(p) for p in raw.split(",") if p.strip()}))
    if any(d < 0 or d > 6 for d in days):
        raise ValueError(f"WORKING_DAYS must hold weekday numbers 0-6, got {raw!r}")
    return days
