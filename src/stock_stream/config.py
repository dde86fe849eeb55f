"""Runtime settings read from environment variables (and a local .env file)."""
import logging
import os
from dataclasses import dataclass
from enum import Enum

from dotenv import find_dotenv, load_dotenv


class PriceModelName(str, Enum):
    SYNTHETIC_UNIFORM = "synthetic-uniform"
    EXTERNAL_FEED = "external-feed"


class StockStoreName(str, Enum):
    MEMORY = "memory"
    SQL = "sql"


@dataclass(frozen=True)
class Settings:
    # Price stream
    tick_count: int = 10
    tick_interval: float = 1.0
    max_duration: float | None = None
    price_range: tuple[float, float] = (0.0, 200.0)
    price_model: PriceModelName = PriceModelName.SYNTHETIC_UNIFORM

    # Bulk orders
    partial_summary_on_error: bool = False

    # Stock store
    stock_store: StockStoreName = StockStoreName.MEMORY
    database_url: str = "sqlite:///./stocks.db"

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.tick_count < 0:
            raise ValueError("TICK_COUNT must be >= 0")
        if self.tick_interval < 0:
            raise ValueError("TICK_INTERVAL must be >= 0")
        if self.max_duration is not None and self.max_duration <= 0:
            raise ValueError("TICK_MAX_DURATION must be > 0")
        low, high = self.price_range
        if high <= low:
            raise ValueError(f"PRICE_RANGE is empty: [{low}, {high})")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name: str, default, cast):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_choice(name: str, enum_cls, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return enum_cls(raw.lower())
    except ValueError as e:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{name} must be one of {choices}, got {raw!r}") from e


def _env_price_range(name: str, default: tuple[float, float]) -> tuple[float, float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    parts = [p.strip() for p in raw.split(",")]
    try:
        low, high = (float(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"{name} must be 'low,high', got {raw!r}") from e
    return (low, high)


def get_settings() -> Settings:
    """Read env vars and return a Settings object. Raises ValueError on bad values."""
    load_dotenv(find_dotenv(usecwd=True))
    defaults = Settings()
    return Settings(
        tick_count=_env_number("TICK_COUNT", defaults.tick_count, int),
        tick_interval=_env_number("TICK_INTERVAL", defaults.tick_interval, float),
        max_duration=_env_number("TICK_MAX_DURATION", defaults.max_duration, float),
        price_range=_env_price_range("PRICE_RANGE", defaults.price_range),
        price_model=_env_choice("PRICE_MODEL", PriceModelName, defaults.price_model),
        partial_summary_on_error=_env_bool(
            "PARTIAL_SUMMARY_ON_ERROR", defaults.partial_summary_on_error
        ),
        stock_store=_env_choice("STOCK_STORE", StockStoreName, defaults.stock_store),
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the service process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
