# budget_tracker/config.py
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///data/budget_tracker.db"
    token_ttl_days: int = 7
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    currency_symbol: str = "₹"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            token_ttl_days=int(os.getenv("TOKEN_TTL_DAYS", cls.token_ttl_days)),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            currency_symbol=os.getenv("CURRENCY_SYMBOL", cls.currency_symbol),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
