"""Environment-aware settings loader."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict, Type

from .settings import Settings, _env_flag


class DevelopmentSettings(Settings):
    """Local development: debug logging and error details in 500 responses."""

    environment: str = "development"
    log_level: str = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionSettings(Settings):
    """Production: JSON log files unless USE_JSON_LOGS says otherwise."""

    environment: str = "production"
    use_json_logs: bool = bool(_env_flag("USE_JSON_LOGS", default=True))


class TestSettings(Settings):
    """Automated tests: dedicated test database and no rate limiting."""

    environment: str = "test"
    rate_limit_enabled: bool = False

    def model_post_init(self, __context) -> None:
        super().model_post_init(__context)
        if not self.database_url:
            object.__setattr__(self, "database_url", self.test_database_url)


ENVIRONMENTS: Dict[str, Type[Settings]] = {
    "development": DevelopmentSettings,
    "dev": DevelopmentSettings,
    "production": ProductionSettings,
    "prod": ProductionSettings,
    "test": TestSettings,
    "testing": TestSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Return the Settings subclass named by APP_ENV, built once per process."""
    env = os.getenv("APP_ENV", "production").lower()
    return ENVIRONMENTS.get(env, ProductionSettings)()
