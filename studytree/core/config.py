"""Runtime configuration, read from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Self

DEFAULT_DATABASE_URL = "sqlite:///studytree.db"
ENV_PREFIX = "STUDYTREE_"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Build settings from STUDYTREE_* variables, falling back to the defaults above."""
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get(f"{ENV_PREFIX}DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=env.get(f"{ENV_PREFIX}SQL_ECHO", "").strip().lower() in _TRUTHY,
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").strip().upper(),
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Root logger setup for scripts / app entrypoints. Library code only ever calls logging.getLogger(__name__)."""
    settings = settings or Settings.from_env()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
