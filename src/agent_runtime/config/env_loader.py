"""Environment detection and layered ``.env`` loading."""

import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from agent_runtime.telemetry import get_logger

log = get_logger(__name__)


class Environment(str, Enum):
    """Deployment environment of the host application."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


_ENVIRONMENT_ALIASES = {
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
    "staging": Environment.STAGING,
    "stage": Environment.STAGING,
    "test": Environment.TEST,
    "testing": Environment.TEST,
}


def get_environment() -> Environment:
    """Detect the current environment from ``APP_ENV``.

    Read straight from ``os.environ`` because the environment decides which
    ``.env`` files feed the settings object. Unknown or missing values mean
    development.
    """
    return _ENVIRONMENT_ALIASES.get(os.getenv("APP_ENV", "").lower(), Environment.DEVELOPMENT)


def env_files_for(environment: Environment, env_dir: Path) -> list[Path]:
    """List candidate ``.env`` files, lowest priority first.

    Args:
        environment: Environment whose specific files are included.
        env_dir: Directory holding the files.

    Returns:
        ``.env``, ``.env.local``, ``.env.<env>``, ``.env.<env>.local``.
    """
    name = environment.value
    return [
        env_dir / ".env",
        env_dir / ".env.local",
        env_dir / f".env.{name}",
        env_dir / f".env.{name}.local",
    ]


def load_env_files(env_dir: Path | None = None) -> list[Path]:
    """Load ``.env`` files so that more specific files win.

    Variables already present in the process environment always win over
    file values. Files are applied highest priority first for that reason.

    Args:
        env_dir: Directory to search. Defaults to ``AGENT_ENV_DIR`` or the
            current working directory.

    Returns:
        Files that were found and loaded.
    """
    if env_dir is None:
        env_dir = Path(os.getenv("AGENT_ENV_DIR", Path.cwd()))

    environment = get_environment()
    loaded: list[Path] = []
    for env_file in reversed(env_files_for(environment, env_dir)):
        if env_file.exists():
            load_dotenv(env_file, override=False)
            loaded.append(env_file)

    if loaded:
        log.info(
            "env_files_loaded",
            environment=environment.value,
            files=[path.name for path in loaded],
            env_dir=str(env_dir),
        )
    else:
        log.debug("no_env_files_found", environment=environment.value, env_dir=str(env_dir))
    return loaded
