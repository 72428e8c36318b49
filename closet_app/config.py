"""Configuration helpers for the closet app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_STORE_BACKEND = "json"
STORE_BACKENDS = ("memory", "json", "sqlite")


@dataclass
class AppConfig:
    """Configuration values for the closet app.

    Only the storage backend is really configurable; everything else about the
    app is fixed. ``store_path`` is a directory for the JSON backend and a
    database file for the SQLite backend.
    """

    store_backend: str = DEFAULT_STORE_BACKEND
    store_path: Optional[str] = None
    log_level: str = "INFO"
    environment: str | None = None

    def __post_init__(self) -> None:
        self.store_backend = self.store_backend.strip().lower()
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unsupported store backend '{self.store_backend}'. Allowed: {list(STORE_BACKENDS)}"
            )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is overridden key by key by environment variables.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        store_backend = get_value("store_backend", DEFAULT_STORE_BACKEND)
        store_path = get_value("store_path")
        log_level = get_value("log_level", "INFO")

        return cls(
            store_backend=str(store_backend or DEFAULT_STORE_BACKEND),
            store_path=store_path,
            log_level=str(log_level or "INFO").upper(),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
