from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

DEFAULT_PART_URL_EXPIRES_SECONDS = 15 * 60


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    S3_BUCKET_NAME: str = ""
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_ADDRESSING_STYLE: str = "path"
    PART_URL_EXPIRES_SECONDS: int = DEFAULT_PART_URL_EXPIRES_SECONDS
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    ENVIRONMENT: str = "dev"
    CORS_ENABLED: bool = True
    CORS_ORIGINS: list[str] = field(default_factory=lambda: ["*"])
    ENABLE_METRICS: bool = True
    TRACE_HTTP: bool = False
    LOG_LEVEL: str = "INFO"

    def __post_init__(self) -> None:
        if self.PART_URL_EXPIRES_SECONDS <= 0:
            raise ValueError("PART_URL_EXPIRES_SECONDS must be positive.")
        if self.S3_ADDRESSING_STYLE not in {"path", "virtual", "auto"}:
            raise ValueError(
                "S3_ADDRESSING_STYLE must be one of 'path', 'virtual' or 'auto'."
            )

    @property
    def is_dev(self) -> bool:
        return self.ENVIRONMENT.lower() in {"dev", "development", "local"}

    def missing_storage_settings(self) -> list[str]:
        missing: list[str] = []
        for name in ("S3_BUCKET_NAME", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY"):
            if not getattr(self, name):
                missing.append(name)
        return missing

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file(ENV_FILE)
        cors_origins_env = os.environ.get("CORS_ORIGIN")
        if cors_origins_env is None:
            cors_origins = ["*"]
        else:
            cors_origins = _as_list(cors_origins_env)

        return cls(
            S3_BUCKET_NAME=os.environ.get("S3_BUCKET_NAME", cls.S3_BUCKET_NAME),
            S3_REGION=os.environ.get("S3_REGION") or cls.S3_REGION,
            S3_ENDPOINT=os.environ.get("S3_ENDPOINT") or None,
            S3_ACCESS_KEY_ID=os.environ.get("S3_ACCESS_KEY_ID") or None,
            S3_SECRET_ACCESS_KEY=os.environ.get("S3_SECRET_ACCESS_KEY") or None,
            S3_ADDRESSING_STYLE=(
                os.environ.get("S3_ADDRESSING_STYLE", cls.S3_ADDRESSING_STYLE)
                .strip()
                .lower()
            ),
            PART_URL_EXPIRES_SECONDS=int(
                os.environ.get(
                    "PART_URL_EXPIRES_SECONDS", cls.PART_URL_EXPIRES_SECONDS
                )
            ),
            HOST=os.environ.get("HOST", cls.HOST),
            PORT=int(os.environ.get("PORT", cls.PORT)),
            ENVIRONMENT=os.environ.get("NODE_ENV", cls.ENVIRONMENT),
            CORS_ENABLED=_as_bool(os.environ.get("CORS_ENABLED"), cls.CORS_ENABLED),
            CORS_ORIGINS=cors_origins,
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
            TRACE_HTTP=_as_bool(os.environ.get("TRACE_HTTP"), cls.TRACE_HTTP),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL).upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
