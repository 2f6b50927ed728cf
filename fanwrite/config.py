from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from fanwrite.coordinator import DEFAULT_OBJECT_SIZE, DEFAULT_TIMEOUT
from fanwrite.errors import ConfigurationError

STORAGE_BACKENDS = ("s3", "memory")


@dataclass
class Config:
    bucket: str
    host: str = "0.0.0.0"
    port: int = 8080
    storage: str = "s3"
    region: str = "us-east-1"
    access_key_id: str | None = None
    access_key_secret: str | None = None
    endpoint: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    object_size: int = DEFAULT_OBJECT_SIZE
    log_level: str = "INFO"
    json_logging: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Read the configuration from ``environ`` (``os.environ`` by default).

        Raises ConfigurationError for a missing bucket or malformed values.
        """
        env = os.environ if environ is None else environ
        bucket = env.get("BUCKET_NAME", "").strip()
        if not bucket:
            raise ConfigurationError("BUCKET_NAME environment variable not set")

        storage = env.get("STORAGE_BACKEND", "s3").lower()
        if storage not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"unknown STORAGE_BACKEND {storage!r}",
                details={"allowed": ", ".join(STORAGE_BACKENDS)},
            )

        timeout = _parse(env, "WRITE_TIMEOUT", float, DEFAULT_TIMEOUT)
        object_size = _parse(env, "OBJECT_SIZE", int, DEFAULT_OBJECT_SIZE)
        if timeout <= 0:
            raise ConfigurationError("WRITE_TIMEOUT must be positive")
        if object_size <= 0:
            raise ConfigurationError("OBJECT_SIZE must be positive")

        return cls(
            bucket=bucket,
            host=env.get("HOST", "0.0.0.0"),
            port=_parse(env, "PORT", int, 8080),
            storage=storage,
            region=env.get("AWS_REGION", "us-east-1"),
            access_key_id=env.get("AWS_ACCESS_KEY_ID") or None,
            access_key_secret=env.get("AWS_SECRET_ACCESS_KEY") or None,
            endpoint=env.get("S3_ENDPOINT_URL") or None,
            timeout=timeout,
            object_size=object_size,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            json_logging=env.get("JSON_LOGGING", "false").lower() in {"true", "1", "yes"},
        )


def _parse(env: Mapping[str, str], name: str, type_: type, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return type_(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
