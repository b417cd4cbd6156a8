from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - HOST / PORT: bind address for the HTTP server (default 0.0.0.0:3000)
    - ADMIN_PASSWORD: shared admin password compared in plaintext (default '666')
    - JWT_SECRET: HS256 signing secret for session tokens
    - TOKEN_TTL_HOURS: token lifetime in hours (default 24)
    - PERSISTENCE_BACKEND: 'json' (default) or 'memory'
    - DATA_DIR: directory holding the posts file. Default './data'
    - POSTS_FILE: path to the posts JSON file. Default '<DATA_DIR>/posts.json'
    - UPLOAD_DIR: directory for uploaded files. Default './uploads'
    - PUBLIC_DIR: directory of the static frontend bundle. Default './public'
    - MAX_UPLOAD_BYTES: upload size ceiling in bytes (default 10 MiB)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level (default INFO)
    """

    host: str
    port: int
    admin_password: str
    jwt_secret: str
    token_ttl_hours: int
    persistence_backend: str
    data_dir: str
    posts_file: str
    upload_dir: str
    public_dir: str
    max_upload_bytes: int
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "json").strip().lower()
    if backend not in {"json", "memory"}:
        backend = "json"

    data_dir = _get_env("DATA_DIR", "./data").strip()
    posts_file = _get_env("POSTS_FILE", os.path.join(data_dir, "posts.json")).strip()

    return Settings(
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
        admin_password=_get_env("ADMIN_PASSWORD", "666"),
        jwt_secret=_get_env("JWT_SECRET", "blog-secret-key"),
        token_ttl_hours=_parse_int(_get_env("TOKEN_TTL_HOURS", "24"), 24),
        persistence_backend=backend,
        data_dir=data_dir,
        posts_file=posts_file,
        upload_dir=_get_env("UPLOAD_DIR", "./uploads").strip(),
        public_dir=_get_env("PUBLIC_DIR", "./public").strip(),
        max_upload_bytes=_parse_int(_get_env("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)), 10 * 1024 * 1024),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
