from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

CONFIG_ENV = "ROSTER_CONFIG"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _load_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass
class DatabaseConfig:
    path: str = "shifts.db"
    echo: bool = False


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3001
    api_prefix: str = "/api"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"


def _read_file(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(path)
    elif path.suffix.lower() == ".json":
        raw = _load_json(path)
    else:
        raise ValueError("Unsupported config extension. Use .yaml/.yml or .json")
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return raw


def load_config(path: str | Path | None = None) -> AppConfig:
    """
    Build the application config.

    Values come from the defaults, then the optional YAML/JSON file (``path``
    or $ROSTER_CONFIG), then ROSTER_* environment variables.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV) or None
    raw = _read_file(Path(path)) if path is not None else {}

    db = raw.get("database") or {}
    database = DatabaseConfig(
        path=str(os.environ.get("ROSTER_DB_PATH") or db.get("path", "shifts.db")),
        echo=bool(db.get("echo", False)),
    )

    srv = raw.get("server") or {}
    origins = srv.get("cors_origins", ["*"])
    if isinstance(origins, str):
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    server = ServerConfig(
        host=str(os.environ.get("ROSTER_HOST") or srv.get("host", "127.0.0.1")),
        port=int(os.environ.get("ROSTER_PORT") or srv.get("port", 3001)),
        api_prefix=str(os.environ.get("ROSTER_API_PREFIX", srv.get("api_prefix", "/api"))),
        cors_origins=list(origins),
    )

    log_level = str(os.environ.get("ROSTER_LOG_LEVEL") or raw.get("log_level", "INFO")).upper()

    cfg = AppConfig(database=database, server=server, log_level=log_level)
    _validate_config(cfg)
    return cfg


def _validate_config(cfg: AppConfig) -> None:
    if not cfg.database.path:
        raise ValueError("database.path must not be empty")
    if not 1 <= cfg.server.port <= 65535:
        raise ValueError("server.port must be between 1 and 65535")
    prefix = cfg.server.api_prefix
    if prefix and (not prefix.startswith("/") or prefix.endswith("/")):
        raise ValueError("server.api_prefix must start with '/' and not end with '/'")
    if cfg.log_level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
