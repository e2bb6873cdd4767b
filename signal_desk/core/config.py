"""
Load configuration from config.yaml and .env. Env values override the file.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_bool(key: str, default: bool = False) -> bool:
        return os.getenv(key, str(default)).lower() in ("true", "1", "yes")

    files = data.get("data") or {}
    session = data.get("session") or {}
    logging_cfg = data.get("logging") or {}

    closed_view = env("CLOSED_VIEW", str(session.get("closed_view") or "usd")).lower()
    if closed_view not in ("usd", "pct"):
        closed_view = "usd"

    return Config(
        signals_path=env("SIGNALS_PATH", files.get("signals_path") or "signals.json"),
        closed_trades_path=env("CLOSED_TRADES_PATH", files.get("closed_trades_path") or "closed_trades.json"),
        dry_run=env_bool("DRY_RUN", session.get("dry_run", False)),
        closed_view=closed_view,
        log_level=env("LOG_LEVEL", logging_cfg.get("level") or "INFO"),
        log_dir=logging_cfg.get("log_dir"),
        log_file=logging_cfg.get("log_file") or "signal_desk.log",
        project_root=root,
    )


class Config:
    """Unified configuration. Immutable after load."""

    __slots__ = (
        "signals_path", "closed_trades_path",
        "dry_run", "closed_view",
        "log_level", "log_dir", "log_file",
        "project_root",
    )

    def __init__(
        self,
        signals_path: str = "signals.json",
        closed_trades_path: str = "closed_trades.json",
        dry_run: bool = False,
        closed_view: str = "usd",
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        log_file: str = "signal_desk.log",
        project_root: Optional[Path] = None,
    ):
        self.signals_path = signals_path
        self.closed_trades_path = closed_trades_path
        self.dry_run = dry_run
        self.closed_view = closed_view
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_file = log_file
        self.project_root = Path(project_root) if project_root else Path.cwd()

    def resolve(self, source: str) -> str:
        """URLs pass through; relative file paths resolve against the project root."""
        if source.startswith(("http://", "https://")):
            return source
        p = Path(source)
        return str(p if p.is_absolute() else self.project_root / p)
