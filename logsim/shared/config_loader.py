"""Пошук та завантаження YAML конфігурації симулятора."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from logsim.shared.errors import ConfigError

log = logging.getLogger(__name__)

CONFIG_ENV = "LOGSIM_CONFIG"


def resolve_config_path(path: str | Path | None) -> Path | None:
    """Явний шлях має пріоритет над ``$LOGSIM_CONFIG``; None означає вбудовані значення."""
    if path is not None:
        return Path(path)
    from_env = os.environ.get(CONFIG_ENV, "").strip()
    if from_env:
        log.debug("Config path taken from $%s: %s", CONFIG_ENV, from_env)
        return Path(from_env)
    return None


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл з mapping на верхньому рівні.

    Порожній файл дає порожній dict.

    Raises:
        FileNotFoundError: Якщо файл не знайдено.
        ConfigError: Якщо YAML некоректний або верхній рівень не є mapping.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Config not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {p} must be a mapping, got {type(data).__name__}")
    log.debug("Loaded config %s (sections: %s)", p.name, ", ".join(map(str, data)))
    return data
