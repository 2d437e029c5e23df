"""Lectura/escritura de `agxcl.config.json`.

Único módulo que toca el fichero en disco; el resolver trabaja sobre el
`ProjectConfig` ya validado que devuelve `load_project_config`.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from core.domain.errors import ConfigError, ConfigNotFound
from core.domain.models import ProjectConfig

CONFIG_FILENAME = "agxcl.config.json"


def find_project_config(start: Path | None = None, filename: str = CONFIG_FILENAME) -> Path:
    """Return the config path in `start` (default: cwd), existing or not."""

    return (start or Path.cwd()) / filename


def load_project_config(path: Path) -> ProjectConfig:
    if not path.is_file():
        raise ConfigNotFound(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {path}: expected a JSON object")
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(f"Invalid config in {path}: {location}: {first.get('msg')}") from exc


def write_project_config(config: ProjectConfig, path: Path) -> Path:
    """Write the config as stable, indented JSON."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_document(), indent=2) + "\n", encoding="utf-8")
    return path
