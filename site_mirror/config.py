# === FILE: site_mirror/config.py ===
"""
Загрузка и валидация конфигурации зеркалирования SiteMirror.
Схема описана моделью Pydantic; источники: YAML/JSON-файл и опции CLI.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from site_mirror.errors import ConfigError

__all__ = ("MirrorConfig", "load_config", "build_config", "default_workers")


def default_workers() -> int:
    """Число доступных процессоров хоста (не меньше 1)."""
    return os.cpu_count() or 1


class MirrorConfig(BaseModel):
    """Конфигурация одного запуска зеркалирования."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., min_length=1, description="Стартовый URL (seed).")
    directory_path: Path = Field(..., description="Корневая папка зеркала.")
    num_workers: int = Field(default_factory=default_workers, ge=1, description="Макс. число параллельных загрузок.")
    fetch_timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteMirror/1.0", min_length=1, description="Заголовок User-Agent.")

    @field_validator("start_url")
    def _check_start_url(cls, v: str) -> str:
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"start_url must be an absolute http(s) URL, got {v!r}")
        return v

    @field_validator("directory_path", mode="before")
    def _expand_directory(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("directory_path must not be empty")
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def _read_mapping(path: Union[str, Path]) -> dict[str, Any]:
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path]) -> MirrorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект MirrorConfig.
    Отсутствующий файл → FileNotFoundError, неверная схема → ValidationError.
    """
    return MirrorConfig(**_read_mapping(path))


def build_config(path: Union[str, Path, None] = None, **overrides: Optional[Any]) -> MirrorConfig:
    """
    Собирает конфигурацию из необязательного файла и опций CLI.

    Значения *overrides*, равные ``None``, игнорируются. Любая проблема
    (нет файла, битый формат, пропущен start_url/directory_path)
    превращается в :class:`ConfigError`.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            data.update(_read_mapping(path))
        except (OSError, ValueError, TypeError) as exc:
            raise ConfigError(f"cannot read config {path}: {exc}") from exc

    data.update({k: v for k, v in overrides.items() if v is not None})

    for required in ("start_url", "directory_path"):
        if not data.get(required):
            raise ConfigError(f"{required} is required")

    try:
        return MirrorConfig(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
