# === FILE: domain_scout/config.py ===
"""
Загрузка и валидация конфигурации DomainScout.
Схема описана через Pydantic, файл конфига может быть YAML или JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

DEFAULT_REGISTRY_URL = "https://raw.is-a.dev/v2.json"


class ScannerConfig(BaseModel):
    """Конфигурация одного прогона пробера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    registry_url: HttpUrl = Field(DEFAULT_REGISTRY_URL, description="URL JSON-реестра доменов.")
    registry_timeout: float = Field(30.0, gt=0, description="Таймаут запроса к реестру (секунд).")
    concurrency: int = Field(20, ge=1, description="Число одновременно работающих воркеров.")
    timeout: float = Field(5.0, gt=0, description="Жёсткий таймаут на один probe (секунд).")
    user_agent: str = Field("DomainScout/0.1", min_length=1, description="Заголовок User-Agent.")
    output: Path = Field(Path("domains.json"), description="Файл для сохранения результатов.")
    compress: bool = Field(False, description="Сжимать результаты gzip перед записью.")
    persist_mode: Literal["eager", "batch"] = Field(
        "eager", description="eager: сохранять после каждого домена; batch: один раз в конце."
    )
    resume: bool = Field(False, description="Продолжить с ранее сохранённого снимка.")

    @field_validator("output", mode="before")
    def _expand_output(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None]) -> ScannerConfig:
    """
    Читает YAML или JSON и возвращает проверенный ScannerConfig.

    Без явного пути используется configs/default.yaml, а если его нет,
    значения по умолчанию. Явно указанный, но отсутствующий файл даёт
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return ScannerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScannerConfig(**data)


__all__ = ["ScannerConfig", "load_config", "DEFAULT_REGISTRY_URL"]
