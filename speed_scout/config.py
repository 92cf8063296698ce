# === FILE: speed_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации SpeedScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import json
import os
import errno
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

PAGESPEED_API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


class RetryPolicy(BaseModel):
    """Политика повторов для запросов к сервису оценки."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_attempts: Optional[int] = Field(
        10, ge=1, description="Макс. число попыток на итерацию (None: без ограничения)."
    )
    backoff: float = Field(10.0, ge=0, description="Пауза перед повтором (секунд).")
    min_duration: float = Field(
        5.0, ge=0, description="Ответ быстрее этого порога считается подозрительным (секунд)."
    )


class CrawlConfig(BaseModel):
    """Настройки режима обнаружения ссылок."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_pages: int = Field(100, ge=1, description="Жесткий лимит по числу обходимых страниц.")
    max_depth: int = Field(3, ge=0, description="Максимальная глубина обхода ссылок.")
    concurrency: int = Field(10, ge=1, description="Параллельных проверок доступности.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SpeedScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx/429.")
    single_page: bool = Field(
        False, description="Обходить только стартовую страницу (исходное поведение)."
    )


class ScoutConfig(BaseModel):
    """Конфигурация одного запуска измерений."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    count: int = Field(5, ge=1, description="Число измерений на URL.")
    strategy: Literal["mobile", "desktop"] = Field("mobile", description="Тип устройства.")
    api_key: Optional[str] = Field(None, description="Ключ PageSpeed Insights API.")
    api_url: str = Field(PAGESPEED_API_URL, min_length=1, description="Адрес API.")
    request_timeout: float = Field(120.0, gt=0, description="Таймаут одного запроса к API (секунд).")
    run_timeout: Optional[float] = Field(None, gt=0, description="Таймаут всего запуска (секунд).")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    crawl: CrawlConfig = Field(default_factory=CrawlConfig)

    @field_validator("strategy", mode="before")
    def _lower_strategy(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScoutConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScoutConfig.
    Без пути берётся configs/default.yaml, а при его отсутствии значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScoutConfig()
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
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ScoutConfig(**data)


__all__ = ["ScoutConfig", "CrawlConfig", "RetryPolicy", "load_config", "PAGESPEED_API_URL"]
