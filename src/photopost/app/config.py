from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from photopost.app.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "PHOTOPOST_"
CONFIG_PATH_ENV = "PHOTOPOST_CONFIG"
DEFAULT_BASE_URL = "https://29.javascript.htmlacademy.pro/kekstagram"


@dataclass(frozen=True)
class AppConfig:
    """
    Settings for the photo service client and the GUI.

    base_url:
        Service root. Photos are read from ``{base_url}/data``, uploads are POSTed to ``{base_url}``.
    timeout:
        Seconds to wait for the service.
    debounce_ms:
        Delay before a gallery filter change is applied.
    random_photo_limit:
        Number of photos shown by the "random" filter.
    comments_batch_size:
        Comments revealed per "Load more" click in the full view.
    preview_max_side:
        Longest side of the decoded preview image (keeps slider redraws fast).
    log_level:
        Name of the logging level for ``logging.basicConfig``.
    """
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    debounce_ms: int = 500
    random_photo_limit: int = 10
    comments_batch_size: int = 5
    preview_max_side: int = 800
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None,
             environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Defaults, then the JSON settings file (if any), then PHOTOPOST_* environment variables."""
        config = cls()
        if path is not None:
            config = config.merged(_read_settings_file(Path(path)))
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key in env:
                overrides[f.name] = env[key]
        return config.merged(overrides)

    def merged(self, values: Mapping[str, Any]) -> "AppConfig":
        known = {f.name for f in fields(self)}
        changes = {}
        for name, raw in values.items():
            if name not in known:
                logger.debug("Ignoring unknown setting %r", name)
                continue
            changes[name] = _coerce(name, getattr(self, name), raw)
        config = replace(self, **changes)
        config.check()
        return config

    def check(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")
        if self.debounce_ms < 0:
            raise ConfigurationError("debounce_ms must be >= 0")
        for name in ("random_photo_limit", "comments_batch_size", "preview_max_side"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be > 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level!r}")


def _coerce(name: str, current: Any, raw: Any) -> Any:
    try:
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e
    return str(raw)


def _read_settings_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not contain an object; using defaults", path)
        return {}
    return data
