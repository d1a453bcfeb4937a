from __future__ import annotations

import dataclasses
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigParseError, ConfigReadError, InvalidConfig, MissingApiKey


logger = logging.getLogger(__name__)

DEFAULT_DIR = Path(os.path.expanduser("~/.config/ellm"))
DEFAULT_CONFIG_PATH = DEFAULT_DIR / "config.toml"
ENV_API_KEY = "ANTHROPIC_API_KEY"

DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 4096

# Optional settings a config file may carry next to api_key.
_FILE_FIELDS = {
    "base_url": (str,),
    "model": (str,),
    "max_tokens": (int,),
    "temperature": (int, float),
    "timeout": (int, float),
}


@dataclass(frozen=True)
class Config:
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = 0.0
    timeout: Optional[float] = None

    def with_model(self, model: str) -> "Config":
        return dataclasses.replace(self, model=model)

    def with_max_tokens(self, max_tokens: int) -> "Config":
        return dataclasses.replace(self, max_tokens=max_tokens)

    def validate(self) -> None:
        if not self.api_key:
            raise InvalidConfig("API key is empty")
        if not self.api_key.startswith("sk-ant-"):
            logger.warning("API key does not start with 'sk-ant-'. This may be invalid.")

    def masked_key(self) -> str:
        return mask(self.api_key)


def mask(value: str, keep: int = 4) -> str:
    if not value:
        return ""
    if len(value) <= keep * 2:
        return "*" * len(value)
    return value[:keep] + "*" * (len(value) - keep * 2) + value[-keep:]


@dataclass
class ConfigResolver:
    """Resolve a :class:`Config` from the command line, environment and config file.

    Sources are tried in order and the first non-empty API key wins:

    1. the ``api_key`` passed to :meth:`resolve`
    2. the ``ANTHROPIC_API_KEY`` environment variable
    3. ``api_key`` in the TOML file at ``path``

    ``env`` defaults to ``os.environ``; tests pass a plain dict instead.
    """

    path: Path = DEFAULT_CONFIG_PATH
    env: Optional[Mapping[str, str]] = None

    def _env(self) -> Mapping[str, str]:
        return os.environ if self.env is None else self.env

    def resolve(self, api_key: Optional[str] = None) -> Config:
        if api_key:
            logger.debug("Using API key from command line")
            return Config(api_key=api_key)

        env_key = self._env().get(ENV_API_KEY)
        if env_key:
            logger.debug("Using API key from %s", ENV_API_KEY)
            return Config(api_key=env_key)

        data = self.read_file()
        if data and data.get("api_key"):
            logger.debug("Using API key from %s", self.path)
            return self._from_file_data(data)

        raise MissingApiKey()

    def read_file(self) -> Optional[Dict[str, Any]]:
        """Parse the config file, or return None when it does not exist."""
        path = Path(self.path)
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except FileNotFoundError:
            logger.debug("No config file at %s", path)
            return None
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigParseError(f"Failed to parse config file {path}: {e}") from e
        except OSError as e:
            raise ConfigReadError(f"Cannot read config file {path}: {e}") from e

        api_key = data.get("api_key")
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigParseError(f"Failed to parse config file {path}: api_key must be a string")
        for name, types in _FILE_FIELDS.items():
            value = data.get(name)
            # bool is an int subclass, but never a valid number here
            if value is not None and (isinstance(value, bool) or not isinstance(value, types)):
                raise ConfigParseError(f"Failed to parse config file {path}: invalid type for {name}")
        return data

    @staticmethod
    def _from_file_data(data: Dict[str, Any]) -> Config:
        settings = {name: data[name] for name in _FILE_FIELDS if name in data}
        if "temperature" in settings:
            settings["temperature"] = float(settings["temperature"])
        if "timeout" in settings:
            settings["timeout"] = float(settings["timeout"])
        return Config(api_key=data["api_key"], **settings)


def load_config(
    api_key: Optional[str] = None,
    path: Path = DEFAULT_CONFIG_PATH,
    env: Optional[Mapping[str, str]] = None,
) -> Config:
    return ConfigResolver(path=path, env=env).resolve(api_key)
