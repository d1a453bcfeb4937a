"""Thin client for the Anthropic Messages API.

    from ellm import Client, load_config

    with Client(load_config()) as client:
        print(client.send_message("Hello, Claude!"))
"""

from .client import Client
from .config import Config, ConfigResolver, load_config
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigError,
    ConfigParseError,
    ConfigReadError,
    DecodeError,
    EllmError,
    HttpStatusError,
    InvalidConfig,
    MissingApiKey,
    NetworkError,
    RateLimitError,
)
from .llm import Message, Messages
from .version import __version__

__all__ = [
    "ApiError",
    "AuthenticationError",
    "Client",
    "Config",
    "ConfigError",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigResolver",
    "DecodeError",
    "EllmError",
    "HttpStatusError",
    "InvalidConfig",
    "Message",
    "Messages",
    "MissingApiKey",
    "NetworkError",
    "RateLimitError",
    "__version__",
    "load_config",
]
