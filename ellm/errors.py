from __future__ import annotations

from typing import Optional


class EllmError(Exception):
    """Base class for every error raised by the ellm library."""


# -----------------
# Configuration
# -----------------


class ConfigError(EllmError):
    pass


class MissingApiKey(ConfigError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "API key not found. Provide --api-key, set ANTHROPIC_API_KEY, "
            "or add api_key to ~/.config/ellm/config.toml"
        )


class ConfigParseError(ConfigError):
    pass


class ConfigReadError(ConfigError):
    """The config file exists but could not be read (permissions, not a file)."""


class InvalidConfig(ConfigError):
    pass


# -----------------
# Remote API
# -----------------


class ApiError(EllmError):
    pass


class NetworkError(ApiError):
    pass


class HttpStatusError(ApiError):
    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        self.message = message
        text = f"API returned HTTP {status}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class AuthenticationError(HttpStatusError):
    pass


class RateLimitError(HttpStatusError):
    pass


class DecodeError(ApiError):
    pass
