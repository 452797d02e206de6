"""Store configuration for rxstores."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from rxstores._constants import API_BASE_URL, PRODUCTS_URL
from rxstores.exceptions import StoresConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise StoresConfigError(f"{key} must be a number, got {raw!r}") from exc


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise StoresConfigError(f"{key} must be an integer, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class StoresConfig:
    """Store configuration.

    Parameters
    ----------
    api_base_url : str
        Base URL of the JSON API serving ``/users`` and ``/posts``.
    products_url : str
        URL of the product collection used by product search.
    poll_interval : float
        Seconds between dashboard poll ticks.  The first tick fires
        immediately.
    poll_retries : int
        Additional attempts after a failed dashboard fetch.  ``3`` means
        four attempts in total.
    poll_retry_delay : float
        Seconds to wait between dashboard fetch attempts.
    page_size : int
        Number of posts requested per page.
    debounce_window : float
        Seconds a form field must stay unchanged before it is validated.
    search_debounce_window : float
        Seconds a search term must stay unchanged before it is queried.
    password_min_length : int
        Minimum accepted password length.
    http_timeout : float
        Total timeout in seconds for one HTTP request.
    """

    api_base_url: str = API_BASE_URL
    products_url: str = PRODUCTS_URL
    poll_interval: float = 5.0
    poll_retries: int = 3
    poll_retry_delay: float = 1.0
    page_size: int = 10
    debounce_window: float = 0.3
    search_debounce_window: float = 0.4
    password_min_length: int = 6
    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise StoresConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.poll_retries < 0:
            raise StoresConfigError(f"poll_retries must be non-negative, got {self.poll_retries}")
        if self.poll_retry_delay < 0:
            raise StoresConfigError(f"poll_retry_delay must be non-negative, got {self.poll_retry_delay}")
        if self.page_size < 1:
            raise StoresConfigError(f"page_size must be at least 1, got {self.page_size}")
        if self.debounce_window < 0 or self.search_debounce_window < 0:
            raise StoresConfigError("debounce windows must be non-negative")
        if self.password_min_length < 1:
            raise StoresConfigError(f"password_min_length must be at least 1, got {self.password_min_length}")

    @property
    def users_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/users"

    @property
    def posts_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/posts"

    @classmethod
    def from_env(cls, **overrides: Any) -> StoresConfig:
        """Create configuration from environment variables.

        Reads optional ``RXSTORES_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StoresConfig
            Populated configuration.

        Raises
        ------
        StoresConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "RXSTORES_API_BASE_URL": "api_base_url",
            "RXSTORES_PRODUCTS_URL": "products_url",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "RXSTORES_POLL_INTERVAL": "poll_interval",
            "RXSTORES_POLL_RETRY_DELAY": "poll_retry_delay",
            "RXSTORES_DEBOUNCE_WINDOW": "debounce_window",
            "RXSTORES_SEARCH_DEBOUNCE_WINDOW": "search_debounce_window",
            "RXSTORES_HTTP_TIMEOUT": "http_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            if field_name in overrides:
                continue
            fval = _env_float(env, env_key)
            if fval is not None:
                config_kwargs[field_name] = fval

        _ENV_INT_MAP = {
            "RXSTORES_POLL_RETRIES": "poll_retries",
            "RXSTORES_PAGE_SIZE": "page_size",
            "RXSTORES_PASSWORD_MIN_LENGTH": "password_min_length",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            if field_name in overrides:
                continue
            ival = _env_int(env, env_key)
            if ival is not None:
                config_kwargs[field_name] = ival

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
