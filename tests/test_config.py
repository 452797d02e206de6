from __future__ import annotations

import pytest

from rxstores.config import StoresConfig
from rxstores.exceptions import StoresConfigError


def test_defaults() -> None:
    config = StoresConfig()

    assert config.poll_interval == 5.0
    assert config.poll_retries == 3
    assert config.poll_retry_delay == 1.0
    assert config.page_size == 10
    assert config.debounce_window == 0.3
    assert config.password_min_length == 6
    assert config.users_url == "https://jsonplaceholder.typicode.com/users"
    assert config.posts_url == "https://jsonplaceholder.typicode.com/posts"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RXSTORES_API_BASE_URL", "http://localhost:3000/")
    monkeypatch.setenv("RXSTORES_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("RXSTORES_PAGE_SIZE", "25")

    config = StoresConfig.from_env()

    assert config.users_url == "http://localhost:3000/users"
    assert config.poll_interval == 2.5
    assert config.page_size == 25


def test_overrides_take_precedence_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RXSTORES_PAGE_SIZE", "25")
    monkeypatch.setenv("RXSTORES_PRODUCTS_URL", "http://env/products")

    config = StoresConfig.from_env(page_size=5, products_url="http://override/products")

    assert config.page_size == 5
    assert config.products_url == "http://override/products"


def test_from_env_rejects_unparsable_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RXSTORES_POLL_RETRIES", "three")

    with pytest.raises(StoresConfigError, match="RXSTORES_POLL_RETRIES"):
        StoresConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval": 0},
        {"poll_retries": -1},
        {"page_size": 0},
        {"debounce_window": -0.1},
        {"password_min_length": 0},
    ],
)
def test_out_of_range_values_are_rejected(kwargs: dict) -> None:
    with pytest.raises(StoresConfigError):
        StoresConfig(**kwargs)
