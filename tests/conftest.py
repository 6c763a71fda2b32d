"""Shared test fixtures for the miaw test suite."""

import json
import os
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from miaw.transport.executor import RequestExecutor

BASE_URL = "https://test.example.com"
ORG_ID = "test-org"
DEVELOPER_NAME = "test-developer"

Route = httpx.Response | Callable[[httpx.Request], Any]


class FakeMessagingService:
    """In-memory stand-in for the messaging service.

    Routes are keyed by (method, path). Every request is recorded so tests
    can inspect headers, query strings and JSON bodies.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Route] = {}

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        *,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Register a canned response."""
        if json_body is not None:
            self._routes[(method, path)] = httpx.Response(
                status_code, json=json_body, headers=headers
            )
        else:
            self._routes[(method, path)] = httpx.Response(
                status_code, content=content or b"", headers=headers
            )

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        """Register a callable (sync or async) producing the response."""
        self._routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404)
        if isinstance(route, httpx.Response):
            return route
        return route(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_service() -> FakeMessagingService:
    """Create an empty fake messaging service."""
    return FakeMessagingService()


@pytest.fixture
async def http_client(
    fake_service: FakeMessagingService,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """httpx client wired to the fake service."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_service.handle))
    yield client
    await client.aclose()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger spy exposing debug/info/warning/error."""
    return MagicMock()


@pytest.fixture
def executor(http_client: httpx.AsyncClient, mock_logger: MagicMock) -> RequestExecutor:
    """Executor pointed at the fake service with no deadline."""
    return RequestExecutor(http_client, mock_logger, base_url=BASE_URL)


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic id factory: id-1, id-2, ..."""
    counter = iter(range(1, 10_000))

    def _next() -> str:
        return f"id-{next(counter)}"

    return _next


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "base_url = 'https://x'",
                "development.toml": "request_timeout = 5.0",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"MIAW_ORG_ID": "org"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings and loaded TOML before and after each test."""
    from miaw.config import get_settings
    from miaw.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})
