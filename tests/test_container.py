"""Tests for container wiring."""

import asyncio
from pathlib import Path

import pytest

from meal_lens.adapters.file_storage import FileKeyValueStorage
from meal_lens.config import Settings, parse_timeout
from meal_lens.containers import build_container, build_storage
from meal_lens.domain.errors import ConfigurationError


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.submission_workflow.store is container.meal_store
    assert container.analysis_service.client is not None
    assert container.submission_workflow.timeout_seconds == 60.0
    asyncio.run(container.close_resources())


def test_build_container_without_api_key(tmp_path: Path) -> None:
    container = build_container(
        Settings(openai_api_key=None, storage_path=str(tmp_path))
    )

    assert container.analysis_service.client is None
    asyncio.run(container.close_resources())


def test_file_backend_uses_storage_path(tmp_path: Path) -> None:
    storage = build_storage(Settings(storage_path=str(tmp_path)))

    assert isinstance(storage, FileKeyValueStorage)
    assert storage.directory == tmp_path


def test_supabase_backend_requires_credentials() -> None:
    settings = Settings(
        storage_backend="supabase", supabase_url=None, supabase_service_key=None
    )

    with pytest.raises(ConfigurationError):
        build_storage(settings)


def test_parse_timeout_disables_non_positive_values() -> None:
    assert parse_timeout(None) is None
    assert parse_timeout(0) is None
    assert parse_timeout(-1) is None
    assert parse_timeout(12.5) == 12.5
