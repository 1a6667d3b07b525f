"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from meal_lens.adapters.file_storage import FileKeyValueStorage
from meal_lens.adapters.openai_analysis_client import OpenAIAnalysisClient
from meal_lens.adapters.supabase_storage import SupabaseKeyValueStorage
from meal_lens.config import Settings, parse_timeout
from meal_lens.domain.errors import ConfigurationError
from meal_lens.services.analysis import AnalysisService
from meal_lens.services.images import ImagePreprocessor
from meal_lens.services.meals import KeyValueStorage, MealStore
from meal_lens.services.submissions import SubmissionWorkflow


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_store: MealStore
    analysis_service: AnalysisService
    submission_workflow: SubmissionWorkflow
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the configured durable storage backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStorage(client=client, table=settings.supabase_table)
    return FileKeyValueStorage(directory=Path(settings.storage_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    meal_store = MealStore(
        storage=build_storage(resolved_settings), key=resolved_settings.storage_key
    )
    openai_client = (
        OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        temperature=resolved_settings.openai_temperature,
        store=resolved_settings.openai_store,
    )
    submission_workflow = SubmissionWorkflow(
        analysis_service=analysis_service,
        preprocessor=ImagePreprocessor(
            target_width=resolved_settings.image_target_width,
            quality=resolved_settings.image_quality,
        ),
        store=meal_store,
        timeout_seconds=parse_timeout(resolved_settings.analysis_timeout_seconds),
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_store=meal_store,
        analysis_service=analysis_service,
        submission_workflow=submission_workflow,
        close_resources=close_resources,
    )
