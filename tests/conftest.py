"""Shared test fixtures."""

import io
from dataclasses import dataclass, field

import pytest
from PIL import Image

from meal_lens.config import Settings
from meal_lens.containers import AppContainer
from meal_lens.domain.meals import Macros, MealRecord
from meal_lens.domain.submissions import SelectedImage
from meal_lens.services.analysis import AnalysisClient, AnalysisService
from meal_lens.services.images import ImagePreprocessor
from meal_lens.services.meals import KeyValueStorage, MealStore
from meal_lens.services.submissions import SubmissionWorkflow

TEMPLATE_ANSWER = (
    "# ⚡ 540 Calories\n**Protein:** 30g  |  **Carbs:** 60g  |  **Fat:** 20g"
)


def make_image_bytes(
    width: int = 1200,
    height: int = 800,
    image_format: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """Render a solid-colour image in the given format."""
    colors = {"RGBA": (200, 120, 40, 128), "L": 128}
    color = colors.get(mode, (200, 120, 40))
    image = Image.new(mode, (width, height), color)
    output = io.BytesIO()
    image.save(output, format=image_format)
    return output.getvalue()


def make_meal(
    meal_id: str,
    macros: Macros | None = None,
    timestamp: int = 1_700_000_000_000,
) -> MealRecord:
    """Build a meal record with a placeholder image."""
    return MealRecord(
        id=meal_id,
        timestamp=timestamp,
        image="data:image/jpeg;base64,ZmFrZQ==",
        macros=macros or Macros(calories=100, protein=5, carbs=10, fat=4),
        raw_text=TEMPLATE_ANSWER,
    )


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    """In-memory key-value storage for tests."""

    values: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.values[key] = value


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed answer or raising."""

    answer: str = TEMPLATE_ANSWER
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        image_data_url: str,
        prompt: str,
        reasoning_effort: str | None = None,
        temperature: float | None = None,
        store: bool = False,
    ) -> str:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "prompt": prompt}
        )
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        storage_backend="file",
        storage_path="unused",
    )


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def meal_store(storage: InMemoryKeyValueStorage) -> MealStore:
    return MealStore(storage=storage)


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def analysis_service(analysis_client: FakeAnalysisClient) -> AnalysisService:
    return AnalysisService(client=analysis_client, model="gpt-5.2")


@pytest.fixture
def workflow(
    analysis_service: AnalysisService, meal_store: MealStore
) -> SubmissionWorkflow:
    return SubmissionWorkflow(
        analysis_service=analysis_service,
        preprocessor=ImagePreprocessor(),
        store=meal_store,
    )


@pytest.fixture
def selected_image() -> SelectedImage:
    return SelectedImage(
        content=make_image_bytes(), media_type="image/png", filename="lunch.png"
    )


@pytest.fixture
def container(
    settings: Settings,
    meal_store: MealStore,
    analysis_service: AnalysisService,
    workflow: SubmissionWorkflow,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_store=meal_store,
        analysis_service=analysis_service,
        submission_workflow=workflow,
        close_resources=close_resources,
    )
