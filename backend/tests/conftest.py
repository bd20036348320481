import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client() -> TestClient:
    from planwise.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_in_memory_stores(tmp_path, monkeypatch):
    # Ensure deterministic tests across runs.
    from planwise.services import plan_store
    from planwise.services import run_planner

    # Use a temp data dir for persisted plans in tests
    monkeypatch.setenv("PLANWISE_DATA_DIR", str(tmp_path))

    plan_store._plan_store.clear()
    run_planner._task_store.clear()
    yield


class StubGenerator:
    """Generator that returns canned text (or raises) and records prompts."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture()
def stub_generator():
    return StubGenerator


SAMPLE_PLAN = "\n".join(
    [
        "📜 Study Plan",
        "📅 Monday",
        "☀️ Morning",
        "- ⏰ 08:00 - 09:00: **Review** notes",
        "- ⏰ 09:00 - 10:00: Practice problems",
        "",
        "🌙 Evening",
        "- ⏰ 19:00 - 20:00: Flashcards",
        "💡 Tips for Success",
        "- Take breaks",
        "Stay consistent.",
    ]
)


@pytest.fixture()
def sample_plan() -> str:
    return SAMPLE_PLAN
