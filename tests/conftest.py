import asyncio

import pytest

from quizwiz.database.repository import LearningRepository
from quizwiz.database.session import init_db, make_engine
from quizwiz.schemas.session_schemas import QuestionInput
from quizwiz.services.evaluation_service import EvaluationService, build_registry
from quizwiz.services.progress_service import ProgressService
from quizwiz.services.session_service import SessionService

HINTS = ["Think about it", "Draw it", "Break it down", "Full explanation"]


class FakeLLM:
    """Stands in for the text-generation client: returns `reply` or raises `error`."""

    def __init__(self, reply=None, error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def chat(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append(user_prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


def make_question(correct_answer, type="equation", difficulty="easy", text="What is it?", **kwargs):
    return QuestionInput(
        type=type,
        question_text=text,
        correct_answer=correct_answer,
        difficulty=difficulty,
        hints=list(HINTS),
        **kwargs,
    )


@pytest.fixture
def tmp_engine(tmp_path):
    """Provide a fresh SQLite database for each test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'test_quizwiz.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(tmp_engine):
    return LearningRepository(tmp_engine)


@pytest.fixture
def failing_llm():
    return FakeLLM(error=RuntimeError("model endpoint down"))


@pytest.fixture
def evaluation_service(failing_llm):
    return EvaluationService(registry=build_registry(llm=failing_llm, grading_timeout=1.0))


@pytest.fixture
def session_service(repository, evaluation_service):
    return SessionService(repository=repository, evaluator=evaluation_service)


@pytest.fixture
def progress_service(repository):
    return ProgressService(repository=repository)
