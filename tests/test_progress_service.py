# tests/test_progress_service.py
import pytest

from tests.conftest import make_question


def start(service, user_id="learner-1", subject="math", topic="addition", answers=(2, 4), mode="playground"):
    questions = [make_question({"value": v}) for v in answers]
    return service.start_session(user_id, subject, topic, questions, mode=mode)


@pytest.mark.asyncio
async def test_history_lists_sessions_with_answers(session_service, progress_service):
    done = start(session_service)
    await session_service.submit_answer(done.session_id, done.question_ids[0], {"value": 2}, hints_used=1)
    await session_service.submit_answer(done.session_id, done.question_ids[1], {"value": 5})
    open_session = start(session_service, topic="subtraction")

    history = {entry.id: entry for entry in progress_service.get_history("learner-1")}
    assert set(history) == {done.session_id, open_session.session_id}

    finished = history[done.session_id]
    assert finished.status == "completed"
    assert finished.ended_at is not None
    assert finished.stats.total_answered == 2
    assert finished.stats.correct_count == 1
    assert finished.stats.incorrect_count == 1
    assert finished.stats.accuracy == 50
    assert [q.is_correct for q in finished.questions] == [True, False]
    assert finished.questions[0].hints_used == 1
    # raw 8, accuracy 50% -> x1.0
    assert finished.score == 8

    pending = history[open_session.session_id]
    assert pending.status == "in_progress"
    assert pending.stats.total_answered == 0
    assert all(q.user_answer is None for q in pending.questions)


def test_history_of_unknown_user_is_empty(progress_service):
    assert progress_service.get_history("nobody") == []


@pytest.mark.asyncio
async def test_active_session(session_service, progress_service):
    assert progress_service.get_active_session("learner-1") is None

    started = start(session_service, answers=(3,))
    assert progress_service.get_active_session("learner-1").session_id == started.session_id
    assert progress_service.get_active_session("learner-1", mode="quiz") is None

    await session_service.submit_answer(started.session_id, started.question_ids[0], {"value": 3})
    assert progress_service.get_active_session("learner-1") is None


@pytest.mark.asyncio
async def test_paused_sessions(session_service, progress_service):
    started = start(session_service, answers=(1, 2, 3))
    await session_service.submit_answer(started.session_id, started.question_ids[0], {"value": 1})
    session_service.pause(started.session_id)

    paused = progress_service.list_paused_sessions("learner-1")
    assert len(paused) == 1
    assert paused[0].id == started.session_id
    assert paused[0].current_question_index == 1
    assert paused[0].answered_count == 1
    assert paused[0].correct_count == 1
    assert progress_service.get_active_session("learner-1") is None

    session_service.resume(started.session_id)
    assert progress_service.list_paused_sessions("learner-1") == []


@pytest.mark.asyncio
async def test_user_progress_tracks_skills(session_service, progress_service):
    assert progress_service.get_user_progress("learner-1") is None

    math = start(session_service, answers=(1, 2))
    await session_service.submit_answer(math.session_id, math.question_ids[0], {"value": 1}, hints_used=2, time_ms=1000)
    await session_service.submit_answer(math.session_id, math.question_ids[1], {"value": 2}, time_ms=2000)

    english = session_service.start_session(
        "learner-1", "english", "verbs", [make_question({"type": "text", "value": "went"}, type="fill_in_blank")]
    )
    await session_service.submit_answer(english.session_id, english.question_ids[0], {"type": "text", "value": "goed"})

    progress = progress_service.get_user_progress("learner-1")
    # math: (6 + 10) * 1.5, english: 0
    assert progress.total_score == 24

    skills = {(s.subject, s.topic): s for s in progress.skills}
    addition = skills[("math", "addition")]
    assert addition.total_questions == 2
    assert addition.correct_questions == 2
    assert addition.accuracy == 100
    assert addition.avg_hints_used == 1.0

    verbs = skills[("english", "verbs")]
    assert verbs.total_questions == 1
    assert verbs.correct_questions == 0
    assert verbs.accuracy == 0


@pytest.mark.asyncio
async def test_has_completed_sessions(session_service, progress_service):
    assert progress_service.has_completed_sessions("learner-1") is False

    started = start(session_service, answers=(3,))
    assert progress_service.has_completed_sessions("learner-1") is False

    await session_service.submit_answer(started.session_id, started.question_ids[0], {"value": 30})
    assert progress_service.has_completed_sessions("learner-1") is True
    assert progress_service.has_completed_sessions("learner-1", mode="playground") is True
    assert progress_service.has_completed_sessions("learner-1", mode="quiz") is False
    assert progress_service.has_completed_sessions("learner-2") is False
