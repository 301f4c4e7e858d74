"""
Tests for SessionLifecycleController (engine integration with test doubles).
"""

import asyncio
import logging
import threading

import pytest

from conftest import RESUME_TEXT, FakeAnswerEvaluator, FakeQuestionGenerator, RecordingPersistence
from mock_interview.engine.controller import SessionLifecycleController, new_session_id
from mock_interview.engine.exceptions import (
    EvaluationError,
    InvalidQuestionCountError,
    NotCompleteError,
    QuestionGenerationError,
    QuestionIndexMismatchError,
    SessionNotFoundError,
)
from mock_interview.engine.models import SessionStatus
from mock_interview.engine.persistence import PersistenceDispatcher
from mock_interview.engine.session_store import SessionStore


async def answer_all(controller, session_id, count):
    for i in range(count):
        controller.submit_answer(session_id, i, f"answer {i}")


class TestCreateSession:

    @pytest.mark.asyncio
    async def test_create_session(self, controller, generator, store):
        session = await controller.create_session(RESUME_TEXT, 5, resume_id=7)

        assert session.status == SessionStatus.CREATED
        assert session.cursor == 0
        assert session.total_questions == 5
        assert session.resume_id == 7
        assert [slot.index for slot in session.slots] == [0, 1, 2, 3, 4]
        assert generator.calls == [{"resume_text": RESUME_TEXT, "count": 5}]
        assert session.session_id in store

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 2, 21, 3.5, "5", True])
    async def test_invalid_question_count(self, controller, generator, count):
        with pytest.raises(InvalidQuestionCountError):
            await controller.create_session(RESUME_TEXT, count)
        assert generator.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [3, 20])
    async def test_question_count_bounds_accepted(self, controller, count):
        session = await controller.create_session(RESUME_TEXT, count)
        assert session.total_questions == count

    @pytest.mark.asyncio
    async def test_generation_failure_creates_nothing(self, evaluator, store):
        controller = SessionLifecycleController(FakeQuestionGenerator(fail=True), evaluator, store=store)

        with pytest.raises(QuestionGenerationError):
            await controller.create_session(RESUME_TEXT, 3)
        assert store.active_session_count == 0

    @pytest.mark.asyncio
    async def test_generation_timeout_creates_nothing(self, evaluator, store):
        controller = SessionLifecycleController(FakeQuestionGenerator(delay=1.0), evaluator, store=store)

        with pytest.raises(QuestionGenerationError):
            await controller.create_session(RESUME_TEXT, 3, timeout=0.01)
        assert store.active_session_count == 0

    @pytest.mark.asyncio
    async def test_generation_cancelled_creates_nothing(self, evaluator, store):
        controller = SessionLifecycleController(FakeQuestionGenerator(delay=1.0), evaluator, store=store)

        task = asyncio.create_task(controller.create_session(RESUME_TEXT, 3))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert store.active_session_count == 0

    @pytest.mark.asyncio
    async def test_extra_generated_questions_dropped(self, evaluator, store):
        controller = SessionLifecycleController(FakeQuestionGenerator(extra=2), evaluator, store=store)

        session = await controller.create_session(RESUME_TEXT, 3)
        assert session.total_questions == 3

    def test_session_ids_are_unique(self):
        ids = {new_session_id() for _ in range(1000)}
        assert len(ids) == 1000
        assert all(len(i) == 16 for i in ids)


class TestSubmitAnswer:

    @pytest.mark.asyncio
    async def test_in_order_answers_drive_status(self, controller):
        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id

        statuses = []
        for i in range(3):
            result = controller.submit_answer(sid, i, f"answer {i}")
            statuses.append(result.status)

        assert statuses == [SessionStatus.IN_PROGRESS, SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED]
        assert controller.get_current_question(sid) is None
        final = controller.get_session(sid)
        assert final.cursor == 3
        assert [slot.answer for slot in final.slots] == ["answer 0", "answer 1", "answer 2"]

    @pytest.mark.asyncio
    async def test_out_of_order_submission_rejected(self, controller):
        session = await controller.create_session(RESUME_TEXT, 5)
        sid = session.session_id

        with pytest.raises(QuestionIndexMismatchError):
            controller.submit_answer(sid, 2, "too early")

        current = controller.get_session(sid)
        assert current.cursor == 0
        assert current.status == SessionStatus.CREATED
        assert current.slots[2].answer is None

    @pytest.mark.asyncio
    async def test_retried_submission_not_double_applied(self, controller):
        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id
        controller.submit_answer(sid, 0, "first")

        with pytest.raises(QuestionIndexMismatchError):
            controller.submit_answer(sid, 0, "retry")

        current = controller.get_session(sid)
        assert current.cursor == 1
        assert current.slots[0].answer == "first"

    def test_unknown_session(self, controller):
        with pytest.raises(SessionNotFoundError):
            controller.submit_answer("missing", 0, "answer")

    @pytest.mark.asyncio
    async def test_concurrent_submissions_threads(self, controller):
        session = await controller.create_session(RESUME_TEXT, 5)
        sid = session.session_id

        barrier = threading.Barrier(8)
        outcomes = []
        outcomes_lock = threading.Lock()

        def submit(n):
            barrier.wait()
            try:
                controller.submit_answer(sid, 0, f"answer from {n}")
                outcome = "ok"
            except QuestionIndexMismatchError:
                outcome = "mismatch"
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=submit, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("mismatch") == 7
        assert controller.get_session(sid).cursor == 1

    @pytest.mark.asyncio
    async def test_concurrent_submissions_tasks(self, controller):
        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id

        async def submit(text):
            await asyncio.sleep(0)
            return controller.submit_answer(sid, 0, text)

        results = await asyncio.gather(submit("a"), submit("b"), return_exceptions=True)

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], QuestionIndexMismatchError)
        assert controller.get_session(sid).cursor == 1


class TestGenerateReport:

    @pytest.mark.asyncio
    async def test_full_interview_scenario(self, generator, store):
        evaluator = FakeAnswerEvaluator(scores=[60, 85, 91])
        controller = SessionLifecycleController(generator, evaluator, store=store)

        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id
        assert session.status == SessionStatus.CREATED

        controller.submit_answer(sid, 0, "answer 0")
        assert controller.get_session(sid).status == SessionStatus.IN_PROGRESS
        controller.submit_answer(sid, 1, "answer 1")
        controller.submit_answer(sid, 2, "answer 2")
        assert controller.get_session(sid).status == SessionStatus.COMPLETED

        report = await controller.generate_report(sid)

        assert controller.get_session(sid).status == SessionStatus.EVALUATED
        assert report.overall_score == pytest.approx((60 + 85 + 91) / 3)
        assert controller.get_report(sid) == report
        assert [qa.answer for qa in evaluator.calls[0]] == ["answer 0", "answer 1", "answer 2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answers", [0, 1, 2])
    async def test_report_before_completion_rejected(self, controller, evaluator, answers):
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, answers)

        with pytest.raises(NotCompleteError):
            await controller.generate_report(session.session_id)

        assert evaluator.calls == []
        assert controller.get_session(session.session_id).report is None

    @pytest.mark.asyncio
    async def test_report_not_regenerated(self, controller, evaluator):
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)
        first = await controller.generate_report(session.session_id)

        with pytest.raises(NotCompleteError):
            await controller.generate_report(session.session_id)

        assert len(evaluator.calls) == 1
        current = controller.get_session(session.session_id)
        assert current.status == SessionStatus.EVALUATED
        assert current.report == first

    @pytest.mark.asyncio
    async def test_evaluation_failure_keeps_completed_and_allows_retry(self, generator, store):
        evaluator = FakeAnswerEvaluator(fail=True)
        controller = SessionLifecycleController(generator, evaluator, store=store)
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)

        with pytest.raises(EvaluationError):
            await controller.generate_report(session.session_id)

        current = controller.get_session(session.session_id)
        assert current.status == SessionStatus.COMPLETED
        assert current.report is None

        evaluator.fail = False
        report = await controller.generate_report(session.session_id)
        assert report.total_questions == 3
        assert controller.get_session(session.session_id).status == SessionStatus.EVALUATED

    @pytest.mark.asyncio
    async def test_evaluation_cancelled_keeps_completed(self, generator, store):
        controller = SessionLifecycleController(generator, FakeAnswerEvaluator(delay=1.0), store=store)
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)

        task = asyncio.create_task(controller.generate_report(session.session_id))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        current = controller.get_session(session.session_id)
        assert current.status == SessionStatus.COMPLETED
        assert current.report is None

    @pytest.mark.asyncio
    async def test_evaluation_timeout(self, generator, store):
        controller = SessionLifecycleController(generator, FakeAnswerEvaluator(delay=1.0), store=store)
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)

        with pytest.raises(EvaluationError):
            await controller.generate_report(session.session_id, timeout=0.01)
        assert controller.get_session(session.session_id).status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_concurrent_report_generation_commits_once(self, generator, store):
        evaluator = FakeAnswerEvaluator(delay=0.01)
        controller = SessionLifecycleController(generator, evaluator, store=store)
        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)

        results = await asyncio.gather(
            controller.generate_report(session.session_id),
            controller.generate_report(session.session_id),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], NotCompleteError)
        assert controller.get_session(session.session_id).status == SessionStatus.EVALUATED

    @pytest.mark.asyncio
    async def test_get_report_before_evaluation(self, controller):
        session = await controller.create_session(RESUME_TEXT, 3)

        with pytest.raises(NotCompleteError):
            controller.get_report(session.session_id)


class TestPersistenceSideChannel:

    @pytest.mark.asyncio
    async def test_lifecycle_is_persisted(self, controller, persistence):
        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id
        await answer_all(controller, sid, 3)
        await controller.generate_report(sid)
        controller.dispatcher.flush(timeout=5)

        assert persistence.answers == [(sid, 0, "answer 0"), (sid, 1, "answer 1"), (sid, 2, "answer 2")]
        assert persistence.saved[0][1]["status"] == "CREATED"
        assert persistence.saved[-1][1]["status"] == "EVALUATED"
        assert len(persistence.reports) == 1

    @pytest.mark.asyncio
    async def test_persistence_failures_are_logged_not_raised(self, generator, evaluator, store, caplog):
        dispatcher = PersistenceDispatcher(RecordingPersistence(fail=True))
        controller = SessionLifecycleController(generator, evaluator, store=store, dispatcher=dispatcher)

        with caplog.at_level(logging.WARNING, logger="mock_interview.engine.persistence"):
            session = await controller.create_session(RESUME_TEXT, 3)
            await answer_all(controller, session.session_id, 3)
            report = await controller.generate_report(session.session_id)
            dispatcher.flush(timeout=5)

        dispatcher.shutdown()
        assert report.total_questions == 3
        assert controller.get_session(session.session_id).status == SessionStatus.EVALUATED
        assert any("Persistence" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_overlapping_submissions_persist_in_commit_order(
        self, generator, evaluator, store, persistence
    ):
        entered = threading.Event()
        release = threading.Event()

        class GatedDispatcher(PersistenceDispatcher):
            def append_answer(self, session_id, ordinal, answer_text):
                if ordinal == 0:
                    entered.set()
                    release.wait(timeout=5)
                super().append_answer(session_id, ordinal, answer_text)

        dispatcher = GatedDispatcher(persistence)
        controller = SessionLifecycleController(generator, evaluator, store=store, dispatcher=dispatcher)
        session = await controller.create_session(RESUME_TEXT, 3)
        sid = session.session_id

        first = threading.Thread(target=controller.submit_answer, args=(sid, 0, "answer 0"))
        first.start()
        assert entered.wait(timeout=5)

        second = threading.Thread(target=controller.submit_answer, args=(sid, 1, "answer 1"))
        second.start()
        second.join(timeout=0.2)
        # The second commit waits until the first one has queued its writes
        assert second.is_alive()

        release.set()
        first.join(timeout=5)
        second.join(timeout=5)
        dispatcher.flush(timeout=5)
        dispatcher.shutdown()

        assert controller.get_session(sid).cursor == 2
        assert [ordinal for _, ordinal, _ in persistence.answers] == [0, 1]
        assert persistence.saved[-1][1]["cursor"] == 2

    @pytest.mark.asyncio
    async def test_submit_after_dispatcher_shutdown(self, controller, persistence, caplog):
        session = await controller.create_session(RESUME_TEXT, 3)
        controller.dispatcher.shutdown()

        with caplog.at_level(logging.WARNING, logger="mock_interview.engine.persistence"):
            result = controller.submit_answer(session.session_id, 0, "answer 0")

        assert result.current_index == 1
        assert controller.get_session(session.session_id).cursor == 1
        assert any("dropped" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_no_persistence_configured(self, generator, evaluator):
        controller = SessionLifecycleController(generator, evaluator, store=SessionStore())

        session = await controller.create_session(RESUME_TEXT, 3)
        await answer_all(controller, session.session_id, 3)
        report = await controller.generate_report(session.session_id)

        assert report.total_questions == 3


class TestSessionQueries:

    @pytest.mark.asyncio
    async def test_list_and_delete(self, controller):
        a = await controller.create_session(RESUME_TEXT, 3, resume_id=1)
        b = await controller.create_session(RESUME_TEXT, 3, resume_id=2)

        assert {s.session_id for s in controller.list_sessions()} == {a.session_id, b.session_id}
        assert [s.session_id for s in controller.list_sessions(resume_id=2)] == [b.session_id]

        assert controller.delete_session(a.session_id) is True
        with pytest.raises(SessionNotFoundError):
            controller.get_session(a.session_id)
        assert controller.active_session_count == 1
