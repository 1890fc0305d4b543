from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from assessments.answers import save_answer
from assessments.exceptions import QuestionNotInExam, SessionNotActive, Unauthorized
from assessments.models import Answer, ExamSession
from exams.models import Question
from exams.tests.factories import (
    add_question, make_enrollment, make_exam, make_organization, make_session, make_user,
)


class SaveAnswerTests(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.organization = make_organization()
        self.exam = make_exam(self.organization, duration_minutes=30)
        self.first = add_question(self.exam, correct_answer="A")
        self.second = add_question(self.exam, question_type=Question.QuestionType.ESSAY, correct_answer=None)
        self.third = add_question(self.exam, question_type=Question.QuestionType.TRUE_FALSE, correct_answer=True)
        self.candidate = make_user("candidate@example.com", self.organization)
        self.enrollment = make_enrollment(self.exam, self.candidate)
        self.session = make_session(
            self.enrollment,
            status=ExamSession.Status.IN_PROGRESS,
            started_at=self.now - timedelta(minutes=5),
        )

    def test_creates_the_answer_and_tracks_position(self):
        answer = save_answer(self.session.pk, self.third.pk, self.candidate.pk, selected_option="true", now=self.now)

        self.assertEqual(answer.selected_option, "true")
        self.assertFalse(answer.is_flagged)
        self.assertIsNone(answer.is_correct)
        self.session.refresh_from_db()
        self.assertEqual(self.session.last_viewed_question_index, 2)

    def test_last_write_wins(self):
        save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="C", is_flagged=True, now=self.now)
        save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", now=self.now)

        answer = Answer.objects.get(session=self.session, question=self.first)
        self.assertEqual(answer.selected_option, "A")
        self.assertFalse(answer.is_flagged)
        self.assertEqual(self.session.answers.count(), 1)

    def test_essay_response(self):
        save_answer(self.session.pk, self.second.pk, self.candidate.pk, text_response="My essay", now=self.now)
        answer = Answer.objects.get(session=self.session, question=self.second)
        self.assertEqual(answer.text_response, "My essay")
        self.assertIsNone(answer.selected_option)

    def test_explicit_question_index(self):
        save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", question_index=1, now=self.now)
        self.session.refresh_from_db()
        self.assertEqual(self.session.last_viewed_question_index, 1)

    def test_question_index_out_of_range(self):
        with self.assertRaises(ValidationError):
            save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", question_index=3, now=self.now)
        self.assertFalse(Answer.objects.exists())

    def test_question_from_elsewhere(self):
        draft = add_question(self.exam, status=Question.Status.DRAFT)
        foreign = add_question(make_exam(self.organization, title="Other"))
        for question in (draft, foreign):
            with self.assertRaises(QuestionNotInExam):
                save_answer(self.session.pk, question.pk, self.candidate.pk, selected_option="A", now=self.now)

    def test_not_started_session(self):
        self.session.status = ExamSession.Status.NOT_STARTED
        self.session.started_at = None
        self.session.save()
        with self.assertRaises(SessionNotActive):
            save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", now=self.now)

    def test_completed_session_is_frozen(self):
        self.session.status = ExamSession.Status.COMPLETED
        self.session.save()
        with self.assertRaises(SessionNotActive):
            save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", now=self.now)

    def test_expired_session_is_submitted_then_rejected(self):
        save_answer(self.session.pk, self.first.pk, self.candidate.pk, selected_option="A", now=self.now)

        with self.assertRaisesMessage(SessionNotActive, "Time is up"):
            save_answer(
                self.session.pk, self.third.pk, self.candidate.pk,
                selected_option="true", now=self.now + timedelta(minutes=30),
            )

        self.session.refresh_from_db()
        self.assertEqual(self.session.status, ExamSession.Status.COMPLETED)
        self.assertEqual(self.session.completion_reason, ExamSession.CompletionReason.EXPIRED)
        self.assertEqual(self.session.score, 50)
        self.assertFalse(Answer.objects.get(session=self.session, question=self.third).is_correct)

    def test_other_candidate(self):
        intruder = make_user("intruder@example.com", self.organization)
        with self.assertRaises(Unauthorized):
            save_answer(self.session.pk, self.first.pk, intruder.pk, selected_option="A", now=self.now)
