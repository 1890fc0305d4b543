from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from exams.models import Exam, Question
from exams.selectors import list_approved_questions
from exams.tests.factories import add_question, make_exam, make_organization


class ExamWindowTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.organization = make_organization()

    def test_window_without_bounds_contains_everything(self):
        exam = make_exam(self.organization)
        self.assertTrue(exam.window_contains(timezone.now()))

    def test_window_with_one_bound_is_not_enforced(self):
        now = timezone.now()
        exam = make_exam(self.organization, scheduled_end=now - timedelta(days=1))
        self.assertTrue(exam.window_contains(now))

    def test_window_with_both_bounds(self):
        now = timezone.now()
        exam = make_exam(
            self.organization,
            scheduled_start=now,
            scheduled_end=now + timedelta(hours=2),
        )
        self.assertTrue(exam.window_contains(now))
        self.assertTrue(exam.window_contains(now + timedelta(hours=2)))
        self.assertFalse(exam.window_contains(now - timedelta(seconds=1)))
        self.assertFalse(exam.window_contains(now + timedelta(hours=3)))

    def test_only_active_and_scheduled_exams_are_startable(self):
        exam = make_exam(self.organization)
        for status in Exam.Status:
            exam.status = status
            expected = status in (Exam.Status.ACTIVE, Exam.Status.SCHEDULED)
            self.assertEqual(exam.is_startable, expected, status)


class ApprovedQuestionsTests(TestCase):
    def test_only_approved_questions_in_creation_order(self):
        exam = make_exam(make_organization())
        first = add_question(exam, text="first")
        add_question(exam, text="draft", status=Question.Status.DRAFT)
        second = add_question(exam, question_type=Question.QuestionType.ESSAY, correct_answer=None, text="second")
        third = add_question(exam, question_type=Question.QuestionType.TRUE_FALSE, correct_answer=True, text="third")

        questions = list_approved_questions(exam.question_bank_id)

        self.assertEqual([q.pk for q in questions], [first.pk, second.pk, third.pk])
        self.assertEqual([o.label for o in questions[0].options.all()], ["A", "B", "C", "D"])

    def test_objective_types(self):
        self.assertTrue(Question(question_type=Question.QuestionType.MULTIPLE_CHOICE).is_objective)
        self.assertTrue(Question(question_type=Question.QuestionType.TRUE_FALSE).is_objective)
        self.assertFalse(Question(question_type=Question.QuestionType.ESSAY).is_objective)
