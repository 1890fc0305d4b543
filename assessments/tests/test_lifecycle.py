from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from assessments.exceptions import (
    AlreadyStarted, AttemptsExhausted, NoActiveSession, NotInProgress,
    SessionNotFound, Unauthorized, WindowClosed,
)
from assessments.lifecycle import (
    check_session_time, get_session_for_candidate, list_sessions_for_candidate,
    resume_session, start_exam, start_session, submit_session,
)
from assessments.models import Answer, ExamSession
from enrollments.exceptions import EnrollmentNotActive, InvitationExpired
from enrollments.models import Enrollment
from exams.tests.factories import (
    add_question, make_enrollment, make_exam, make_organization, make_session, make_user,
)


class LifecycleTestCase(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.organization = make_organization()
        self.exam = make_exam(self.organization, duration_minutes=60, passing_score=50)
        self.question = add_question(self.exam, correct_answer="B", points=1)
        self.candidate = make_user("candidate@example.com", self.organization)
        self.enrollment = make_enrollment(self.exam, self.candidate)

    def in_progress_session(self, started_minutes_ago=5):
        return make_session(
            self.enrollment,
            status=ExamSession.Status.IN_PROGRESS,
            started_at=self.now - timedelta(minutes=started_minutes_ago),
        )


class StartExamTests(LifecycleTestCase):
    def test_creates_a_not_started_session(self):
        session = start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)
        self.assertEqual(session.status, ExamSession.Status.NOT_STARTED)
        self.assertEqual(session.candidate_id, self.candidate.pk)

    def test_pending_invitation_must_be_accepted_first(self):
        self.enrollment.status = Enrollment.Status.PENDING
        self.enrollment.save()
        with self.assertRaises(EnrollmentNotActive):
            start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_expired_invitation(self):
        self.enrollment.status = Enrollment.Status.PENDING
        self.enrollment.expires_at = self.now - timedelta(days=1)
        self.enrollment.save()
        with self.assertRaises(InvitationExpired):
            start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_rejected_enrollment(self):
        self.enrollment.status = Enrollment.Status.REJECTED
        self.enrollment.save()
        with self.assertRaises(EnrollmentNotActive):
            start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_candidate_without_membership(self):
        self.candidate.memberships.all().delete()
        with self.assertRaises(Unauthorized):
            start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_single_attempt_exam_is_exhausted_after_submit(self):
        session = start_exam(self.enrollment.pk, self.candidate.pk, now=self.now)
        start_session(session.pk, self.candidate.pk, now=self.now)
        submit_session(session.pk, self.candidate.pk, now=self.now + timedelta(minutes=10))

        with self.assertRaises(AttemptsExhausted):
            start_exam(self.enrollment.pk, self.candidate.pk, now=self.now + timedelta(minutes=11))
        self.enrollment.refresh_from_db()
        self.assertEqual(self.enrollment.attempts_used, 1)


class StartSessionTests(LifecycleTestCase):
    def test_starts_the_clock(self):
        session = make_session(self.enrollment)

        started = start_session(session.pk, self.candidate.pk, now=self.now)

        self.assertEqual(started.status, ExamSession.Status.IN_PROGRESS)
        self.assertEqual(started.started_at, self.now)
        self.assertEqual(started.expires_at, self.now + timedelta(minutes=60))

    def test_cannot_start_twice(self):
        session = make_session(self.enrollment)
        start_session(session.pk, self.candidate.pk, now=self.now)

        with self.assertRaises(AlreadyStarted):
            start_session(session.pk, self.candidate.pk, now=self.now + timedelta(minutes=1))
        session.refresh_from_db()
        self.assertEqual(session.started_at, self.now)

    def test_window_closed(self):
        self.exam.scheduled_end = self.now - timedelta(minutes=1)
        self.exam.save()
        session = make_session(self.enrollment)

        with self.assertRaises(WindowClosed):
            start_session(session.pk, self.candidate.pk, now=self.now)
        session.refresh_from_db()
        self.assertEqual(session.status, ExamSession.Status.NOT_STARTED)

    def test_other_candidate(self):
        session = make_session(self.enrollment)
        intruder = make_user("intruder@example.com", self.organization)
        with self.assertRaises(Unauthorized):
            start_session(session.pk, intruder.pk, now=self.now)

    def test_missing_session(self):
        with self.assertRaises(SessionNotFound):
            start_session(999999, self.candidate.pk, now=self.now)


class SubmitSessionTests(LifecycleTestCase):
    def test_submit_scores_in_the_same_step(self):
        session = self.in_progress_session()
        Answer.objects.create(session=session, question=self.question, selected_option="b")

        result = submit_session(session.pk, self.candidate.pk, now=self.now)

        self.assertEqual(result.percentage, 100)
        self.assertTrue(result.passed)
        session.refresh_from_db()
        self.assertEqual(session.status, ExamSession.Status.COMPLETED)
        self.assertEqual(session.completion_reason, ExamSession.CompletionReason.SUBMITTED)
        self.assertEqual(session.completed_at, self.now)
        self.assertEqual(session.score, 100)

    def test_submit_twice(self):
        session = self.in_progress_session()
        submit_session(session.pk, self.candidate.pk, now=self.now)
        with self.assertRaises(NotInProgress):
            submit_session(session.pk, self.candidate.pk, now=self.now)

    def test_not_started(self):
        session = make_session(self.enrollment)
        with self.assertRaises(NotInProgress):
            submit_session(session.pk, self.candidate.pk, now=self.now)

    def test_late_submit_is_recorded_as_expiry(self):
        session = self.in_progress_session(started_minutes_ago=61)

        result = submit_session(session.pk, self.candidate.pk, now=self.now)

        self.assertEqual(result.percentage, 0)
        session.refresh_from_db()
        self.assertEqual(session.completion_reason, ExamSession.CompletionReason.EXPIRED)


class ResumeSessionTests(LifecycleTestCase):
    def test_no_open_session(self):
        with self.assertRaises(NoActiveSession):
            resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_returns_the_open_session(self):
        session = self.in_progress_session()

        resumed = resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)

        self.assertEqual(resumed.session_id, session.pk)
        self.assertFalse(resumed.auto_submitted)

    def test_not_started_session_is_resumable(self):
        session = make_session(self.enrollment)
        resumed = resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)
        self.assertEqual(resumed.session_id, session.pk)

    def test_not_started_session_after_window_end(self):
        session = make_session(self.enrollment)
        self.exam.scheduled_end = self.now - timedelta(hours=1)
        self.exam.save()

        with self.assertRaises(WindowClosed):
            resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)
        session.refresh_from_db()
        self.assertEqual(session.status, ExamSession.Status.NOT_STARTED)

    def test_expired_session_is_submitted_on_resume(self):
        # 60 minute exam started 61 minutes ago
        session = self.in_progress_session(started_minutes_ago=61)
        Answer.objects.create(session=session, question=self.question, selected_option="B")

        resumed = resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)

        self.assertTrue(resumed.auto_submitted)
        self.assertEqual(resumed.reason, "expired")
        self.assertEqual(resumed.result.percentage, 100)
        session.refresh_from_db()
        self.assertEqual(session.status, ExamSession.Status.COMPLETED)
        self.assertEqual(session.completion_reason, ExamSession.CompletionReason.EXPIRED)
        self.assertEqual(session.score, 100)
        self.assertTrue(session.passed)

        with self.assertRaises(NoActiveSession):
            resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)

    def test_window_end_expires_before_duration(self):
        self.exam.scheduled_end = self.now - timedelta(minutes=1)
        self.exam.save()
        self.in_progress_session(started_minutes_ago=10)

        resumed = resume_session(self.enrollment.pk, self.candidate.pk, now=self.now)

        self.assertTrue(resumed.auto_submitted)


class CheckSessionTimeTests(LifecycleTestCase):
    def test_reports_whole_minutes_left(self):
        session = self.in_progress_session(started_minutes_ago=15)

        check = check_session_time(session.pk, self.candidate.pk, now=self.now + timedelta(seconds=30))

        self.assertEqual(check.status, ExamSession.Status.IN_PROGRESS)
        self.assertEqual(check.minutes_remaining, 44)
        self.assertFalse(check.auto_submitted)

    def test_expired_session_is_submitted(self):
        session = self.in_progress_session(started_minutes_ago=60)

        check = check_session_time(session.pk, self.candidate.pk, now=self.now)

        self.assertTrue(check.auto_submitted)
        self.assertEqual(check.status, ExamSession.Status.COMPLETED)
        self.assertIsNone(check.minutes_remaining)
        self.assertEqual(check.result.session_id, session.pk)

    def test_completed_session_has_no_time_left(self):
        session = self.in_progress_session()
        submit_session(session.pk, self.candidate.pk, now=self.now)

        check = check_session_time(session.pk, self.candidate.pk, now=self.now)

        self.assertFalse(check.auto_submitted)
        self.assertIsNone(check.minutes_remaining)


class ReadAccessTests(LifecycleTestCase):
    def test_own_session(self):
        session = make_session(self.enrollment)
        self.assertEqual(get_session_for_candidate(session.pk, self.candidate.pk), session)

    def test_reading_an_overdue_session_submits_it(self):
        session = self.in_progress_session(started_minutes_ago=75)
        Answer.objects.create(session=session, question=self.question, selected_option="B")

        read = get_session_for_candidate(session.pk, self.candidate.pk, now=self.now)

        self.assertEqual(read.status, ExamSession.Status.COMPLETED)
        self.assertEqual(read.completion_reason, ExamSession.CompletionReason.EXPIRED)
        self.assertEqual(read.score, 100)
        session.refresh_from_db()
        self.assertTrue(session.passed)

    def test_reading_a_running_session_leaves_it_running(self):
        session = self.in_progress_session()
        read = get_session_for_candidate(session.pk, self.candidate.pk, now=self.now)
        self.assertEqual(read.status, ExamSession.Status.IN_PROGRESS)

    def test_someone_elses_session(self):
        session = make_session(self.enrollment)
        intruder = make_user("intruder@example.com", self.organization)
        with self.assertRaises(Unauthorized):
            get_session_for_candidate(session.pk, intruder.pk)

    def test_history_lists_only_own_sessions_newest_first(self):
        first = make_session(self.enrollment, status=ExamSession.Status.COMPLETED)
        second = make_session(self.enrollment)
        other = make_user("other@example.com", self.organization)
        make_session(make_enrollment(self.exam, other))

        self.assertEqual(list(list_sessions_for_candidate(self.candidate.pk)), [second, first])
