"""
Attempt counter: creates the session for a new attempt.

Everything the decision depends on is re-read inside the transaction that
creates the session, with the enrollment row locked. Two requests racing to
start the same exam are also stopped by the unique constraints on
ExamSession; the loser is retried once and then sees the winner's session.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, OperationalError, transaction
from django.db.models import F
from django.utils import timezone

from enrollments.exceptions import EnrollmentNotFound
from enrollments.models import Enrollment
from exams.models import Exam
from .exceptions import (
    AlreadyActive, AttemptsExhausted, ExamNotAvailable, OutsideWindow,
    SessionCreationConflict, Unauthorized,
)
from .models import ExamSession
from .states import OPEN_STATUSES

logger = logging.getLogger(__name__)


def _create_session(enrollment_id, candidate_id, now):
    with transaction.atomic():
        # 1. Fresh, locked read of the enrollment and its exam
        try:
            enrollment = Enrollment.objects.select_for_update().get(pk=enrollment_id)
        except Enrollment.DoesNotExist:
            raise EnrollmentNotFound()
        if enrollment.candidate_id != candidate_id:
            raise Unauthorized()
        exam = Exam.objects.get(pk=enrollment.exam_id)

        # 2. Only one open attempt at a time
        if ExamSession.objects.filter(enrollment=enrollment, status__in=OPEN_STATUSES).exists():
            raise AlreadyActive()

        # 3. Exam status and window
        if not exam.is_startable:
            raise ExamNotAvailable()
        if not exam.window_contains(now):
            if now < exam.scheduled_start:
                raise OutsideWindow("Exam has not started yet.")
            raise OutsideWindow("Exam window has closed.")

        # 4. Attempt limit
        attempts = ExamSession.objects.filter(enrollment=enrollment).count()
        if attempts >= exam.allowed_attempts:
            raise AttemptsExhausted()

        # 5. Create the attempt and account for it
        session = ExamSession.objects.create(
            exam=exam,
            enrollment=enrollment,
            candidate_id=candidate_id,
            attempt_number=attempts + 1,
            status=ExamSession.Status.NOT_STARTED,
        )
        Enrollment.objects.filter(pk=enrollment.pk).update(attempts_used=F('attempts_used') + 1)

    return session


def try_create_session(enrollment_id, candidate_id, now=None):
    """
    Create the next NOT_STARTED session for an enrollment.

    Raises AlreadyActive, ExamNotAvailable (OutsideWindow), AttemptsExhausted,
    or SessionCreationConflict once the retries for storage conflicts are used up.
    """
    now = now or timezone.now()
    retries = getattr(settings, 'EXAM_SESSION_CREATE_RETRIES', 1)

    for attempt in range(retries + 1):
        try:
            session = _create_session(enrollment_id, candidate_id, now)
        except (IntegrityError, OperationalError) as e:
            logger.warning(
                f"Conflict creating session for enrollment {enrollment_id} "
                f"(try {attempt + 1} of {retries + 1}): {e}"
            )
            continue

        logger.info(
            f"Created session {session.pk} (attempt {session.attempt_number}) "
            f"for enrollment {enrollment_id}"
        )
        return session

    raise SessionCreationConflict()
