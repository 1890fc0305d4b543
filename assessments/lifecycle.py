"""
Exam session lifecycle operations.

Each function takes the acting candidate's id explicitly and runs its writes
in a single transaction with the session row locked, so start, submit and
expire each fire at most once per session. Expiry is detected lazily:
whenever an operation finds an IN_PROGRESS session past its expiry it is
completed and scored right there.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.utils import timezone

from cores.authorization import Permission
from enrollments.gate import authorize_enrollment, require_permission
from .attempts import try_create_session
from .exceptions import (
    AlreadyStarted, NoActiveSession, NotInProgress, SessionNotFound,
    Unauthorized, WindowClosed,
)
from .models import ExamSession
from .scoring import ScoringResult, score_completed_session
from .states import OPEN_STATUSES, IllegalTransition, SessionEvent
from .windows import is_expired

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResumeResult:
    session_id: int
    auto_submitted: bool = False
    reason: Optional[str] = None
    result: Optional[ScoringResult] = None


@dataclass(frozen=True)
class TimeCheck:
    session_id: int
    status: str
    minutes_remaining: Optional[int]
    auto_submitted: bool = False
    result: Optional[ScoringResult] = None


# --- Helpers ---

def lock_owned_session(session_id, candidate_id):
    """Lock a session row for the rest of the transaction after checking ownership."""
    try:
        session = ExamSession.objects.select_for_update().get(pk=session_id)
    except ExamSession.DoesNotExist:
        raise SessionNotFound()

    if session.candidate_id != candidate_id:
        logger.warning(f"Candidate {candidate_id} tried to access session {session_id}")
        raise Unauthorized()

    require_permission(candidate_id, session.exam.organization_id, Permission.TAKE_EXAM)
    return session


def complete_session(session, event, now):
    """Fire SUBMIT or EXPIRE and score in the caller's transaction."""
    session.transition(event, now)
    session.save(update_fields=['status', 'completed_at', 'completion_reason'])
    logger.info(f"Session {session.pk} completed ({session.completion_reason})")
    return score_completed_session(session)


def expire_if_due(session, now):
    """Auto-submit an IN_PROGRESS session whose time is up. Returns the scoring result, if any."""
    if session.status != ExamSession.Status.IN_PROGRESS:
        return None
    if not is_expired(session.expires_at, now):
        return None
    return complete_session(session, SessionEvent.EXPIRE, now)


# --- Operations ---

def start_exam(enrollment_id, candidate_id, now=None):
    """Create a new attempt for the enrollment. Returns the NOT_STARTED session."""
    now = now or timezone.now()
    authorize_enrollment(enrollment_id, candidate_id, Permission.TAKE_EXAM, now=now)
    return try_create_session(enrollment_id, candidate_id, now=now)


def resume_session(enrollment_id, candidate_id, now=None):
    """
    Find the enrollment's open session. An IN_PROGRESS session that has run
    out of time is submitted and scored instead of being handed back.
    """
    now = now or timezone.now()
    authorize_enrollment(enrollment_id, candidate_id, Permission.TAKE_EXAM, now=now)

    with transaction.atomic():
        session = (
            ExamSession.objects.select_for_update()
            .filter(enrollment_id=enrollment_id, status__in=OPEN_STATUSES)
            .order_by('-created_at', '-id')
            .first()
        )
        if session is None:
            raise NoActiveSession()

        # Never begun and the window has closed: it can no longer be started
        if session.status == ExamSession.Status.NOT_STARTED and is_expired(session.expires_at, now):
            raise WindowClosed()

        result = expire_if_due(session, now)

    if result is not None:
        return ResumeResult(session_id=session.pk, auto_submitted=True, reason="expired", result=result)
    return ResumeResult(session_id=session.pk)


def start_session(session_id, candidate_id, now=None):
    """NOT_STARTED -> IN_PROGRESS. The attempt's clock starts here."""
    now = now or timezone.now()
    with transaction.atomic():
        session = lock_owned_session(session_id, candidate_id)
        try:
            session.transition(SessionEvent.START, now)
        except IllegalTransition:
            raise AlreadyStarted() from None

        scheduled_end = session.exam.scheduled_end
        if scheduled_end is not None and now >= scheduled_end:
            raise WindowClosed()

        session.save(update_fields=['status', 'started_at'])

    logger.info(f"Session {session.pk} started by candidate {candidate_id}")
    return session


def submit_session(session_id, candidate_id, now=None):
    """IN_PROGRESS -> COMPLETED, scored in the same transaction."""
    now = now or timezone.now()
    with transaction.atomic():
        session = lock_owned_session(session_id, candidate_id)
        if session.status != ExamSession.Status.IN_PROGRESS:
            raise NotInProgress()

        # A late submit is recorded as the expiry it really is
        event = SessionEvent.EXPIRE if is_expired(session.expires_at, now) else SessionEvent.SUBMIT
        return complete_session(session, event, now)


def check_session_time(session_id, candidate_id, now=None):
    now = now or timezone.now()
    with transaction.atomic():
        session = lock_owned_session(session_id, candidate_id)
        result = expire_if_due(session, now)

    if result is not None:
        return TimeCheck(
            session_id=session.pk,
            status=session.status,
            minutes_remaining=None,
            auto_submitted=True,
            result=result,
        )
    remaining = None
    if session.status != ExamSession.Status.COMPLETED:
        remaining = session.minutes_remaining(now)
    return TimeCheck(session_id=session.pk, status=session.status, minutes_remaining=remaining)


def get_session_for_candidate(session_id, candidate_id, now=None):
    """Read access to an own session. One found past its expiry is submitted first."""
    now = now or timezone.now()
    with transaction.atomic():
        try:
            session = ExamSession.objects.select_for_update().get(pk=session_id)
        except ExamSession.DoesNotExist:
            raise SessionNotFound()
        if session.candidate_id != candidate_id:
            raise Unauthorized()
        require_permission(candidate_id, session.exam.organization_id, Permission.VIEW_OWN_RESULTS)
        expire_if_due(session, now)
    return session


def list_sessions_for_candidate(candidate_id):
    return ExamSession.objects.filter(candidate_id=candidate_id).select_related('exam')
