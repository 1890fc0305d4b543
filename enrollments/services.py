import logging

from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from assessments.models import ExamSession
from cores.authorization import Permission, authorize
from .exceptions import InvitationExpired, InvitationNotPending
from .gate import load_owned_enrollment, require_permission
from .models import Enrollment

logger = logging.getLogger(__name__)


def _permitted(candidate_id, enrollments, permission):
    allowed = {}
    result = []
    for enrollment in enrollments:
        org_id = enrollment.organization_id
        if org_id not in allowed:
            allowed[org_id] = authorize(candidate_id, org_id, permission)
        if allowed[org_id]:
            result.append(enrollment)
    return result


def list_pending_invitations(candidate_id, now=None):
    """Pending invitations, newest first. Expired ones are kept but flagged."""
    now = now or timezone.now()
    enrollments = (
        Enrollment.objects.filter(candidate_id=candidate_id, status=Enrollment.Status.PENDING)
        .select_related('exam', 'organization')
        .order_by('-invited_at')
    )
    invitations = _permitted(candidate_id, enrollments, Permission.VIEW_PENDING_INVITATIONS)
    for enrollment in invitations:
        enrollment.is_expired = enrollment.invitation_expired(now)
    return invitations


def list_enrolled_exams(candidate_id):
    enrollments = (
        Enrollment.objects.filter(candidate_id=candidate_id, status=Enrollment.Status.ENROLLED)
        .select_related('exam', 'exam__organization')
        .prefetch_related(Prefetch(
            'sessions',
            queryset=ExamSession.objects.select_related('exam').order_by('-created_at', '-id'),
            to_attr='recent_sessions',
        ))
        .order_by('exam__scheduled_start', 'id')
    )
    return _permitted(candidate_id, enrollments, Permission.TAKE_EXAM)


def _lock_pending(enrollment_id, candidate_id, permission):
    enrollment = load_owned_enrollment(
        enrollment_id, candidate_id,
        queryset=Enrollment.objects.select_for_update(),
    )
    require_permission(candidate_id, enrollment.organization_id, permission)
    if enrollment.status != Enrollment.Status.PENDING:
        raise InvitationNotPending()
    return enrollment


def accept_invitation(enrollment_id, candidate_id, now=None):
    now = now or timezone.now()
    with transaction.atomic():
        enrollment = _lock_pending(enrollment_id, candidate_id, Permission.ACCEPT_ENROLLMENT)
        if enrollment.invitation_expired(now):
            raise InvitationExpired()

        # Candidate approves their own enrollment
        enrollment.status = Enrollment.Status.ENROLLED
        enrollment.approved_by_id = candidate_id
        enrollment.approved_at = now
        enrollment.save(update_fields=['status', 'approved_by', 'approved_at'])

    logger.info(f"Enrollment {enrollment.pk} accepted by candidate {candidate_id}")
    return enrollment


def decline_invitation(enrollment_id, candidate_id):
    with transaction.atomic():
        enrollment = _lock_pending(enrollment_id, candidate_id, Permission.DECLINE_ENROLLMENT)
        enrollment.status = Enrollment.Status.REJECTED
        enrollment.save(update_fields=['status'])

    logger.info(f"Enrollment {enrollment.pk} declined by candidate {candidate_id}")
    return enrollment
