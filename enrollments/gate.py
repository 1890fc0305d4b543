"""
Enrollment gate: decides whether a candidate may start or resume an exam
through a given enrollment. Every lifecycle entry point that takes an
enrollment id goes through here first.
"""
import logging

from django.utils import timezone

from cores.authorization import Permission, authorize
from .exceptions import EnrollmentNotActive, EnrollmentNotFound, InvitationExpired, Unauthorized
from .models import Enrollment

logger = logging.getLogger(__name__)


def load_owned_enrollment(enrollment_id, candidate_id, queryset=None):
    """Fetch an enrollment and make sure it belongs to `candidate_id`."""
    if queryset is None:
        queryset = Enrollment.objects.select_related('exam')
    try:
        enrollment = queryset.get(pk=enrollment_id)
    except Enrollment.DoesNotExist:
        raise EnrollmentNotFound()

    if enrollment.candidate_id != candidate_id:
        logger.warning(
            f"Candidate {candidate_id} tried to use enrollment {enrollment_id} "
            f"owned by {enrollment.candidate_id}"
        )
        raise Unauthorized()
    return enrollment


def require_permission(candidate_id, organization_id, permission):
    if not authorize(candidate_id, organization_id, permission):
        logger.warning(f"Permission {permission} denied for user {candidate_id} in organization {organization_id}")
        raise Unauthorized()


def authorize_enrollment(enrollment_id, candidate_id, permission=Permission.TAKE_EXAM, now=None):
    """
    Return the enrollment if `candidate_id` may use it for `permission`.

    Raises EnrollmentNotFound, Unauthorized, InvitationExpired or
    EnrollmentNotActive.
    """
    now = now or timezone.now()
    enrollment = load_owned_enrollment(enrollment_id, candidate_id)
    require_permission(candidate_id, enrollment.organization_id, permission)

    if enrollment.status == Enrollment.Status.PENDING:
        if enrollment.invitation_expired(now):
            raise InvitationExpired()
        raise EnrollmentNotActive("Accept the invitation before starting this exam.")

    if enrollment.status != Enrollment.Status.ENROLLED:
        raise EnrollmentNotActive()

    return enrollment
