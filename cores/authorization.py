"""
Authorization gate consumed by the exam session lifecycle.

The role/permission matrix lives outside this project; the lifecycle only asks
``authorize(user_id, organization_id, permission)`` and gets a yes/no answer.
The callable behind it is configured with ``settings.EXAM_AUTHORIZATION_GATE``.
"""
from django.conf import settings
from django.utils.module_loading import import_string

from .models import OrganizationMembership


class Permission:
    TAKE_EXAM = "take_exam"
    VIEW_OWN_RESULTS = "view_own_results"
    VIEW_PENDING_INVITATIONS = "view_pending_invitations"
    ACCEPT_ENROLLMENT = "accept_enrollment"
    DECLINE_ENROLLMENT = "decline_enrollment"


# Default adapter: which membership roles answer "yes" for each permission.
MEMBERSHIP_PERMISSIONS = {
    Permission.TAKE_EXAM: [OrganizationMembership.Role.CANDIDATE],
    Permission.VIEW_OWN_RESULTS: [OrganizationMembership.Role.CANDIDATE],
    Permission.VIEW_PENDING_INVITATIONS: [OrganizationMembership.Role.CANDIDATE],
    Permission.ACCEPT_ENROLLMENT: [OrganizationMembership.Role.CANDIDATE],
    Permission.DECLINE_ENROLLMENT: [OrganizationMembership.Role.CANDIDATE],
}


def membership_gate(user_id, organization_id, permission):
    roles = MEMBERSHIP_PERMISSIONS.get(permission, [])
    if not roles:
        return False
    return OrganizationMembership.objects.filter(
        user_id=user_id,
        organization_id=organization_id,
        role__in=roles,
    ).exists()


def get_gate():
    return import_string(
        getattr(settings, 'EXAM_AUTHORIZATION_GATE', 'cores.authorization.membership_gate')
    )


def authorize(user_id, organization_id, permission):
    return bool(get_gate()(user_id, organization_id, permission))
