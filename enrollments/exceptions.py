from rest_framework import status
from rest_framework.exceptions import APIException


class Unauthorized(APIException):
    """The caller does not own the enrollment or session, or lacks the permission."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to access this exam."
    default_code = "unauthorized"


class EnrollmentNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Enrollment not found."
    default_code = "enrollment_not_found"


class EnrollmentNotActive(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "This enrollment is not active."
    default_code = "enrollment_not_active"


class InvitationExpired(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "This invitation has expired."
    default_code = "invitation_expired"


class InvitationNotPending(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Enrollment is not in pending status."
    default_code = "invitation_not_pending"
