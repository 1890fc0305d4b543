"""
Errors raised by the exam session lifecycle.

All of them are DRF APIExceptions, so views can let them propagate and the
project exception handler turns them into ``{"error": ..., "code": ...}``.
"""
from rest_framework import status
from rest_framework.exceptions import APIException

from enrollments.exceptions import Unauthorized  # noqa: F401


# --- State conflicts ---

class AlreadyActive(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You already have an active session for this exam."
    default_code = "already_active"


class AttemptsExhausted(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Maximum attempts reached."
    default_code = "attempts_exhausted"


class AlreadyStarted(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This session has already been started."
    default_code = "already_started"


class NotInProgress(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This session is not in progress."
    default_code = "not_in_progress"


class SessionNotActive(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This session is no longer accepting answers."
    default_code = "session_not_active"


# --- Window errors ---

class ExamNotAvailable(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Exam is not available."
    default_code = "exam_not_available"


class OutsideWindow(ExamNotAvailable):
    default_detail = "Exam is outside its scheduled window."
    default_code = "outside_window"


class WindowClosed(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Exam window has closed."
    default_code = "window_closed"


# --- Lookups and input ---

class SessionNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Exam session not found."
    default_code = "session_not_found"


class NoActiveSession(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No active session found."
    default_code = "no_active_session"


class QuestionNotInExam(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This question is not part of the exam."
    default_code = "question_not_in_exam"


# --- Transient ---

class SessionCreationConflict(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Failed to start exam. Please try again."
    default_code = "session_creation_conflict"
