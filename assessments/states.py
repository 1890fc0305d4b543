"""
Exam session states and the only legal edges between them.

    NOT_STARTED --start--> IN_PROGRESS --submit--> COMPLETED
                           IN_PROGRESS --expire--> COMPLETED

Every edge is one-way. Nothing leaves COMPLETED.
"""
import enum

from django.db import models


class SessionStatus(models.TextChoices):
    NOT_STARTED = "NOT_STARTED", "Not Started"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    COMPLETED = "COMPLETED", "Completed"


# A session in one of these states still counts as the enrollment's active attempt
OPEN_STATUSES = (SessionStatus.NOT_STARTED, SessionStatus.IN_PROGRESS)


class SessionEvent(enum.Enum):
    START = "start"
    SUBMIT = "submit"
    EXPIRE = "expire"


TRANSITIONS = {
    (SessionStatus.NOT_STARTED, SessionEvent.START): SessionStatus.IN_PROGRESS,
    (SessionStatus.IN_PROGRESS, SessionEvent.SUBMIT): SessionStatus.COMPLETED,
    (SessionStatus.IN_PROGRESS, SessionEvent.EXPIRE): SessionStatus.COMPLETED,
}


class IllegalTransition(Exception):
    def __init__(self, status, event):
        self.status = status
        self.event = event
        super().__init__(f"Cannot {event.value} a session that is {status}")


def next_status(status, event):
    """Target state for `event` fired in `status`, or IllegalTransition."""
    try:
        return TRANSITIONS[(SessionStatus(status), event)]
    except KeyError:
        raise IllegalTransition(status, event) from None
