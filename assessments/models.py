# assessments/models.py
from django.db import models
from django.db.models import Q
from django.conf import settings

from enrollments.models import Enrollment
from exams.models import Exam, Question
from .states import OPEN_STATUSES, SessionEvent, SessionStatus, next_status
from .windows import minutes_remaining, session_expiry

class ExamSession(models.Model):
    """Tracks a candidate's specific attempt at an exam."""
    Status = SessionStatus

    class CompletionReason(models.TextChoices):
        SUBMITTED = "submitted", "Submitted by candidate"
        EXPIRED = "expired", "Submitted on expiry"

    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='sessions')
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name='sessions')
    candidate = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='exam_sessions')

    attempt_number = models.PositiveIntegerField()  # 1-based, never reused
    status = models.CharField(max_length=20, choices=SessionStatus.choices, default=SessionStatus.NOT_STARTED)

    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    completion_reason = models.CharField(max_length=20, choices=CompletionReason.choices, blank=True)

    # Resume reopens the exam at this question
    last_viewed_question_index = models.PositiveIntegerField(default=0)

    # Filled in once by the scoring engine
    score = models.PositiveSmallIntegerField(null=True, blank=True)  # percentage
    passed = models.BooleanField(null=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['enrollment', 'attempt_number'],
                name='unique_attempt_number_per_enrollment',
            ),
            models.UniqueConstraint(
                fields=['enrollment'],
                condition=Q(status__in=[s.value for s in OPEN_STATUSES]),
                name='single_open_session_per_enrollment',
            ),
        ]

    def __str__(self):
        return f"{self.candidate} - {self.exam.title} (attempt {self.attempt_number})"

    @property
    def expires_at(self):
        return session_expiry(self.exam.scheduled_end, self.started_at, self.exam.duration_minutes)

    def minutes_remaining(self, now):
        return minutes_remaining(self.expires_at, now)

    def transition(self, event, now):
        """Move along one edge of the state table and stamp the matching timestamp."""
        self.status = next_status(self.status, event)
        if event is SessionEvent.START:
            self.started_at = now
        else:
            self.completed_at = now
            self.completion_reason = (
                self.CompletionReason.EXPIRED if event is SessionEvent.EXPIRE
                else self.CompletionReason.SUBMITTED
            )

class Answer(models.Model):
    session = models.ForeignKey(ExamSession, related_name='answers', on_delete=models.CASCADE)
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='answers')

    selected_option = models.CharField(max_length=50, null=True, blank=True)
    text_response = models.TextField(null=True, blank=True)
    is_flagged = models.BooleanField(default=False)

    # Written by the scoring engine only
    is_correct = models.BooleanField(null=True)
    points = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('session', 'question')

    def __str__(self):
        return f"Answer to question {self.question_id} in session {self.session_id}"
